"""
Grayscale Converter
===================

Luminance projection shared by the sharpness and edge analyses.

Formula:
    Y = 0.299 R + 0.587 G + 0.114 B   (ITU-R BT.601 weights)

Computed in float64 rather than with cv2.cvtColor, which rounds back to
uint8 and would flatten the small gradients the focus measure relies on.
"""

import numpy as np

from card_gate.models.buffers import GrayscaleBuffer, PixelBuffer


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def to_grayscale(buffer: PixelBuffer) -> GrayscaleBuffer:
    """Project RGB(A) pixels to float64 luminance; alpha is ignored."""
    luma = buffer.rgb.astype(np.float64) @ LUMA_WEIGHTS
    return GrayscaleBuffer(np.ascontiguousarray(luma))
