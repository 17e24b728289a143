"""
Imaging Module
==============

Pixel plumbing for the validation pipeline:
    - decode_image: Encoded payload -> PixelBuffer
    - downsample: Bounded-size working copy
    - to_grayscale: Luminance projection

No heuristics live here; see card_gate.analysis.
"""

from card_gate.imaging.decoder import (
    ImageDecodeError,
    base64_payload_size,
    decode_image,
    format_bytes,
    normalize_base64,
)
from card_gate.imaging.resample import downsample, scaled_dimensions
from card_gate.imaging.grayscale import to_grayscale

__all__ = [
    "ImageDecodeError",
    "decode_image",
    "base64_payload_size",
    "format_bytes",
    "normalize_base64",
    "downsample",
    "scaled_dimensions",
    "to_grayscale",
]
