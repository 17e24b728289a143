"""
Downsampler
===========

Produces the bounded-size working copy used by every pixel analysis.

The analyses are statistical rather than perceptual, so nearest-neighbour
resampling is used: it is deterministic and keeps hard edges hard.
Cost of the later stages is therefore roughly constant regardless of the
resolution of the submitted photo.
"""

import logging
from typing import Tuple

import cv2

from card_gate.models.buffers import PixelBuffer


logger = logging.getLogger(__name__)


def scaled_dimensions(width: int, height: int, max_size: int) -> Tuple[int, int]:
    """
    Target (width, height) so that the longer side is at most max_size.

    Aspect ratio is preserved; the image is never enlarged. Integer
    arithmetic gives floor(side * max_size / longest) exactly.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be positive, got {max_size}")
    longest = max(width, height)
    if longest <= max_size:
        return width, height
    return (
        max(1, width * max_size // longest),
        max(1, height * max_size // longest),
    )


def downsample(buffer: PixelBuffer, max_size: int = 300) -> PixelBuffer:
    """
    Scale a buffer down so that max(width, height) <= max_size.

    Args:
        buffer: Source pixels (not modified)
        max_size: Longest side of the result in pixels

    Returns:
        A new PixelBuffer, or the input itself when it is already small enough
    """
    new_width, new_height = scaled_dimensions(buffer.width, buffer.height, max_size)

    if (new_width, new_height) == (buffer.width, buffer.height):
        return buffer

    resized = cv2.resize(
        buffer.pixels,
        (new_width, new_height),
        interpolation=cv2.INTER_NEAREST,
    )
    logger.debug(
        f"Downsampled {buffer.width}x{buffer.height} -> {new_width}x{new_height}"
    )
    return PixelBuffer(resized)
