"""
Pixel Buffers
=============

Typed containers for decoded image data.

Both buffers wrap a numpy array and are immutable: the wrapped array is a
read-only view, so analysis code can never write back into the caller's
pixels.

Invariants:
    - PixelBuffer: shape (height, width, channels), channels in {3, 4},
      dtype uint8, size == width * height * channels
    - GrayscaleBuffer: shape (height, width), dtype float64

Violations raise BufferInvariantError. These indicate a programming
defect (not bad user input) and are never converted into a verdict.
"""

from dataclasses import dataclass

import numpy as np


class BufferInvariantError(ValueError):
    """Raised when a buffer's samples do not match its declared layout."""
    pass


def _readonly_view(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """
    Decoded RGB or RGBA image.

    Attributes:
        pixels: Array of shape (H, W, C), dtype uint8, channel order RGB(A)
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate layout and freeze the wrapped array."""
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise BufferInvariantError(
                f"PixelBuffer requires a numpy array, got {type(pixels).__name__}"
            )
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise BufferInvariantError(
                f"PixelBuffer must have shape (H, W, 3|4), got {pixels.shape}"
            )
        if pixels.dtype != np.uint8:
            raise BufferInvariantError(
                f"PixelBuffer must be uint8, got {pixels.dtype}"
            )
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise BufferInvariantError(
                f"PixelBuffer must not be empty, got {pixels.shape}"
            )
        object.__setattr__(self, "pixels", _readonly_view(pixels))

    @classmethod
    def from_bytes(
        cls,
        width: int,
        height: int,
        channels: int,
        data: bytes,
    ) -> "PixelBuffer":
        """
        Build a buffer from a flat, row-major sample sequence.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            channels: Samples per pixel (3 for RGB, 4 for RGBA)
            data: width * height * channels bytes

        Raises:
            BufferInvariantError: If len(data) does not match the layout
        """
        expected = width * height * channels
        if len(data) != expected:
            raise BufferInvariantError(
                f"Sample count mismatch: {width}x{height}x{channels} "
                f"needs {expected} bytes, got {len(data)}"
            )
        flat = np.frombuffer(data, dtype=np.uint8)
        return cls(flat.reshape(height, width, channels))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def rgb(self) -> np.ndarray:
        """Color samples without alpha, shape (H, W, 3)."""
        return self.pixels[..., :3]

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return (
            f"PixelBuffer(width={self.width}, height={self.height}, "
            f"channels={self.channels})"
        )


@dataclass(frozen=True, slots=True)
class GrayscaleBuffer:
    """
    Luminance projection of a PixelBuffer.

    Attributes:
        luma: Array of shape (H, W), dtype float64
    """

    luma: np.ndarray

    def __post_init__(self) -> None:
        luma = self.luma
        if not isinstance(luma, np.ndarray) or luma.ndim != 2:
            raise BufferInvariantError(
                f"GrayscaleBuffer must be a 2D array, got "
                f"{getattr(luma, 'shape', type(luma).__name__)}"
            )
        if luma.dtype != np.float64:
            raise BufferInvariantError(
                f"GrayscaleBuffer must be float64, got {luma.dtype}"
            )
        object.__setattr__(self, "luma", _readonly_view(luma))

    @property
    def width(self) -> int:
        return int(self.luma.shape[1])

    @property
    def height(self) -> int:
        return int(self.luma.shape[0])

    @property
    def interior_pixel_count(self) -> int:
        """Pixels with all four neighbours in bounds."""
        return max(0, self.width - 2) * max(0, self.height - 2)

    def __repr__(self) -> str:
        return f"GrayscaleBuffer(width={self.width}, height={self.height})"
