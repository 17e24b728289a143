"""
Image Decoder
=============

Dedicated module for decoding encoded image payloads into PixelBuffers.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Accepts raw bytes, bare base64 text, or a data URL
    - Fails fast with ImageDecodeError on corrupt or unsupported input
    - Returns RGB channel order (OpenCV decodes BGR)
"""

import base64
import binascii
import logging
import re
from typing import Union

import cv2
import numpy as np

from card_gate.models.buffers import PixelBuffer


logger = logging.getLogger(__name__)


ImagePayload = Union[bytes, bytearray, memoryview, str]

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)


class ImageDecodeError(Exception):
    """Raised when image decoding fails."""
    pass


def strip_data_url(text: str) -> str:
    """Remove a leading `data:image/...;base64,` prefix if present."""
    return _DATA_URL_PREFIX.sub("", text.strip(), count=1)


def normalize_base64(text: str) -> str:
    """Strip any data URL prefix and the line breaks or spaces of wrapped base64."""
    return "".join(strip_data_url(text).split())


def payload_to_bytes(payload: ImagePayload) -> bytes:
    """
    Normalize a payload to encoded image bytes.

    Strings are treated as base64 (optionally wrapped in a data URL).
    Whitespace inside the base64 text is ignored, so MIME-style line
    wrapping decodes the same as a single line.

    Raises:
        ImageDecodeError: If the payload is empty or not valid base64
    """
    if isinstance(payload, str):
        try:
            data = base64.b64decode(normalize_base64(payload), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(f"Base64 decode failed: {e}")
    elif isinstance(payload, (bytes, bytearray, memoryview)):
        data = bytes(payload)
    else:
        raise ImageDecodeError(
            f"Unsupported payload type: {type(payload).__name__}"
        )

    if not data:
        raise ImageDecodeError("Empty image payload")
    return data


def decode_image(payload: ImagePayload) -> PixelBuffer:
    """
    Decode an encoded image to an RGB PixelBuffer.

    Args:
        payload: JPEG/PNG (or any OpenCV-readable format) as raw bytes,
            base64 text, or a data URL

    Returns:
        PixelBuffer of shape (H, W, 3), dtype uint8, RGB order

    Raises:
        ImageDecodeError: If decoding fails or the image is invalid
    """
    data = payload_to_bytes(payload)

    try:
        nparr = np.frombuffer(data, np.uint8)
        bgr = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodeError(f"OpenCV failed to decode image: {e}")

    if bgr is None:
        raise ImageDecodeError("cv2.imdecode returned None (corrupt or unsupported image)")

    if bgr.ndim != 3 or bgr.shape[2] != 3:
        raise ImageDecodeError(f"Invalid decoded image shape: {bgr.shape}")

    if bgr.dtype != np.uint8:
        raise ImageDecodeError(f"Invalid decoded dtype: {bgr.dtype}")

    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    logger.debug(f"Decoded image: {rgb.shape[1]}x{rgb.shape[0]} from {len(data)} bytes")
    return PixelBuffer(rgb)


def base64_payload_size(text: str) -> int:
    """
    Decoded size in bytes of a base64 string or data URL.

    Estimated from the text length (4 characters encode 3 bytes), so it is
    cheap enough to run before decoding.
    """
    return (len(normalize_base64(text)) * 3 + 3) // 4


def format_bytes(num_bytes: int) -> str:
    """Human-readable byte count: '512 B', '1.5 KB', '2.0 MB'."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"
