"""
Test Configuration
==================

Pytest fixtures and synthetic images for CardGate.

All images are generated with fixed seeds so every run sees the same
pixels.
"""

import cv2
import numpy as np
import pytest

from card_gate.models.buffers import PixelBuffer


def make_solid_image(width: int, height: int, value=(128, 128, 128)) -> np.ndarray:
    """Uniform RGB image."""
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[...] = value
    return image


def make_card_image(width: int = 600, height: int = 840, seed: int = 7) -> np.ndarray:
    """
    Synthetic card photo.

    Dark background, centred bright card covering the middle two thirds of
    the frame, a darker art box in its upper half, and a fine random
    texture over the whole card face.
    """
    rng = np.random.default_rng(seed)
    image = make_solid_image(width, height, (20, 20, 20))

    x0, x1 = width // 6, width - width // 6
    y0, y1 = height // 6, height - height // 6
    card_w, card_h = x1 - x0, y1 - y0

    face = np.full((card_h, card_w), 190, dtype=np.int16)
    face[card_h // 10:card_h // 2, card_w // 8:card_w - card_w // 8] = 70
    face += rng.integers(-40, 41, size=(card_h, card_w), dtype=np.int16)

    image[y0:y1, x0:x1] = np.clip(face, 0, 255).astype(np.uint8)[..., None]
    return image


def make_noise_image(width: int = 600, height: int = 840, seed: int = 11) -> np.ndarray:
    """Uniform random noise over every pixel and channel."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def encode_png(rgb: np.ndarray) -> bytes:
    """Lossless PNG bytes for an RGB array."""
    ok, encoded = cv2.imencode(".png", cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return encoded.tobytes()


def encode_jpeg(rgb: np.ndarray, quality: int = 95) -> bytes:
    """JPEG bytes for an RGB array."""
    ok, encoded = cv2.imencode(
        ".jpg",
        cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR),
        [cv2.IMWRITE_JPEG_QUALITY, quality],
    )
    assert ok
    return encoded.tobytes()


@pytest.fixture
def card_image() -> np.ndarray:
    """600x840 synthetic card photo."""
    return make_card_image()


@pytest.fixture
def blurred_card_image(card_image) -> np.ndarray:
    """The card photo after a heavy Gaussian blur."""
    return cv2.GaussianBlur(card_image, (0, 0), sigmaX=17)


@pytest.fixture
def noise_image() -> np.ndarray:
    """600x840 uniform noise, no rectangular structure."""
    return make_noise_image()


@pytest.fixture
def card_buffer(card_image) -> PixelBuffer:
    return PixelBuffer(card_image)


@pytest.fixture
def card_png(card_image) -> bytes:
    return encode_png(card_image)
