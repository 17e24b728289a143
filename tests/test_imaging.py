"""
Imaging Tests
=============

Decoder, downsampler and grayscale projection.
"""

import base64

import cv2
import numpy as np
import pytest

from card_gate.imaging.decoder import (
    ImageDecodeError,
    base64_payload_size,
    decode_image,
    format_bytes,
    strip_data_url,
)
from card_gate.imaging.grayscale import to_grayscale
from card_gate.imaging.resample import downsample, scaled_dimensions
from card_gate.models.buffers import PixelBuffer

from conftest import encode_jpeg, encode_png, make_solid_image


class TestDecoder:
    """Tests for decode_image."""

    def test_png_round_trip_keeps_rgb_order(self):
        image = make_solid_image(20, 10, (255, 0, 0))
        buffer = decode_image(encode_png(image))
        assert (buffer.width, buffer.height, buffer.channels) == (20, 10, 3)
        assert tuple(buffer.pixels[0, 0]) == (255, 0, 0)

    def test_jpeg_decodes(self, card_image):
        buffer = decode_image(encode_jpeg(card_image))
        assert (buffer.width, buffer.height) == (600, 840)

    def test_base64_and_data_url(self):
        png = encode_png(make_solid_image(8, 8, (0, 0, 255)))
        text = base64.b64encode(png).decode("ascii")

        plain = decode_image(text)
        data_url = decode_image(f"data:image/png;base64,{text}")

        assert np.array_equal(plain.pixels, data_url.pixels)
        assert tuple(plain.pixels[3, 3]) == (0, 0, 255)

    def test_line_wrapped_base64(self, card_image):
        png = encode_png(card_image)
        wrapped = base64.encodebytes(png).decode("ascii")
        assert "\n" in wrapped

        expected = decode_image(png)
        assert np.array_equal(decode_image(wrapped).pixels, expected.pixels)
        assert np.array_equal(
            decode_image("data:image/png;base64,\r\n" + wrapped.replace("\n", "\r\n")).pixels,
            expected.pixels,
        )

    def test_rgba_png_decodes_to_rgb(self):
        rgba = np.zeros((6, 6, 4), dtype=np.uint8)
        rgba[..., 1] = 200
        rgba[..., 3] = 255
        ok, encoded = cv2.imencode(".png", cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))
        assert ok
        buffer = decode_image(encoded.tobytes())
        assert buffer.channels == 3
        assert tuple(buffer.pixels[0, 0]) == (0, 200, 0)

    @pytest.mark.parametrize(
        "payload",
        [
            b"",
            b"definitely not an image",
            encode_png(make_solid_image(8, 8))[:40],
            "%%% not base64 %%%",
            "",
        ],
    )
    def test_undecodable_payloads_raise(self, payload):
        with pytest.raises(ImageDecodeError):
            decode_image(payload)

    def test_unsupported_payload_type(self):
        with pytest.raises(ImageDecodeError, match="Unsupported payload type"):
            decode_image(12345)


class TestPayloadHelpers:
    """Tests for payload size helpers."""

    def test_strip_data_url(self):
        assert strip_data_url("data:image/jpeg;base64,AAAA") == "AAAA"
        assert strip_data_url("AAAA") == "AAAA"

    def test_base64_payload_size(self):
        raw = bytes(1000)
        text = base64.b64encode(raw).decode("ascii")
        # Padding makes the estimate round up to whole 3-byte groups
        assert base64_payload_size(text) == 1002
        assert base64_payload_size("data:image/png;base64," + text) == 1002
        assert base64_payload_size("AAAA") == 3

    def test_base64_payload_size_ignores_line_breaks(self):
        raw = bytes(1000)
        wrapped = base64.encodebytes(raw).decode("ascii")
        assert base64_payload_size(wrapped) == 1002
        assert base64_payload_size("AA AA\n") == 3

    @pytest.mark.parametrize(
        "num_bytes,expected",
        [
            (512, "512 B"),
            (1536, "1.5 KB"),
            (2 * 1024 * 1024, "2.0 MB"),
        ],
    )
    def test_format_bytes(self, num_bytes, expected):
        assert format_bytes(num_bytes) == expected


class TestDownsample:
    """Tests for the working-copy downsampler."""

    def test_scaled_dimensions_portrait(self):
        assert scaled_dimensions(600, 840, 300) == (214, 300)

    def test_scaled_dimensions_never_upscale(self):
        assert scaled_dimensions(120, 80, 300) == (120, 80)

    def test_small_buffer_returned_unchanged(self):
        buffer = PixelBuffer(make_solid_image(100, 50))
        assert downsample(buffer, 300) is buffer

    @pytest.mark.parametrize("size", [(4000, 6000), (301, 300), (1000, 334), (333, 999)])
    def test_longest_side_bounded(self, size):
        width, height = size
        buffer = PixelBuffer(make_solid_image(width, height))
        result = downsample(buffer, 300)
        assert max(result.width, result.height) <= 300
        assert abs(result.width / result.height - width / height) < 0.02

    def test_input_not_mutated(self, card_image):
        original = card_image.copy()
        downsample(PixelBuffer(card_image), 300)
        assert np.array_equal(card_image, original)

    def test_rgba_channels_preserved(self):
        buffer = PixelBuffer(np.zeros((600, 400, 4), dtype=np.uint8))
        assert downsample(buffer, 300).channels == 4

    def test_nearest_neighbour_keeps_sample_values(self, card_image):
        result = downsample(PixelBuffer(card_image), 300)
        assert set(np.unique(result.pixels)) <= set(np.unique(card_image))


class TestGrayscale:
    """Tests for luminance projection."""

    def test_weights(self):
        buffer = PixelBuffer(make_solid_image(3, 3, (255, 0, 0)))
        gray = to_grayscale(buffer)
        assert gray.luma[1, 1] == pytest.approx(0.299 * 255)

        buffer = PixelBuffer(make_solid_image(3, 3, (10, 20, 30)))
        assert to_grayscale(buffer).luma[0, 0] == pytest.approx(
            0.299 * 10 + 0.587 * 20 + 0.114 * 30
        )

    def test_layout_preserved(self):
        gray = to_grayscale(PixelBuffer(make_solid_image(7, 5)))
        assert (gray.width, gray.height) == (7, 5)
        assert gray.luma.dtype == np.float64

    def test_alpha_ignored(self):
        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        rgba[..., 3] = np.arange(16, dtype=np.uint8).reshape(4, 4)
        gray = to_grayscale(PixelBuffer(rgba))
        assert np.all(gray.luma == 0.0)
