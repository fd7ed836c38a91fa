"""Tests for JPEG encoding and the base64 text form."""

import base64
from io import BytesIO

import pytest
from PIL import Image

from thumbnail.encoder import (
    DATA_URI_PREFIX,
    decode_base64,
    encode_base64,
    encode_jpeg,
    to_data_uri,
)
from thumbnail.errors import EncodeError
from thumbnail.pixels import PixelBuffer


@pytest.mark.parametrize("data, padding", [
    (b"", 0),
    (b"M", 2),
    (b"Ma", 1),
    (b"Man", 0),
    (bytes(range(256)) * 3, 0),       # 768 % 3 == 0
    (bytes(range(256)) * 3 + b"x", 2),
    (bytes(range(256)) * 3 + b"xy", 1),
])
def test_padding_and_round_trip(data, padding):
    text = encode_base64(data)
    assert len(text) % 4 == 0
    assert len(text) - len(text.rstrip("=")) == padding
    assert decode_base64(text) == data


def test_known_vectors():
    assert encode_base64(b"Man") == "TWFu"
    assert encode_base64(b"Ma") == "TWE="
    assert encode_base64(b"M") == "TQ=="
    assert encode_base64(b"\xfb\xff\xbf") == "+/+/"


def test_matches_standard_library_encoding():
    data = bytes((i * 37) % 256 for i in range(1000))
    assert encode_base64(data) == base64.b64encode(data).decode("ascii")


def test_decode_rejects_bad_length():
    with pytest.raises(ValueError, match="multiple of 4"):
        decode_base64("TWF")


def test_decode_rejects_bad_character():
    with pytest.raises(ValueError, match="invalid base64 character"):
        decode_base64("TW-u")


def test_decode_rejects_padding_in_the_middle():
    with pytest.raises(ValueError, match="padding"):
        decode_base64("TQ==TWFu")


def test_data_uri_prefix():
    assert to_data_uri("TWFu") == "data:image/jpeg;base64,TWFu"
    assert DATA_URI_PREFIX.endswith("base64,")


def test_encode_jpeg_produces_decodable_jpeg():
    buf = PixelBuffer.solid(20, 10, (200, 100, 50, 255))
    jpeg = encode_jpeg(buf, quality=40)

    assert jpeg[:3] == b"\xff\xd8\xff"
    with Image.open(BytesIO(jpeg)) as img:
        assert img.format == "JPEG"
        assert img.size == (20, 10)
        assert img.mode == "RGB"


def test_higher_quality_is_not_smaller():
    buf = PixelBuffer(16, 16, bytearray((i * 7) % 256 for i in range(16 * 16 * 4)))
    assert len(encode_jpeg(buf, 95)) >= len(encode_jpeg(buf, 5))


@pytest.mark.parametrize("quality", [0, 101, -5])
def test_encode_jpeg_rejects_quality_out_of_range(quality):
    with pytest.raises(ValueError):
        encode_jpeg(PixelBuffer.solid(2, 2, (0, 0, 0, 255)), quality)


def test_encode_jpeg_rejects_empty_buffer():
    with pytest.raises(EncodeError, match="empty image"):
        encode_jpeg(PixelBuffer(0, 0, bytearray()), 40)
