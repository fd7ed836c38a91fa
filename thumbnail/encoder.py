"""
JPEG encoding and the text-safe (base64) form of the result.

The base64 encoder works on the standard alphabet directly: every 3 input
bytes become 4 characters, a trailing single byte becomes 2 characters plus
"==", and a trailing pair becomes 3 characters plus "=".

    b"Man" → "TWFu"      b"Ma" → "TWE="      b"M" → "TQ=="
"""

from io import BytesIO

from thumbnail.errors import EncodeError
from thumbnail.pixels import PixelBuffer

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD = "="
DATA_URI_PREFIX = "data:image/jpeg;base64,"

_DECODE_TABLE = {ch: i for i, ch in enumerate(ALPHABET)}


def encode_jpeg(buffer: PixelBuffer, quality: int) -> bytes:
    """Encode RGBA pixels as a JPEG. Alpha is dropped, JPEG has no alpha channel."""
    if not 1 <= quality <= 100:
        raise ValueError(f"JPEG quality must be between 1 and 100, got {quality}")
    if buffer.is_empty:
        raise EncodeError(
            f"failed to encode thumbnail: empty image {buffer.width}x{buffer.height}"
        )

    out = BytesIO()
    try:
        buffer.to_image().convert("RGB").save(out, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise EncodeError(f"failed to encode thumbnail: {e}") from e
    return out.getvalue()


def encode_base64(data: bytes) -> str:
    chars: list[str] = []
    full = len(data) - len(data) % 3

    for i in range(0, full, 3):
        block = (data[i] << 16) | (data[i + 1] << 8) | data[i + 2]
        chars.append(ALPHABET[(block >> 18) & 0x3F])
        chars.append(ALPHABET[(block >> 12) & 0x3F])
        chars.append(ALPHABET[(block >> 6) & 0x3F])
        chars.append(ALPHABET[block & 0x3F])

    remainder = len(data) - full
    if remainder == 1:
        block = data[full] << 16
        chars.append(ALPHABET[(block >> 18) & 0x3F])
        chars.append(ALPHABET[(block >> 12) & 0x3F])
        chars.append(PAD * 2)
    elif remainder == 2:
        block = (data[full] << 16) | (data[full + 1] << 8)
        chars.append(ALPHABET[(block >> 18) & 0x3F])
        chars.append(ALPHABET[(block >> 12) & 0x3F])
        chars.append(ALPHABET[(block >> 6) & 0x3F])
        chars.append(PAD)

    return "".join(chars)


def decode_base64(text: str) -> bytes:
    """Inverse of encode_base64. Raises ValueError on malformed input."""
    if len(text) % 4:
        raise ValueError(f"base64 text length must be a multiple of 4, got {len(text)}")

    out = bytearray()
    for i in range(0, len(text), 4):
        quad = text[i:i + 4]
        padding = len(quad) - len(quad.rstrip(PAD))
        if padding > 2 or (padding and i + 4 != len(text)):
            raise ValueError(f"unexpected padding at offset {i}")

        block = 0
        for ch in quad[:4 - padding]:
            value = _DECODE_TABLE.get(ch)
            if value is None:
                raise ValueError(f"invalid base64 character {ch!r}")
            block = (block << 6) | value
        block <<= 6 * padding

        out.append((block >> 16) & 0xFF)
        if padding < 2:
            out.append((block >> 8) & 0xFF)
        if padding < 1:
            out.append(block & 0xFF)

    return bytes(out)


def to_data_uri(payload: str) -> str:
    return DATA_URI_PREFIX + payload
