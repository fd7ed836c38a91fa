"""
Format detection by declared MIME type or magic numbers.

The declared MIME type wins when we recognise it. Otherwise the leading
bytes are compared against fixed signatures, in this order:

    JPEG  FF D8 FF
    PNG   89 50 4E 47
    GIF   47 49 46 38              ("GIF8")
    WebP  "RIFF" .... "WEBP"       (marker at offset 8)
    BMP   42 4D                    ("BM")
    TIFF  49 49 2A 00 / 4D 4D 00 2A

The result is only used to make error messages readable. Decoding is always
attempted by Pillow regardless, so detection never raises.
"""

from typing import Optional

from models.enums import DetectedFormat

KNOWN_MIME_TYPES: dict[str, DetectedFormat] = {
    "image/jpeg": DetectedFormat.JPEG,
    "image/jpg": DetectedFormat.JPEG,
    "image/png": DetectedFormat.PNG,
    "image/gif": DetectedFormat.GIF,
    "image/webp": DetectedFormat.WEBP,
    "image/bmp": DetectedFormat.BMP,
    "image/tiff": DetectedFormat.TIFF,
    "image/tif": DetectedFormat.TIFF,
}

_SIGNATURES: list[tuple[bytes, DetectedFormat]] = [
    (b"\xff\xd8\xff", DetectedFormat.JPEG),
    (b"\x89PNG", DetectedFormat.PNG),
    (b"GIF8", DetectedFormat.GIF),
]

_TIFF_SIGNATURES = (b"II*\x00", b"MM\x00*")


def detect_format(data: bytes, declared_mime: Optional[str] = None) -> DetectedFormat:
    """Classify `data`, preferring a recognised `declared_mime`."""
    if declared_mime:
        known = KNOWN_MIME_TYPES.get(declared_mime.strip().lower())
        if known is not None:
            return known

    if data is None or len(data) < 4:
        return DetectedFormat.UNKNOWN

    for magic, fmt in _SIGNATURES:
        if data.startswith(magic):
            return fmt

    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return DetectedFormat.WEBP
    if data.startswith(b"BM"):
        return DetectedFormat.BMP
    if data[:4] in _TIFF_SIGNATURES:
        return DetectedFormat.TIFF

    return DetectedFormat.UNKNOWN
