"""
Pixel-level transforms on packed RGBA buffers.

Pillow is only used to get pixels in and out (decode / encode). The resize
and the blur are done here, directly on the bytes, so their behaviour is
fixed and identical on every platform:

- resize_nearest: nearest-neighbor sampling, no interpolation. Thumbnails
  are blurred right afterwards, so the blockiness does not show.
- box_blur: average of the (2r+1)x(2r+1) neighbourhood, computed per channel
  (R, G, B and A independently). The window is clamped at the borders, so a
  corner pixel averages 4 samples, an edge pixel 6 and an interior pixel 9
  (for r=1). Nothing is wrapped or mirrored.

Layout: row-major, 4 bytes per pixel, offset of (x, y) is (y*width + x)*4.

Both transforms are O(pixels) in pure Python. That is fine at thumbnail
scale (tens of pixels wide) but not meant for full-size frames.
"""

from dataclasses import dataclass
from typing import Union

from PIL import Image

CHANNELS = 4  # R, G, B, A


@dataclass
class PixelBuffer:
    width: int
    height: int
    # Read-only sources (decoded images) keep Pillow's bytes, transforms write bytearrays
    data: Union[bytes, bytearray]

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid buffer size {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"Buffer of {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}"
            )

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Convert any Pillow image (palette, greyscale, RGB...) to RGBA pixels."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(image.width, image.height, image.tobytes())

    @classmethod
    def solid(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        return cls(width, height, bytearray(bytes(rgba) * (width * height)))

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        offset = (y * self.width + x) * CHANNELS
        return tuple(self.data[offset:offset + CHANNELS])

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


def resize_nearest(src: PixelBuffer, dest_width: int, dest_height: int) -> PixelBuffer:
    """
    Resize with nearest-neighbor sampling.

    Destination (x, y) takes source (x*src_w // dest_w, y*src_h // dest_h).
    Same size in and out returns `src` itself.
    """
    if dest_width < 0 or dest_height < 0:
        raise ValueError(f"Invalid target size {dest_width}x{dest_height}")
    if dest_width == src.width and dest_height == src.height:
        return src

    out = bytearray(dest_width * dest_height * CHANNELS)
    if dest_width == 0 or dest_height == 0 or src.is_empty:
        return PixelBuffer(dest_width, dest_height, out)

    src_data = src.data
    src_row_bytes = src.width * CHANNELS
    # Column offsets are the same for every row, compute them once.
    col_offsets = [(x * src.width // dest_width) * CHANNELS for x in range(dest_width)]

    dst = 0
    for y in range(dest_height):
        row_start = (y * src.height // dest_height) * src_row_bytes
        for col in col_offsets:
            s = row_start + col
            out[dst:dst + CHANNELS] = src_data[s:s + CHANNELS]
            dst += CHANNELS

    return PixelBuffer(dest_width, dest_height, out)


def box_blur(src: PixelBuffer, radius: int = 1) -> PixelBuffer:
    """Box blur with the window clamped to the image bounds. Returns a new buffer."""
    if radius < 0:
        raise ValueError(f"Blur radius must be >= 0, got {radius}")
    if radius == 0 or src.is_empty:
        return PixelBuffer(src.width, src.height, bytearray(src.data))

    width, height = src.width, src.height
    data = src.data
    out = bytearray(len(data))

    for y in range(height):
        y0 = max(0, y - radius)
        y1 = min(height - 1, y + radius)
        for x in range(width):
            x0 = max(0, x - radius)
            x1 = min(width - 1, x + radius)

            r = g = b = a = 0
            for ny in range(y0, y1 + 1):
                row = ny * width
                for nx in range(x0, x1 + 1):
                    i = (row + nx) * CHANNELS
                    r += data[i]
                    g += data[i + 1]
                    b += data[i + 2]
                    a += data[i + 3]

            count = (y1 - y0 + 1) * (x1 - x0 + 1)
            o = (y * width + x) * CHANNELS
            out[o] = r // count
            out[o + 1] = g // count
            out[o + 2] = b // count
            out[o + 3] = a // count

    return PixelBuffer(width, height, out)
