"""
Thumbnail size planning.

Given the original size and the requested box, work out the output size:

    1. Nothing requested         → width = DEFAULT_WIDTH (20), height auto
    2. Only height requested     → width derived from the aspect ratio
    3. Only width requested      → height derived from the aspect ratio
    4. Original already fits     → original size, we never upscale
    5. Otherwise                 → scale both sides by the tighter ratio

Example: 1920x1080 into a 128x128 box → min(128/1920, 128/1080) = 0.0667
→ 128x72 (aspect preserved, fits on both axes).

All conversions truncate toward zero, so very thin images can plan to a
zero-length side. That is passed through; the encoder rejects it.
"""

from models.media import Dimensions

DEFAULT_WIDTH = 20


def plan_size(orig_width: int, orig_height: int, req_width: int, req_height: int) -> Dimensions:
    """Return the thumbnail dimensions for an original of orig_width x orig_height."""
    if orig_width <= 0 or orig_height <= 0:
        raise ValueError(
            f"Original dimensions must be positive, got {orig_width}x{orig_height}"
        )

    if req_width <= 0 and req_height <= 0:
        req_width = DEFAULT_WIDTH

    if req_width <= 0:
        req_width = int(req_height * orig_width / orig_height)
    elif req_height <= 0:
        req_height = int(req_width * orig_height / orig_width)

    if orig_width <= req_width and orig_height <= req_height:
        return Dimensions(orig_width, orig_height)

    scale = min(req_width / orig_width, req_height / orig_height)
    return Dimensions(int(orig_width * scale), int(orig_height * scale))
