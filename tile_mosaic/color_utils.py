"""Tile colour sampling and hex encoding."""

from __future__ import annotations

import numpy as np
from PIL import Image

# Every SAMPLE_STRIDE-th pixel contributes to the average, starting at
# pixel SAMPLE_STRIDE - 1.
SAMPLE_STRIDE = 5


def rgb_to_hex(rgb: tuple[int, int, int] | np.ndarray) -> str:
    """Encode an RGB triple as 6 lowercase hex digits without ``#``."""
    r, g, b = (int(c) for c in rgb)
    return f"{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_str: str) -> tuple[int, int, int]:
    """Parse ``"3f7ae0"`` (``#`` optional) into an RGB triple."""
    h = hex_str.lstrip("#")
    if len(h) != 6:
        msg = f"Expected 6 hex digits, got {hex_str!r}"
        raise ValueError(msg)
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def average_color(pixels: np.ndarray, stride: int = SAMPLE_STRIDE) -> str:
    """Average a strided subsample of an RGBA pixel buffer.

    Args:
        pixels: (..., 4) uint8 RGBA buffer; any leading shape is flattened
            in row-major order.
        stride: Sample every *stride*-th pixel.

    Returns:
        6-digit lowercase hex colour. Channels are floor-averaged
        independently and alpha is ignored. A buffer too small to yield a
        single sample gives ``"000000"``.
    """
    flat = np.asarray(pixels, dtype=np.uint8).reshape(-1, 4)
    sampled = flat[stride - 1::stride, :3]
    count = len(sampled)
    if count == 0:
        return "000000"
    totals = sampled.sum(axis=0, dtype=np.int64)
    return rgb_to_hex(totals // count)


def sample_tile(
    image: Image.Image,
    box: tuple[int, int, int, int],
    stride: int = SAMPLE_STRIDE,
) -> str:
    """Representative colour of one tile region of *image*.

    Parts of *box* outside the image read as transparent black, so edge
    tiles darken in proportion to how much of them hangs off the source.
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    region = image.crop(box)
    return average_color(np.asarray(region, dtype=np.uint8), stride)
