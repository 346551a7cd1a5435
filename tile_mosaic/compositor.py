"""Drawing resolved tiles onto the output surface."""

from __future__ import annotations

from collections.abc import Sequence

from PIL import Image


def new_surface(width: int, height: int) -> Image.Image:
    """A cleared (fully transparent) RGBA canvas."""
    return Image.new("RGBA", (width, height), (0, 0, 0, 0))


def draw_row(
    surface: Image.Image,
    assets: Sequence[Image.Image],
    row: int,
    tile_width: int,
    tile_height: int,
) -> None:
    """Composite one row of tiles left to right at ``(col*Tw, row*Th)``.

    Assets of any size are scaled to the tile; transparency blends over
    whatever is already on the surface.
    """
    top = row * tile_height
    for col, asset in enumerate(assets):
        tile = asset if asset.mode == "RGBA" else asset.convert("RGBA")
        if tile.size != (tile_width, tile_height):
            tile = tile.resize((tile_width, tile_height), Image.LANCZOS)
        surface.alpha_composite(tile, dest=(col * tile_width, top))
