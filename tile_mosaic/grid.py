"""Grid planning: how many tiles cover an image and how big the output is."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class GridPlan:
    """Row/column counts and output canvas size for one render."""

    rows: int
    cols: int
    tile_width: int
    tile_height: int

    @property
    def width(self) -> int:
        return self.cols * self.tile_width

    @property
    def height(self) -> int:
        return self.rows * self.tile_height

    def tile_box(self, row: int, col: int) -> tuple[int, int, int, int]:
        """Pixel box ``(left, top, right, bottom)`` of tile (row, col)."""
        left = col * self.tile_width
        top = row * self.tile_height
        return left, top, left + self.tile_width, top + self.tile_height


def plan_grid(
    image_width: int,
    image_height: int,
    tile_width: int,
    tile_height: int,
) -> GridPlan:
    """Cover an image with whole tiles, rounding partial tiles up.

    The output canvas is therefore never smaller than the source and
    grows by at most one tile minus a pixel along each axis.
    """
    return GridPlan(
        rows=math.ceil(image_height / tile_height),
        cols=math.ceil(image_width / tile_width),
        tile_width=tile_width,
        tile_height=tile_height,
    )
