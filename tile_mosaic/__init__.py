"""
Tile Mosaic
===========

Render a photomosaic from a source image: the image is cut into a grid
of fixed-size tiles, each tile's average colour is looked up in a
colour-keyed asset store, and the returned graphics are composited row
by row onto a canvas while progress is reported.

- **Rows are a barrier**: all tiles in a row are fetched concurrently,
  and the next row starts only after the current one is drawn.
- **Bounded retry**: each tile gets a few attempts; one tile running out
  of attempts aborts the render.
"""

__version__ = "1.0.0"

from tile_mosaic.assets import (
    AssetFetchError,
    AssetStore,
    AssetStoreError,
    HttpAssetStore,
    LocalAssetStore,
    asset_path,
)
from tile_mosaic.color_utils import average_color, sample_tile
from tile_mosaic.compositor import draw_row, new_surface
from tile_mosaic.config import MosaicConfig
from tile_mosaic.fetcher import fetch_row, fetch_tile
from tile_mosaic.grid import GridPlan, plan_grid
from tile_mosaic.image_io import load_source, make_comparison_grid, save_mosaic
from tile_mosaic.renderer import JobStatus, MosaicRenderer, RenderJob

__all__ = [
    "AssetFetchError",
    "AssetStore",
    "AssetStoreError",
    "GridPlan",
    "HttpAssetStore",
    "JobStatus",
    "LocalAssetStore",
    "MosaicConfig",
    "MosaicRenderer",
    "RenderJob",
    "asset_path",
    "average_color",
    "draw_row",
    "fetch_row",
    "fetch_tile",
    "load_source",
    "make_comparison_grid",
    "new_surface",
    "plan_grid",
    "sample_tile",
    "save_mosaic",
]
