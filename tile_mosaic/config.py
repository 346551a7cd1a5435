"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

ASSET_SOURCES = ("http", "local")


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic render.

    Attributes:
        tile_width:      Width of one tile in pixels (source and output).
        tile_height:     Height of one tile in pixels (source and output).
        max_attempts:    Fetch attempts per tile before the row is abandoned.
        request_timeout: Seconds allowed per fetch attempt (None = wait forever).
        asset_source:    "http" (remote colour store) or "local" (rendered in-process).
        asset_url:       Base URL of the HTTP colour store; tiles live at ``color/<hex>``.
        output_format:   Image format for saved files.
        save_comparison: Generate a side-by-side Original | Mosaic image.
        input_dir:       Folder to scan for source images.
        output_dir:      Folder for results.
    """

    # Grid
    tile_width: int = 16
    tile_height: int = 16

    # Fetching
    max_attempts: int = 3
    request_timeout: float | None = None
    asset_source: str = "http"
    asset_url: str = "http://localhost:8765"

    # Output
    output_format: str = "png"
    save_comparison: bool = False

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff", ".tif", ".webp"}
    )

    def __post_init__(self) -> None:
        if self.tile_width < 1 or self.tile_height < 1:
            msg = f"Tile size must be positive, got {self.tile_width}x{self.tile_height}"
            raise ValueError(msg)
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.request_timeout is not None and self.request_timeout <= 0:
            msg = f"request_timeout must be positive or None, got {self.request_timeout}"
            raise ValueError(msg)
        if self.asset_source not in ASSET_SOURCES:
            msg = f"Unknown asset_source {self.asset_source!r}; expected one of {ASSET_SOURCES}"
            raise ValueError(msg)
