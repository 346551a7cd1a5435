"""Colour-keyed tile asset stores.

A store resolves a path of the form ``color/<6 hex digits>`` to a drawable
tile image. Each call to :meth:`AssetStore.fetch` is a single attempt;
retrying is the row fetcher's job.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from io import BytesIO

import httpx
from PIL import Image, ImageDraw, UnidentifiedImageError

from tile_mosaic.color_utils import hex_to_rgb

logger = logging.getLogger(__name__)

ASSET_PREFIX = "color/"
_PATH_RE = re.compile(r"^color/([0-9a-f]{6})$")


class AssetStoreError(Exception):
    """A single fetch attempt failed."""


class AssetFetchError(Exception):
    """A tile asset could not be retrieved within the allowed attempts."""

    def __init__(self, path: str, attempts: int) -> None:
        super().__init__(f"Could not fetch {path} after {attempts} attempt(s)")
        self.path = path
        self.attempts = attempts


def asset_path(color: str) -> str:
    """Store path for a tile colour, e.g. ``color/3f7ae0``."""
    return ASSET_PREFIX + color


def parse_asset_path(path: str) -> str:
    """Return the hex colour encoded in *path*."""
    match = _PATH_RE.match(path)
    if match is None:
        msg = f"Malformed asset path {path!r}"
        raise AssetStoreError(msg)
    return match.group(1)


class AssetStore(ABC):
    """Asynchronous colour → tile image resolver."""

    @abstractmethod
    async def fetch(self, path: str) -> Image.Image:
        """Resolve *path* to an image or raise :class:`AssetStoreError`."""

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> AssetStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class HttpAssetStore(AssetStore):
    """Fetch tiles from an HTTP colour server at ``<base_url>/color/<hex>``."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"User-Agent": "tile-mosaic"},
            timeout=None,
        )

    async def fetch(self, path: str) -> Image.Image:
        try:
            resp = await self._client.get(path)
            logger.debug("GET %s -> %d", path, resp.status_code)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            msg = f"{path}: {exc!r}"
            raise AssetStoreError(msg) from exc

        try:
            img = Image.open(BytesIO(resp.content))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            msg = f"{path}: response is not a decodable image"
            raise AssetStoreError(msg) from exc
        return img.convert("RGBA")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class LocalAssetStore(AssetStore):
    """Draw tiles in-process: a filled circle of the colour on transparency.

    Useful offline and in tests; never fails for a well-formed path.
    """

    def __init__(self, tile_width: int, tile_height: int) -> None:
        self.tile_width = tile_width
        self.tile_height = tile_height

    async def fetch(self, path: str) -> Image.Image:
        rgb = hex_to_rgb(parse_asset_path(path))
        tile = Image.new("RGBA", (self.tile_width, self.tile_height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(tile)
        draw.ellipse(
            (0, 0, self.tile_width - 1, self.tile_height - 1),
            fill=(*rgb, 255),
        )
        return tile
