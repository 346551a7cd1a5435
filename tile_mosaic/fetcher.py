"""Row fetching: resolve a whole row of tile colours concurrently."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from PIL import Image

from tile_mosaic.assets import AssetFetchError, AssetStore, AssetStoreError, asset_path

logger = logging.getLogger(__name__)


async def fetch_tile(
    store: AssetStore,
    color: str,
    max_attempts: int = 3,
    timeout: float | None = None,
) -> Image.Image:
    """Fetch one tile asset, retrying the same path on failure.

    Args:
        store:        Where tiles come from.
        color:        6-digit hex colour of the tile.
        max_attempts: Total attempts, including the first.
        timeout:      Seconds per attempt; a timed-out attempt counts as failed.

    Raises:
        AssetFetchError: every attempt failed; chained to the last cause.
    """
    path = asset_path(color)
    last_exc: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await asyncio.wait_for(store.fetch(path), timeout)
        except (AssetStoreError, asyncio.TimeoutError) as exc:
            last_exc = exc
            logger.debug("Attempt %d/%d for %s failed: %r", attempt, max_attempts, path, exc)
    raise AssetFetchError(path, max_attempts) from last_exc


async def fetch_row(
    store: AssetStore,
    colors: Sequence[str],
    max_attempts: int = 3,
    timeout: float | None = None,
) -> list[Image.Image]:
    """Fetch every tile of a row at once; all must succeed.

    Returns:
        Assets index-aligned with *colors*, whatever order they arrived in.

    Raises:
        AssetFetchError: a tile exhausted its attempts. Sibling fetches still
            in flight are cancelled before this propagates.
    """
    if not colors:
        return []

    t0 = time.perf_counter()
    tasks = [
        asyncio.ensure_future(fetch_tile(store, color, max_attempts, timeout))
        for color in colors
    ]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise

    if pending:
        await _cancel_all(pending)
    errors = [t.exception() for t in tasks if t in done]
    # Lowest failing column wins so the reported error is deterministic.
    first_error = next((exc for exc in errors if exc is not None), None)
    if first_error is not None:
        raise first_error

    logger.debug("Fetched %d tiles in %.3f s", len(tasks), time.perf_counter() - t0)
    return [t.result() for t in tasks]


async def _cancel_all(tasks: set[asyncio.Future] | list[asyncio.Future]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
