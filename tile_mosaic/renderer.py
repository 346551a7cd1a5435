"""Row-by-row photomosaic rendering with lifecycle notifications."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from PIL import Image

from tile_mosaic.assets import AssetFetchError, AssetStore
from tile_mosaic.color_utils import sample_tile
from tile_mosaic.compositor import draw_row, new_surface
from tile_mosaic.config import MosaicConfig
from tile_mosaic.fetcher import fetch_row
from tile_mosaic.grid import GridPlan, plan_grid

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    pending = "pending"
    running = "running"
    complete = "complete"
    error = "error"


@dataclass
class RenderJob:
    """State of one render, handed to every notification.

    Attributes:
        plan:     Grid covering the source image.
        status:   Lifecycle state; ``complete`` and ``error`` are final.
        progress: Percentage of rows drawn, 0-100, never decreasing.
        row:      Index of the row being processed (or last processed).
        error:    What ended the job, when ``status`` is ``error``.
    """

    plan: GridPlan
    status: JobStatus = JobStatus.pending
    progress: int = 0
    row: int = 0
    error: Exception | None = None

    @property
    def width(self) -> int:
        return self.plan.width

    @property
    def height(self) -> int:
        return self.plan.height

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.complete, JobStatus.error)


Notify = Callable[[RenderJob], None]


def _ignore(job: RenderJob) -> None:
    return None


class MosaicRenderer:
    """Render a source image into a mosaic of fetched tiles.

    Rows are strictly sequential: a row's tiles are sampled, fetched
    together, drawn, and reported before the next row is sampled. The
    first tile that cannot be fetched ends the render in the ``error``
    state, leaving the surface partly drawn.

    Args:
        store:       Resolves tile colours to images.
        config:      Tile size and retry settings.
        on_start:    Called once the surface is sized and cleared.
        on_progress: Called after each row is drawn.
        on_complete: Called after the last row.
        on_error:    Called when a row cannot be completed.
    """

    def __init__(
        self,
        store: AssetStore,
        config: MosaicConfig | None = None,
        on_start: Notify = _ignore,
        on_progress: Notify = _ignore,
        on_complete: Notify = _ignore,
        on_error: Notify = _ignore,
    ) -> None:
        self.store = store
        self.config = config or MosaicConfig()
        self.on_start = on_start
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.on_error = on_error
        self.job: RenderJob | None = None
        self.surface: Image.Image = new_surface(0, 0)

    async def start(self, image: Image.Image) -> RenderJob:
        """Render *image* and return the finished job.

        Raises:
            RuntimeError: a render is already running on this renderer.
        """
        if self.job is not None and self.job.status is JobStatus.running:
            msg = "A render is already in progress on this renderer"
            raise RuntimeError(msg)

        cfg = self.config
        plan = plan_grid(image.width, image.height, cfg.tile_width, cfg.tile_height)
        job = RenderJob(plan=plan)
        self.job = job

        source = image if image.mode == "RGBA" else image.convert("RGBA")
        self.surface = new_surface(plan.width, plan.height)
        job.status = JobStatus.running
        logger.info(
            "Rendering %dx%d image as %d rows x %d cols (%dx%d output)",
            image.width, image.height, plan.rows, plan.cols, plan.width, plan.height,
        )
        try:
            self.on_start(job)
            return await self._render_rows(job, source)
        finally:
            # Cancelled, or a notification handler raised.
            if job.status is JobStatus.running:
                job.status = JobStatus.error

    async def _render_rows(self, job: RenderJob, source: Image.Image) -> RenderJob:
        cfg = self.config
        plan = job.plan
        t_total = time.perf_counter()
        for row in range(plan.rows):
            job.row = row
            colors = [sample_tile(source, plan.tile_box(row, col)) for col in range(plan.cols)]
            try:
                assets = await fetch_row(
                    self.store, colors, cfg.max_attempts, cfg.request_timeout,
                )
                draw_row(self.surface, assets, row, plan.tile_width, plan.tile_height)
            except AssetFetchError as exc:
                logger.warning("Row %d/%d failed: %s", row + 1, plan.rows, exc)
                return self._fail(job, exc)
            except Exception as exc:
                logger.exception("Row %d/%d could not be drawn", row + 1, plan.rows)
                return self._fail(job, exc)

            job.progress = (row + 1) * 100 // plan.rows
            logger.debug("Row %d/%d drawn (%d%%)", row + 1, plan.rows, job.progress)
            self.on_progress(job)

        job.status = JobStatus.complete
        logger.info("Mosaic complete  (%.1f s)", time.perf_counter() - t_total)
        self.on_complete(job)
        return job

    def _fail(self, job: RenderJob, exc: Exception) -> RenderJob:
        job.status = JobStatus.error
        job.error = exc
        self.on_error(job)
        return job
