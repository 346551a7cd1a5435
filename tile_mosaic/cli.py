"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

import typer
from PIL import Image
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn

from tile_mosaic.assets import AssetStore, HttpAssetStore, LocalAssetStore
from tile_mosaic.config import MosaicConfig
from tile_mosaic.image_io import load_source, make_comparison_grid, save_mosaic
from tile_mosaic.renderer import JobStatus, MosaicRenderer, RenderJob

app = typer.Typer(
    name="tile-mosaic",
    help="Render photomosaics from colour-matched tiles, row by row.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _make_store(cfg: MosaicConfig) -> AssetStore:
    if cfg.asset_source == "local":
        return LocalAssetStore(cfg.tile_width, cfg.tile_height)
    return HttpAssetStore(cfg.asset_url)


async def _render(image: Image.Image, cfg: MosaicConfig, label: str) -> tuple[RenderJob, Image.Image]:
    """Render one image, driving a progress bar from the renderer's notifications."""
    with Progress(
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id: TaskID = progress.add_task(label, total=100)

        def on_start(job: RenderJob) -> None:
            progress.update(
                task_id,
                description=f"{label} [dim]{job.width}x{job.height}[/dim]",
            )

        def on_progress(job: RenderJob) -> None:
            progress.update(task_id, completed=job.progress)

        def on_complete(job: RenderJob) -> None:
            progress.update(task_id, completed=100)

        def on_error(job: RenderJob) -> None:
            progress.stop_task(task_id)

        async with _make_store(cfg) as store:
            renderer = MosaicRenderer(
                store,
                cfg,
                on_start=on_start,
                on_progress=on_progress,
                on_complete=on_complete,
                on_error=on_error,
            )
            job = await renderer.start(image)
    return job, renderer.surface


def _render_file(img_path: Path, mosaic_path: Path, cfg: MosaicConfig) -> RenderJob | None:
    """Render *img_path* to *mosaic_path*; returns None for unreadable input."""
    logger = logging.getLogger("tile_mosaic")
    try:
        image = load_source(img_path)
    except ValueError as exc:
        console.print(f"  [red]✗[/red] {exc}")
        return None

    t_total = time.perf_counter()
    job, surface = asyncio.run(_render(image, cfg, img_path.name))
    elapsed = time.perf_counter() - t_total

    if job.status is not JobStatus.complete:
        # The surface is partly drawn; keep it out of the results folder.
        console.print(
            f"  [red]✗[/red] {img_path.name}  failed at row {job.row + 1}/{job.plan.rows}"
            f" ({job.progress}%): {job.error}"
        )
        return job

    save_mosaic(surface, mosaic_path)
    if cfg.save_comparison:
        comp_path = mosaic_path.with_name(f"{img_path.stem}_comparison{mosaic_path.suffix}")
        make_comparison_grid(image, surface, comp_path)
        logger.info("Comparison saved to %s", comp_path)

    console.print(
        f"  [green]✓[/green] {mosaic_path.name}  "
        f"[dim]{job.plan.cols}x{job.plan.rows} tiles = {job.width}x{job.height} px"
        f"  time={elapsed:.1f}s[/dim]"
    )
    return job


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


def _config(**kwargs: object) -> MosaicConfig:
    try:
        return MosaicConfig(**kwargs)  # type: ignore[arg-type]
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2) from exc


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    tile_width: int = typer.Option(
        _DEFAULTS.tile_width, "--tile-width", "-W", help="Tile width in pixels",
    ),
    tile_height: int = typer.Option(
        _DEFAULTS.tile_height, "--tile-height", "-H", help="Tile height in pixels",
    ),
    asset_source: str = typer.Option(
        _DEFAULTS.asset_source, "--source", help="'http' (colour server) or 'local'",
    ),
    asset_url: str = typer.Option(
        _DEFAULTS.asset_url, "--url", help="Base URL of the colour server",
    ),
    attempts: int = typer.Option(
        _DEFAULTS.max_attempts, "--attempts", "-a", help="Fetch attempts per tile",
    ),
    timeout: float | None = typer.Option(
        _DEFAULTS.request_timeout, "--timeout", "-t",
        help="Seconds per fetch attempt (default: wait forever)",
    ),
    output_format: str = typer.Option(
        _DEFAULTS.output_format, "--format", "-f", help="Output image format",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Also save an Original | Mosaic comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Render all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)

    cfg = _config(
        tile_width=tile_width,
        tile_height=tile_height,
        max_attempts=attempts,
        request_timeout=timeout,
        asset_source=asset_source,
        asset_url=asset_url,
        output_format=output_format,
        save_comparison=comparison,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]TILE MOSAIC[/bold]\n"
        f"Tile: {cfg.tile_width}x{cfg.tile_height}  |  Source: {cfg.asset_source}\n"
        f"Attempts: {cfg.max_attempts}  |  Timeout: {cfg.request_timeout or 'none'}\n"
        f"Images: {len(images)}",
        border_style="cyan",
    ))

    failures = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        mosaic_path = output_dir / f"{img_path.stem}_mosaic.{cfg.output_format}"
        job = _render_file(img_path, mosaic_path, cfg)
        if job is None or job.status is not JobStatus.complete:
            failures += 1

    if failures:
        console.print(Panel.fit(
            f"[bold red]{failures} of {len(images)} FAILED[/bold red] - "
            f"other results in [bold]{output_dir}/[/bold]",
            border_style="red",
        ))
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


# -- single-image command ----------------------------------------------

@app.command()
def single(
    target: Path = typer.Argument(..., help="Path to the source image"),
    output: Path = typer.Option(Path("output/mosaic.png"), "--output", "-o"),
    tile_width: int = typer.Option(_DEFAULTS.tile_width, "--tile-width", "-W"),
    tile_height: int = typer.Option(_DEFAULTS.tile_height, "--tile-height", "-H"),
    asset_source: str = typer.Option(_DEFAULTS.asset_source, "--source"),
    asset_url: str = typer.Option(_DEFAULTS.asset_url, "--url"),
    attempts: int = typer.Option(_DEFAULTS.max_attempts, "--attempts", "-a"),
    timeout: float | None = typer.Option(_DEFAULTS.request_timeout, "--timeout", "-t"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render a single image."""
    _setup_logging(verbose)

    cfg = _config(
        tile_width=tile_width,
        tile_height=tile_height,
        max_attempts=attempts,
        request_timeout=timeout,
        asset_source=asset_source,
        asset_url=asset_url,
        save_comparison=comparison,
    )

    output.parent.mkdir(parents=True, exist_ok=True)

    job = _render_file(target, output, cfg)
    if job is None or job.status is not JobStatus.complete:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
