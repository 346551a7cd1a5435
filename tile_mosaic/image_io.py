"""Image loading, saving, and comparison-grid generation."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

# Formats Pillow cannot write with an alpha channel.
_OPAQUE_FORMATS = {"jpg", "jpeg", "bmp"}


def load_source(path: str | Path) -> Image.Image:
    """Load a source image as RGBA.

    Raises:
        ValueError: *path* is not a readable image.
    """
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        msg = f"{path} is not a readable image"
        raise ValueError(msg) from exc


def _flatten(img: Image.Image, background: tuple[int, int, int] = (255, 255, 255)) -> Image.Image:
    """Composite an RGBA image over a solid background."""
    base = Image.new("RGBA", img.size, (*background, 255))
    base.alpha_composite(img.convert("RGBA"))
    return base.convert("RGB")


def save_mosaic(surface: Image.Image, path: str | Path) -> None:
    """Save the rendered surface, dropping alpha where the format needs it."""
    path = Path(path)
    if path.suffix.lower().lstrip(".") in _OPAQUE_FORMATS:
        _flatten(surface).save(path)
    else:
        surface.save(path)


def make_comparison_grid(
    original: Image.Image,
    mosaic: Image.Image,
    output_path: str | Path,
) -> None:
    """Create a 2-panel comparison: Original | Mosaic.

    The original sits at the top-left of a mosaic-sized panel so that tile
    edges line up with the regions they were sampled from.
    """
    panel_w, panel_h = mosaic.size
    label_height = 36

    source = Image.new("RGBA", (panel_w, panel_h), (0, 0, 0, 0))
    source.paste(original.convert("RGBA"), (0, 0))

    gap = 8
    canvas = Image.new("RGB", (2 * panel_w + gap, panel_h + label_height), (30, 30, 30))
    canvas.paste(_flatten(source), (0, label_height))
    canvas.paste(_flatten(mosaic), (panel_w + gap, label_height))

    draw = ImageDraw.Draw(canvas)
    try:
        font = ImageFont.truetype("DejaVuSans-Bold.ttf", 18)
    except OSError:
        font = ImageFont.load_default()
    for x, label in ((0, "Original"), (panel_w + gap, f"Mosaic {panel_w}x{panel_h}")):
        left, _, right, _ = draw.textbbox((0, 0), label, font=font)
        draw.text((x + (panel_w - (right - left)) // 2, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
