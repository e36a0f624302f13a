"""
Text rasterization for overlays.

Lines are wrapped greedily to a pixel budget and drawn centred on a point,
outline first and fill on top, onto a transparent layer the size of the
source image.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Dict, List, Tuple

from PIL import Image, ImageDraw, ImageFont

from app.models.overlay import OverlayGeometry

logger = logging.getLogger(__name__)

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont

# Font files tried for each family, Windows/macOS names first, then common
# Linux equivalents.
FONT_FILES: Dict[str, Tuple[str, ...]] = {
    "Arial Black": ("ariblk.ttf", "Arial Black.ttf", "LiberationSans-Bold.ttf"),
    "Segoe UI": ("segoeuib.ttf", "segoeui.ttf", "DejaVuSans-Bold.ttf"),
    "Courier New": ("courbd.ttf", "Courier New Bold.ttf", "LiberationMono-Bold.ttf"),
    "Impact": ("impact.ttf", "Impact.ttf", "LiberationSansNarrow-Bold.ttf"),
    "Comic Sans MS": ("comicbd.ttf", "Comic Sans MS Bold.ttf", "DejaVuSans-Bold.ttf"),
    "Georgia": ("georgiab.ttf", "Georgia Bold.ttf", "DejaVuSerif-Bold.ttf"),
    "Palatino Linotype": ("palab.ttf", "Palatino.ttc", "DejaVuSerif-Bold.ttf"),
}
FALLBACK_FONT_FILES = ("DejaVuSans-Bold.ttf", "arialbd.ttf", "Arial Bold.ttf")

LINUX_FONT_DIRS = (
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/truetype/liberation",
    "/usr/share/fonts/truetype/liberation2",
    "/usr/share/fonts/truetype/msttcorefonts",
)


def _candidate_paths(family: str, font_dir: str | None) -> List[str]:
    names = FONT_FILES.get(family, ()) + FALLBACK_FONT_FILES
    paths: List[str] = []
    for name in names:
        if font_dir:
            paths.append(os.path.join(font_dir, name))
        # Bare names let Pillow search the platform font directories.
        paths.append(name)
        paths.extend(os.path.join(d, name) for d in LINUX_FONT_DIRS)
    return paths


@lru_cache(maxsize=64)
def load_font(family: str, size: int, font_dir: str | None = None) -> FontType:
    """
    Load a bold TrueType face for `family` at `size` pixels.

    Falls back to Pillow's bundled default font when no candidate file can
    be opened, so rendering works on hosts without any system fonts.
    """
    for path in _candidate_paths(family, font_dir):
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    logger.warning("No font file found for %r; using Pillow default font", family)
    return ImageFont.load_default(size=size)


def measure(draw: ImageDraw.ImageDraw, text: str, font: FontType) -> float:
    return draw.textlength(text, font=font)


def wrap_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: FontType,
    max_width: float,
) -> List[str]:
    """
    Greedy word wrap.

    Words are appended to the current line while its measured width stays
    within `max_width`. A word that alone is wider than the budget still
    gets its own line rather than being split.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and measure(draw, candidate, font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def layout_lines(line_count: int, center_y: int, line_height: int) -> List[int]:
    """Vertical centres for each line so the block is centred on `center_y`."""
    start_y = center_y - ((line_count - 1) * line_height) // 2
    return [start_y + i * line_height for i in range(line_count)]


def render_text_layer(
    size: Tuple[int, int],
    text: str,
    geometry: OverlayGeometry,
    font_dir: str | None = None,
) -> Image.Image:
    """Draw `text` onto a transparent RGBA layer of `size`."""
    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    font = load_font(geometry.font_family, geometry.font_size, font_dir)

    lines = wrap_text(draw, text, font, geometry.max_text_width)
    for line, line_y in zip(lines, layout_lines(len(lines), geometry.y, geometry.line_height)):
        # Pillow strokes before filling within a single call.
        draw.text(
            (geometry.x, line_y),
            line,
            font=font,
            fill=geometry.color,
            anchor="mm",
            stroke_width=geometry.stroke_width,
            stroke_fill=geometry.stroke_color,
        )

    logger.debug("Rendered %d line(s) at (%d, %d)", len(lines), geometry.x, geometry.y)
    return layer
