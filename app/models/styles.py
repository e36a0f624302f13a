from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

DEFAULT_STYLE = "modern"


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """
    Static defaults for one text style.

    Coordinates and size are fractions of the image dimensions: `x` and `y`
    locate the centre of the text block, `size` is the font height relative
    to the image height.
    """

    font_key: str
    font_family: str
    x: float
    y: float
    size: float
    color: str
    # Human-readable name shown by style pickers.
    label: str = ""


STYLE_TABLE: Dict[str, StyleConfig] = {
    "bold": StyleConfig("bold", "Arial Black", 0.5, 0.3, 0.18, "#FFFF00", "Bold & Brutal"),
    "modern": StyleConfig("modern", "Segoe UI", 0.5, 0.5, 0.15, "#FFFFFF", "Clean & Modern"),
    "scifi": StyleConfig("scifi", "Courier New", 0.5, 0.6, 0.12, "#00FF00", "Futuristic & Sci-Fi"),
    "horror": StyleConfig("horror", "Impact", 0.5, 0.25, 0.2, "#FF0000", "Spooky & Horror"),
    "handwritten": StyleConfig(
        "handwritten", "Comic Sans MS", 0.35, 0.7, 0.1, "#8B4513", "Handwritten & Organic"
    ),
    "retro": StyleConfig("retro", "Georgia", 0.5, 0.5, 0.08, "#FF69B4", "Retro & Pixelated"),
    "elegant": StyleConfig(
        "elegant", "Palatino Linotype", 0.5, 0.8, 0.12, "#FFD700", "Elegant & Classy"
    ),
}


def get_style(key: str | None) -> StyleConfig:
    """Return the style for `key`, or the modern style for unknown keys."""
    return STYLE_TABLE.get(key or DEFAULT_STYLE, STYLE_TABLE[DEFAULT_STYLE])


def font_family_for(font_key: str | None) -> str:
    return get_style(font_key).font_family


def list_styles() -> List[StyleConfig]:
    return list(STYLE_TABLE.values())
