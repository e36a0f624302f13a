from __future__ import annotations

from dataclasses import dataclass

from app.api.v1.schemas import PlacementPlan, PlacementSource
from app.models.styles import font_family_for

MIN_FONT_SIZE = 12
LINE_HEIGHT_FACTOR = 1.1
TEXT_WIDTH_FACTOR = 0.8


@dataclass(slots=True)
class OverlayGeometry:
    """
    Concrete pixel geometry for one overlay, derived from a placement plan.

    `x`/`y` is the centre point of the text block in source-image pixels.
    """

    font_family: str
    font_size: int
    x: int
    y: int
    color: str
    stroke_color: str
    stroke_width: int
    max_text_width: int
    line_height: int

    @classmethod
    def from_plan(cls, plan: PlacementPlan, width: int, height: int) -> "OverlayGeometry":
        font_size = max(MIN_FONT_SIZE, int(height * (plan.font_size_percent or 0.15)))
        color = plan.color or "#FFFFFF"
        # White text gets a black outline; everything else a white one.
        stroke_color = "black" if color.lower() in ("#ffffff", "#fff") else "white"
        return cls(
            font_family=font_family_for(plan.font_key),
            font_size=font_size,
            x=int(width * plan.x_percent),
            y=int(height * plan.y_percent),
            color=color,
            stroke_color=stroke_color,
            stroke_width=max(2, font_size // 15),
            max_text_width=int(width * TEXT_WIDTH_FACTOR),
            line_height=int(font_size * LINE_HEIGHT_FACTOR),
        )


@dataclass(slots=True)
class OverlayResult:
    """Output of one overlay request."""

    jpeg: bytes
    width: int
    height: int
    plan: PlacementPlan
    geometry: OverlayGeometry
    source: PlacementSource
