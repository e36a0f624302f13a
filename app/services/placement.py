from __future__ import annotations

import logging

from app.api.v1.schemas import PlacementPlan
from app.models.styles import get_style

logger = logging.getLogger(__name__)


def heuristic_placement(text: str, style: str, width: int, height: int) -> PlacementPlan:
    """
    Placement plan derived from the style table alone.

    `text`, `width` and `height` are accepted so this can stand in for the AI
    client with the same arguments; the current rules do not depend on them.
    Unknown styles get the modern defaults.
    """
    config = get_style(style)
    logger.debug(
        "Heuristic placement for style %r (%dx%d) -> %s", style, width, height, config.font_key
    )
    return PlacementPlan(
        font_key=config.font_key,
        x_percent=config.x,
        y_percent=config.y,
        font_size_percent=config.size,
        color=config.color,
    )
