"""
Overlay pipeline: metadata, placement, rasterization, compositing.

Each call is independent; nothing is shared between requests apart from
the static style table and the font cache.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from app.api.v1.schemas import PlacementPlan, PlacementSource
from app.config import Settings, get_settings
from app.models.overlay import OverlayGeometry, OverlayResult
from app.services.compositor import composite_jpeg, read_dimensions
from app.services.openrouter_client import OpenRouterClient, PlacementAnalysisError
from app.services.placement import heuristic_placement
from app.services.text_renderer import render_text_layer

logger = logging.getLogger(__name__)


def _stopwatch() -> Callable[[], int]:
    start = time.perf_counter()
    return lambda: int((time.perf_counter() - start) * 1000)


def choose_placement(
    image_bytes: bytes,
    text: str,
    style: str,
    width: int,
    height: int,
    settings: Settings,
    mime_type: str = "image/jpeg",
    client: Optional[OpenRouterClient] = None,
) -> tuple[PlacementPlan, PlacementSource]:
    """
    Ask the model for a placement when a key is configured, otherwise (or
    when the model fails) use the style heuristics.
    """
    client = client or OpenRouterClient.from_settings(settings)

    if client.is_available():
        try:
            plan = client.analyze_placement(image_bytes, text, style, width, height, mime_type)
            return plan, PlacementSource.AI
        except PlacementAnalysisError as exc:
            logger.error("AI analysis failed: %s - using fallback placement", exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected AI analysis error: %s - using fallback placement", exc)
    else:
        logger.warning("OPENROUTER_API_KEY not set, skipping AI")

    return heuristic_placement(text, style, width, height), PlacementSource.HEURISTIC


def render_overlay(
    image_bytes: bytes,
    text: str,
    style: str = "modern",
    settings: Optional[Settings] = None,
    client: Optional[OpenRouterClient] = None,
) -> OverlayResult:
    """
    Run the full pipeline and return the encoded JPEG with the plan and
    geometry that produced it.

    Decode and encode errors propagate to the caller.
    """
    settings = settings or get_settings()
    elapsed_ms = _stopwatch()

    width, height, mime_type = read_dimensions(image_bytes)
    logger.info("[%dms] Image metadata: %dx%d", elapsed_ms(), width, height)

    plan, source = choose_placement(
        image_bytes, text, style, width, height, settings, mime_type=mime_type, client=client
    )
    logger.info(
        "[%dms] %s placement: x=%.1f%%, y=%.1f%%, size=%.1f%%, color=%s",
        elapsed_ms(),
        source.value,
        plan.x_percent * 100,
        plan.y_percent * 100,
        plan.font_size_percent * 100,
        plan.color,
    )

    geometry = OverlayGeometry.from_plan(plan, width, height)
    layer = render_text_layer((width, height), text, geometry, font_dir=settings.font_dir)
    logger.info("[%dms] Text rendered on canvas", elapsed_ms())

    jpeg = composite_jpeg(image_bytes, layer, quality=settings.jpeg_quality)
    logger.info("[%dms] Final image created (%d bytes)", elapsed_ms(), len(jpeg))

    return OverlayResult(
        jpeg=jpeg,
        width=width,
        height=height,
        plan=plan,
        geometry=geometry,
        source=source,
    )
