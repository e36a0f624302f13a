"""
Tests for the style table and heuristic placement engine.
"""

import pytest

from app.api.v1.schemas import PlacementPlan
from app.models.overlay import OverlayGeometry
from app.models.styles import STYLE_TABLE, font_family_for, get_style
from app.services.placement import heuristic_placement

EXPECTED = {
    "bold": (0.5, 0.3, 0.18, "#FFFF00"),
    "modern": (0.5, 0.5, 0.15, "#FFFFFF"),
    "scifi": (0.5, 0.6, 0.12, "#00FF00"),
    "horror": (0.5, 0.25, 0.2, "#FF0000"),
    "handwritten": (0.35, 0.7, 0.1, "#8B4513"),
    "retro": (0.5, 0.5, 0.08, "#FF69B4"),
    "elegant": (0.5, 0.8, 0.12, "#FFD700"),
}


@pytest.mark.parametrize("style", sorted(EXPECTED))
def test_known_styles_return_literal_defaults(style):
    plan = heuristic_placement("any text", style, 1024, 768)
    assert (plan.x_percent, plan.y_percent, plan.font_size_percent, plan.color) == EXPECTED[style]
    assert plan.font_key == style


@pytest.mark.parametrize("style", ["", "gothic", "BOLD", "unknown-style"])
def test_unknown_styles_fall_back_to_modern(style):
    plan = heuristic_placement("any text", style, 640, 480)
    assert plan == heuristic_placement("any text", "modern", 640, 480)


def test_style_table_covers_expected_keys():
    assert set(STYLE_TABLE) == set(EXPECTED)
    assert get_style(None).font_key == "modern"
    assert font_family_for("horror") == "Impact"
    assert font_family_for("no-such-font") == "Segoe UI"


def test_geometry_from_bold_plan():
    """A 400x300 image with the bold style centres text at (200, 90)."""
    geometry = OverlayGeometry.from_plan(heuristic_placement("SALE", "bold", 400, 300), 400, 300)

    assert (geometry.x, geometry.y) == (200, 90)
    assert geometry.font_size == 54
    assert geometry.font_family == "Arial Black"
    assert geometry.stroke_color == "white"
    assert geometry.stroke_width == 3
    assert geometry.max_text_width == 320
    assert geometry.line_height == 59


def test_geometry_white_text_gets_black_stroke_and_minimum_size():
    plan = PlacementPlan(
        x_percent=0.0, y_percent=1.0, font_size_percent=0.08, color="#ffffff", font_key="modern"
    )
    geometry = OverlayGeometry.from_plan(plan, 100, 100)

    assert geometry.stroke_color == "black"
    assert geometry.font_size == 12
    assert geometry.stroke_width == 2
    assert (geometry.x, geometry.y) == (0, 100)
