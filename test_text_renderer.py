"""
Tests for text wrapping, vertical layout, and compositing.
"""

import logging
from io import BytesIO

import pytest
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from app.api.v1.schemas import PlacementPlan
from app.models.overlay import OverlayGeometry
from app.services.compositor import composite_jpeg, read_dimensions
from app.services.text_renderer import layout_lines, load_font, render_text_layer, wrap_text

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def draw():
    return ImageDraw.Draw(Image.new("RGBA", (10, 10)))


@pytest.fixture
def font():
    return ImageFont.load_default(size=20)


def _png(width, height, color="navy"):
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.mark.parametrize("max_width", [40, 80, 150, 400])
def test_wrapped_lines_fit_unless_single_long_word(draw, font, max_width):
    text = "the quick brown fox jumps over an extraordinarily lazy dog near a riverbank"
    lines = wrap_text(draw, text, font, max_width)

    assert " ".join(lines) == text
    for line in lines:
        if draw.textlength(line, font=font) > max_width:
            assert " " not in line
    logger.info("✓ %d lines at width %d", len(lines), max_width)


def test_wrap_is_greedy(draw, font):
    """Each line is as long as possible: adding the next word would overflow."""
    text = "one two three four five six seven eight nine ten"
    max_width = 120
    lines = wrap_text(draw, text, font, max_width)

    for current, following in zip(lines, lines[1:]):
        next_word = following.split()[0]
        assert draw.textlength(f"{current} {next_word}", font=font) > max_width


def test_wrap_edge_cases(draw, font):
    assert wrap_text(draw, "", font, 100) == []
    assert wrap_text(draw, "   ", font, 100) == []
    assert wrap_text(draw, "  SALE  ", font, 100) == ["SALE"]
    assert wrap_text(draw, "Supercalifragilistic", font, 5) == ["Supercalifragilistic"]


def test_layout_lines_centres_block():
    assert layout_lines(1, 90, 59) == [90]
    assert layout_lines(2, 100, 20) == [90, 110]
    assert layout_lines(3, 100, 20) == [80, 100, 120]
    assert layout_lines(0, 100, 20) == []


def test_load_font_falls_back_when_family_unknown():
    font = load_font("No Such Family", 24, "/nonexistent")
    assert font is not None
    assert font.getbbox("A")[3] > 0


def test_render_text_layer_draws_near_centre():
    plan = PlacementPlan(
        x_percent=0.5, y_percent=0.5, font_size_percent=0.2, color="#FF0000", font_key="horror"
    )
    geometry = OverlayGeometry.from_plan(plan, 200, 100)
    layer = render_text_layer((200, 100), "HI", geometry)

    assert layer.mode == "RGBA"
    assert layer.size == (200, 100)
    bbox = layer.getchannel("A").getbbox()
    assert bbox is not None
    left, top, right, bottom = bbox
    assert left < 100 < right
    assert top < 50 < bottom


def test_read_dimensions():
    assert read_dimensions(_png(400, 300)) == (400, 300, "image/png")


def test_composite_jpeg_keeps_size_and_encodes_jpeg():
    source = _png(64, 48)
    layer = Image.new("RGBA", (64, 48), (0, 0, 0, 0))
    ImageDraw.Draw(layer).rectangle((0, 0, 31, 47), fill=(255, 255, 0, 255))

    output = composite_jpeg(source, layer)
    assert output[:2] == b"\xff\xd8"

    with Image.open(BytesIO(output)) as img:
        assert img.format == "JPEG"
        assert img.size == (64, 48)
        red, green, blue = img.convert("RGB").getpixel((10, 20))
        assert red > 200 and green > 200 and blue < 80


def test_composite_jpeg_fits_mismatched_layer():
    output = composite_jpeg(_png(50, 50), Image.new("RGBA", (80, 20), (0, 0, 0, 0)))
    with Image.open(BytesIO(output)) as img:
        assert img.size == (50, 50)


def test_composite_rejects_garbage():
    with pytest.raises(UnidentifiedImageError):
        composite_jpeg(b"not an image", Image.new("RGBA", (1, 1)))
