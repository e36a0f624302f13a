from enum import Enum
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PlacementSource(str, Enum):
    """Where a placement plan came from."""

    AI = "ai"
    HEURISTIC = "heuristic"


class PlacementPlan(BaseModel):
    """
    Normalized description of where and how to draw the overlay text.

    All positional values are fractions of the image dimensions, so the same
    plan applies to any resolution of the same picture.
    """

    model_config = ConfigDict(frozen=True)

    x_percent: float = Field(..., description="Horizontal centre of the text block, 0..1.")
    y_percent: float = Field(..., description="Vertical centre of the text block, 0..1.")
    font_size_percent: float = Field(..., description="Font size relative to image height.")
    color: str = Field(..., description="Fill colour as #RRGGBB.")
    font_key: str = Field(..., description="Style key selecting the font family.")


class StyleInfo(BaseModel):
    """Public view of a style table entry."""

    model_config = ConfigDict(from_attributes=True)

    key: str = Field(
        ...,
        validation_alias=AliasChoices("key", "font_key"),
        description="Value to send as `style`.",
    )
    label: str = Field(..., description="Human-readable style name.")
    font_family: str = Field(..., description="Preferred font family for this style.")


class StyleListResponse(BaseModel):
    styles: List[StyleInfo] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body returned for 400 and 500 responses."""

    error: str = Field(..., description="Free-text description of the failure.")
