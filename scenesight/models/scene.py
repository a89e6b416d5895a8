"""Scene data model: the immutable input every renderer consumes.

Input JSON uses camelCase keys (``strokeWidth``, ``anchorSide``,
``directionVector``); Python code reads snake_case attributes. An absent
primitive sequence and an empty one are the same thing: every sequence
defaults to ``[]``.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

FROZEN_CAMEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class PrimitiveKind(str, enum.Enum):
    """Closed set of primitive kinds. Values match the Scene field names."""

    POINTS = "points"
    LINES = "lines"
    RECTS = "rects"
    CIRCLES = "circles"
    POLYGONS = "polygons"
    ARROWS = "arrows"
    INFINITE_LINES = "infinite_lines"
    TEXTS = "texts"


class AnchorSide(str, enum.Enum):
    TOP_LEFT = "top_left"
    TOP_CENTER = "top_center"
    TOP_RIGHT = "top_right"
    CENTER_LEFT = "center_left"
    CENTER = "center"
    CENTER_RIGHT = "center_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_CENTER = "bottom_center"
    BOTTOM_RIGHT = "bottom_right"

    @property
    def vertical(self) -> str:
        """``top``, ``center`` or ``bottom``."""
        return self.value.split("_")[0]

    @property
    def horizontal(self) -> str:
        """``left``, ``center`` or ``right``."""
        parts = self.value.split("_")
        return parts[1] if len(parts) > 1 else "center"


class CoordinateSystem(str, enum.Enum):
    CARTESIAN = "cartesian"  # y grows upward
    SCREEN = "screen"  # y grows downward


ArrowDirection = Literal[
    "right", "left", "top", "bottom",
    "right-top", "right-bottom", "left-top", "left-bottom",
]

# Dash patterns arrive as "5,5", "5", 5 or [5, 5].
StrokeDash = str | float | list[float]


class Vec2(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    x: float
    y: float


class _Tagged(BaseModel):
    """Fields shared by every primitive (consumed by the interactive layer)."""

    model_config = FROZEN_CAMEL_CONFIG

    label: str | None = None
    layer: str | None = None
    step: int | None = None
    animation_key: str | None = None


class Point(_Tagged):
    x: float
    y: float
    color: str | None = None


class Line(_Tagged):
    points: list[Vec2] = Field(default_factory=list)
    stroke_width: float | None = None
    stroke_color: str | None = None
    stroke_dash: StrokeDash | None = None


class Rect(_Tagged):
    center: Vec2
    width: float
    height: float
    fill: str | None = None
    stroke: str | None = None
    color: str | None = None
    stroke_width: float | None = None


class Circle(_Tagged):
    center: Vec2
    radius: float
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None


class Polygon(_Tagged):
    points: list[Vec2] = Field(default_factory=list)
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None


class Arrow(_Tagged):
    """Arrow from ``start`` to ``end``, or the legacy ``direction`` + ``length`` form."""

    start: Vec2
    end: Vec2 | None = None
    direction: ArrowDirection | None = None
    length: float | None = None
    flip: bool = False
    double_sided: bool = False
    shaft_width: float | None = None
    head_length: float | None = None
    head_width: float | None = None
    color: str | None = None
    stroke_width: float | None = None

    @model_validator(mode="after")
    def _require_end_or_direction(self) -> Arrow:
        if self.end is None and self.direction is None:
            raise ValueError("arrow needs either 'end' or 'direction'")
        return self


class InfiniteLine(_Tagged):
    origin: Vec2
    direction_vector: Vec2
    stroke_color: str | None = None
    stroke_width: float | None = None
    stroke_dash: StrokeDash | None = None


class Text(_Tagged):
    x: float
    y: float
    text: str
    font_size: float = 12.0
    anchor_side: AnchorSide = AnchorSide.CENTER
    color: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_position(cls, data: Any) -> Any:
        # Older producers emit {position: {x, y}} instead of flat x/y.
        if isinstance(data, dict) and "position" in data and "x" not in data:
            position = data["position"]
            data = {k: v for k, v in data.items() if k != "position"}
            data["x"] = position["x"]
            data["y"] = position["y"]
        return data


Primitive = Point | Line | Rect | Circle | Polygon | Arrow | InfiniteLine | Text


class Scene(BaseModel):
    """Complete description of one snapshot to render."""

    model_config = FROZEN_CAMEL_CONFIG

    points: list[Point] = Field(default_factory=list)
    lines: list[Line] = Field(default_factory=list)
    rects: list[Rect] = Field(default_factory=list)
    circles: list[Circle] = Field(default_factory=list)
    polygons: list[Polygon] = Field(default_factory=list)
    arrows: list[Arrow] = Field(default_factory=list)
    infinite_lines: list[InfiniteLine] = Field(default_factory=list)
    texts: list[Text] = Field(default_factory=list)
    coordinate_system: CoordinateSystem | None = None
    title: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_graphics(cls, data: Any) -> Any:
        # Log producers often wrap the payload as {graphics: {...}}.
        if isinstance(data, dict) and isinstance(data.get("graphics"), dict):
            return data["graphics"]
        return data

    @field_validator(
        "points", "lines", "rects", "circles", "polygons", "arrows", "infinite_lines", "texts",
        mode="before",
    )
    @classmethod
    def _null_list_is_empty(cls, value: Any) -> Any:
        # Producers emit `"points": null` for an absent kind.
        return [] if value is None else value

    def primitives(self, kind: PrimitiveKind) -> list[Primitive]:
        return getattr(self, kind.value)

    def iter_primitives(self) -> Iterator[tuple[PrimitiveKind, int, Primitive]]:
        """Yield (kind, index within kind, primitive) in PrimitiveKind order."""
        for kind in PrimitiveKind:
            for index, primitive in enumerate(self.primitives(kind)):
                yield kind, index, primitive

    @property
    def is_empty(self) -> bool:
        return not any(self.primitives(kind) for kind in PrimitiveKind)
