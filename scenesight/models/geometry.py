"""Viewbox models shared by the bounds aggregator and the transform compiler."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from scenesight.models.scene import FROZEN_CAMEL_CONFIG, Vec2


class Viewbox(BaseModel):
    """Axis-aligned rectangle in real-world coordinates."""

    model_config = FROZEN_CAMEL_CONFIG

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @model_validator(mode="after")
    def _check_order(self) -> Viewbox:
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError("viewbox max must not be smaller than min")
        return self

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Vec2:
        return Vec2(x=(self.min_x + self.max_x) / 2, y=(self.min_y + self.max_y) / 2)


class CenterViewbox(BaseModel):
    """Viewbox given as a center point plus extents."""

    model_config = FROZEN_CAMEL_CONFIG

    center: Vec2
    width: float
    height: float

    def to_viewbox(self) -> Viewbox:
        half_w = self.width / 2
        half_h = self.height / 2
        return Viewbox(
            min_x=self.center.x - half_w,
            max_x=self.center.x + half_w,
            min_y=self.center.y - half_h,
            max_y=self.center.y + half_h,
        )
