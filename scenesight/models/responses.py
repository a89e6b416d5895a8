"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from scenesight.engine.transform import Matrix
from scenesight.models.geometry import Viewbox
from scenesight.models.scene import FROZEN_CAMEL_CONFIG, Scene


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    primitive_kinds: list[str] = Field(default_factory=list)


class BoundsResponse(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    viewbox: Viewbox
    center_x: float
    center_y: float


class TransformResponse(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    matrix: Matrix
    svg_transform: str
    horizontal_scale: float
    vertical_scale: float


class CullResponse(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    scene: Scene
    visible: int
    total: int


class ExtractedSvg(BaseModel):
    title: str
    svg: str


class ExtractResponse(BaseModel):
    scenes: list[Scene] = Field(default_factory=list)
    svgs: list[ExtractedSvg] = Field(default_factory=list)
