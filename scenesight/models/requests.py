"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from scenesight.engine.transform import Matrix
from scenesight.models.geometry import CenterViewbox, Viewbox
from scenesight.models.options import RenderOptions
from scenesight.models.scene import FROZEN_CAMEL_CONFIG, Scene


class RenderRequest(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    scene: Scene = Field(..., description="Scene to render")
    options: RenderOptions | None = Field(
        default=None,
        description="Rendering options; server defaults apply when omitted",
    )


class BoundsRequest(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    scene: Scene
    padding_fraction: float = Field(default=0.0, ge=0, description="Grow bounds by this share of their extent")


class TransformRequest(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    viewbox: Viewbox | CenterViewbox
    width: float = Field(..., gt=0, description="Surface width")
    height: float = Field(..., gt=0, description="Surface height")
    padding: float | None = None
    y_flip: bool = False


class CullRequest(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    scene: Scene
    transform: Matrix = Field(..., description="Live real-to-screen matrix")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    margin: float | None = Field(default=None, ge=0)


class ExtractRequest(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    log: str = Field(..., description="Free-form log text containing graphics fragments")
    options: RenderOptions | None = None
