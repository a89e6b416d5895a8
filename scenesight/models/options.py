"""Per-call rendering options shared by the SVG and canvas backends."""

from __future__ import annotations

from pydantic import BaseModel, Field

from scenesight.engine.styles import DEFAULT_PALETTE
from scenesight.engine.transform import Matrix
from scenesight.models.geometry import CenterViewbox, Viewbox
from scenesight.models.scene import FROZEN_CAMEL_CONFIG, PrimitiveKind

DEFAULT_SVG_SIZE = 640


class RenderOptions(BaseModel):
    model_config = FROZEN_CAMEL_CONFIG

    # True/False for all/none, or an allow-list of kinds whose labels render.
    include_text_labels: bool | list[PrimitiveKind] = True
    # Canvas-only switch that suppresses every label regardless of the filter.
    disable_labels: bool = False
    background_color: str | None = None
    svg_width: int = Field(default=DEFAULT_SVG_SIZE, gt=0)
    svg_height: int = Field(default=DEFAULT_SVG_SIZE, gt=0)
    padding: float | None = None
    y_flip: bool | None = None
    transform: Matrix | None = None
    viewbox: Viewbox | CenterViewbox | None = None
    palette: tuple[str, ...] = Field(default=DEFAULT_PALETTE, min_length=1)
