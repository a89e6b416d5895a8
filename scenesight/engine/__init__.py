"""SceneSight geometry and projection engine."""

from scenesight.engine.transform import (
    DegenerateTransformError,
    Matrix,
    apply_to_point,
    compose,
    identity,
    invert,
    scale,
    translate,
)
from scenesight.engine.bounds import get_bounds, get_bounds_with_padding
from scenesight.engine.arrows import get_arrow_geometry, get_inline_label_layout
from scenesight.engine.infinite_lines import clip_infinite_line_to_bounds
from scenesight.engine.culling import build_culling_predicates, filter_visible

__all__ = [
    "DegenerateTransformError",
    "Matrix",
    "apply_to_point",
    "compose",
    "identity",
    "invert",
    "scale",
    "translate",
    "get_bounds",
    "get_bounds_with_padding",
    "get_arrow_geometry",
    "get_inline_label_layout",
    "clip_infinite_line_to_bounds",
    "build_culling_predicates",
    "filter_visible",
]
