"""SceneSight: render geometric debug scenes to SVG or raster images."""

__version__ = "0.1.0"

from scenesight.engine.transform import Matrix, compose, invert, scale, translate
from scenesight.engine.bounds import get_bounds
from scenesight.engine.viewbox import compute_transform_from_viewbox, get_projection_matrix
from scenesight.engine.culling import build_culling_predicates, filter_visible
from scenesight.models.scene import Scene
from scenesight.models.options import RenderOptions
from scenesight.svg.renderer import build_svg_tree, get_svg_from_scene
from scenesight.canvas.surface import MissingDrawingContextError, RasterSurface
from scenesight.canvas.renderer import draw_scene_to_canvas

__all__ = [
    "Matrix",
    "compose",
    "invert",
    "scale",
    "translate",
    "get_bounds",
    "compute_transform_from_viewbox",
    "get_projection_matrix",
    "build_culling_predicates",
    "filter_visible",
    "Scene",
    "RenderOptions",
    "build_svg_tree",
    "get_svg_from_scene",
    "MissingDrawingContextError",
    "RasterSurface",
    "draw_scene_to_canvas",
]
