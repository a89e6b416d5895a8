"""Draw a Scene with canvas-style immediate-mode calls.

Works against anything implementing ``DrawingContext``: the Pillow-backed
``RasterSurface`` or a caller-provided context. Coordinates and stroke widths
come from the same projection records the SVG backend uses.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from scenesight.canvas.surface import DrawingContext, MissingDrawingContextError, RasterSurface
from scenesight.engine.projection import (
    ProjectedArrow,
    ProjectedCircle,
    ProjectedInfiniteLine,
    ProjectedLabel,
    ProjectedPoint,
    ProjectedPolygon,
    ProjectedPolyline,
    ProjectedRect,
    ProjectedText,
    ProjectionContext,
    label_kinds_for,
    project_primitive,
)
from scenesight.engine.registry import KindRegistry
from scenesight.engine.styles import LABEL_FONT_FAMILY, canvas_text_alignment, format_number
from scenesight.engine.viewbox import get_projection_matrix
from scenesight.models.options import RenderOptions
from scenesight.models.scene import PrimitiveKind, Scene

logger = logging.getLogger(__name__)

Drawer = Callable[[DrawingContext, object], None]

_drawers: KindRegistry[Drawer] = KindRegistry("canvas")


def _font(size: float) -> str:
    return f"{format_number(round(size, 3))}px {LABEL_FONT_FAMILY}"


def _trace(ctx: DrawingContext, points: list[tuple[float, float]], closed: bool = False) -> None:
    ctx.begin_path()
    ctx.move_to(*points[0])
    for x, y in points[1:]:
        ctx.line_to(x, y)
    if closed:
        ctx.close_path()


def _stroke(ctx: DrawingContext, color: str | None, width: float, dash: list[float] | None = None) -> None:
    if not color:
        return
    ctx.stroke_style = color
    ctx.line_width = width
    ctx.set_line_dash(dash or [])
    ctx.stroke()
    ctx.set_line_dash([])


def _fill(ctx: DrawingContext, color: str | None) -> None:
    if not color:
        return
    ctx.fill_style = color
    ctx.fill()


def _draw_label(ctx: DrawingContext, label: ProjectedLabel | None) -> None:
    if label is None:
        return
    ctx.fill_style = label.color
    ctx.font = _font(label.font_size)
    if label.centered:
        ctx.save()
        ctx.translate(label.x, label.y)
        ctx.rotate(math.radians(label.angle_degrees))
        ctx.text_align = "center"
        ctx.text_baseline = "middle"
        ctx.fill_text(label.text, 0, 0)
        ctx.restore()
        return
    ctx.text_align = "left"
    ctx.text_baseline = "alphabetic"
    ctx.fill_text(label.text, label.x, label.y)


@_drawers.register(PrimitiveKind.POINTS)
def _draw_point(ctx: DrawingContext, proj: ProjectedPoint) -> None:
    ctx.begin_path()
    ctx.arc(proj.x, proj.y, proj.radius, 0, 2 * math.pi)
    _fill(ctx, proj.color)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.LINES)
def _draw_line(ctx: DrawingContext, proj: ProjectedPolyline) -> None:
    _trace(ctx, proj.points)
    _stroke(ctx, proj.stroke, proj.stroke_width, proj.dash)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.RECTS)
def _draw_rect(ctx: DrawingContext, proj: ProjectedRect) -> None:
    ctx.begin_path()
    ctx.rect(proj.x, proj.y, proj.width, proj.height)
    _fill(ctx, proj.fill)
    _stroke(ctx, proj.stroke, proj.stroke_width)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.CIRCLES)
def _draw_circle(ctx: DrawingContext, proj: ProjectedCircle) -> None:
    ctx.begin_path()
    ctx.arc(proj.cx, proj.cy, proj.r, 0, 2 * math.pi)
    _fill(ctx, proj.fill)
    _stroke(ctx, proj.stroke, proj.stroke_width)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.POLYGONS)
def _draw_polygon(ctx: DrawingContext, proj: ProjectedPolygon) -> None:
    _trace(ctx, proj.points, closed=True)
    _fill(ctx, proj.fill)
    _stroke(ctx, proj.stroke, proj.stroke_width)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.ARROWS)
def _draw_arrow(ctx: DrawingContext, proj: ProjectedArrow) -> None:
    _trace(ctx, [proj.shaft_start, proj.shaft_end])
    _stroke(ctx, proj.color, proj.shaft_width)
    for head in proj.heads:
        _trace(ctx, head, closed=True)
        _fill(ctx, proj.color)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.INFINITE_LINES)
def _draw_infinite_line(ctx: DrawingContext, proj: ProjectedInfiniteLine) -> None:
    _trace(ctx, [proj.start, proj.end])
    _stroke(ctx, proj.stroke, proj.stroke_width, proj.dash)
    _draw_label(ctx, proj.label)


@_drawers.register(PrimitiveKind.TEXTS)
def _draw_text(ctx: DrawingContext, proj: ProjectedText) -> None:
    align, baseline = canvas_text_alignment(proj.anchor_side)
    ctx.fill_style = proj.color
    ctx.font = _font(proj.font_size)
    ctx.text_align = align
    ctx.text_baseline = baseline
    ctx.fill_text(proj.text, proj.x, proj.y)


_drawers.check_exhaustive()


def _resolve_context(target: RasterSurface | DrawingContext) -> tuple[DrawingContext, int, int]:
    get_context = getattr(target, "get_context", None)
    if get_context is not None:
        ctx = get_context()
        if ctx is None:
            raise MissingDrawingContextError("Could not get 2D context from surface")
        return ctx, target.width, target.height
    return target, target.canvas.width, target.canvas.height


def draw_scene_to_canvas(
    scene: Scene,
    target: RasterSurface | DrawingContext,
    options: RenderOptions | None = None,
) -> None:
    """Clear ``target`` and draw every primitive of ``scene`` onto it."""
    options = options or RenderOptions()
    ctx, width, height = _resolve_context(target)
    matrix = get_projection_matrix(scene, width, height, options)

    label_kinds = set() if options.disable_labels else label_kinds_for(options.include_text_labels)
    projection = ProjectionContext(
        matrix=matrix,
        surface_width=width,
        surface_height=height,
        palette=options.palette,
        label_kinds=label_kinds,
    )

    ctx.clear_rect(0, 0, width, height)
    ctx.save()
    drawn = 0
    try:
        if options.background_color and options.background_color != "none":
            ctx.fill_style = options.background_color
            ctx.fill_rect(0, 0, width, height)

        for kind, index, primitive in scene.iter_primitives():
            projected = project_primitive(kind, primitive, index, projection)
            if projected is None:
                continue
            _drawers.get(kind)(ctx, projected)
            drawn += 1
    finally:
        ctx.restore()

    logger.debug("Drew %d primitives onto %sx%s canvas", drawn, width, height)


def render_scene_to_png(scene: Scene, options: RenderOptions | None = None) -> bytes:
    """Rasterize ``scene`` onto a fresh surface sized by the svg_width/svg_height options."""
    options = options or RenderOptions()
    surface = RasterSurface(options.svg_width, options.svg_height)
    draw_scene_to_canvas(scene, surface, options)
    return surface.to_png_bytes()
