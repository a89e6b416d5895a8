"""Project primitives into surface space.

Both backends draw from the Projected* records built here, so projected
coordinates, colours and stroke widths are computed by one code path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable

from scenesight.engine.arrows import get_arrow_geometry, get_inline_label_layout
from scenesight.engine.infinite_lines import (
    clip_infinite_line_to_bounds,
    get_viewport_bounds_from_matrix,
)
from scenesight.engine.registry import KindRegistry
from scenesight.engine.styles import (
    DEFAULT_LINE_STROKE_WIDTH,
    LABEL_FONT_SIZE,
    LABEL_OFFSET,
    POINT_RADIUS,
    normalize_stroke_dash,
    palette_color,
    should_render_label,
)
from scenesight.engine.transform import (
    DegenerateTransformError,
    Matrix,
    apply_to_point,
    apply_to_points,
    horizontal_scale,
)
from scenesight.models.geometry import Viewbox
from scenesight.models.scene import (
    AnchorSide,
    Arrow,
    Circle,
    InfiniteLine,
    Line,
    Point,
    Polygon,
    Primitive,
    PrimitiveKind,
    Rect,
    Text,
    Vec2,
)

XY = tuple[float, float]


@dataclass(frozen=True)
class ProjectedLabel:
    text: str
    x: float
    y: float
    color: str
    font_size: float = LABEL_FONT_SIZE
    angle_degrees: float = 0.0
    # Rotated inline labels are centered on (x, y).
    centered: bool = False


@dataclass(frozen=True)
class ProjectedPoint:
    x: float
    y: float
    radius: float
    color: str
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedPolyline:
    points: list[XY]
    stroke: str
    stroke_width: float
    dash: list[float] | None
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedRect:
    x: float
    y: float
    width: float
    height: float
    fill: str | None
    stroke: str | None
    stroke_width: float
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedCircle:
    cx: float
    cy: float
    r: float
    fill: str | None
    stroke: str | None
    stroke_width: float
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedPolygon:
    points: list[XY]
    fill: str | None
    stroke: str | None
    stroke_width: float
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedArrow:
    shaft_start: XY
    shaft_end: XY
    shaft_width: float
    heads: list[list[XY]]
    color: str
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedInfiniteLine:
    start: XY
    end: XY
    stroke: str
    stroke_width: float
    dash: list[float] | None
    label: ProjectedLabel | None = None


@dataclass(frozen=True)
class ProjectedText:
    x: float
    y: float
    text: str
    font_size: float
    color: str
    anchor_side: AnchorSide


Projected = (
    ProjectedPoint
    | ProjectedPolyline
    | ProjectedRect
    | ProjectedCircle
    | ProjectedPolygon
    | ProjectedArrow
    | ProjectedInfiniteLine
    | ProjectedText
)


@dataclass
class ProjectionContext:
    """Everything a projector needs besides the primitive itself."""

    matrix: Matrix
    surface_width: float
    surface_height: float
    palette: tuple[str, ...]
    label_kinds: set[PrimitiveKind] = field(default_factory=set)

    @cached_property
    def scale(self) -> float:
        return horizontal_scale(self.matrix)

    @cached_property
    def visible_bounds(self) -> Viewbox | None:
        """Real-world box under the surface; None when the matrix is singular."""
        try:
            return get_viewport_bounds_from_matrix(
                self.matrix, self.surface_width, self.surface_height
            )
        except DegenerateTransformError:
            return None

    def labels_for(self, kind: PrimitiveKind) -> bool:
        return kind in self.label_kinds

    def stroke_width(self, explicit: float | None) -> float:
        """Explicit widths are real-world units; missing widths are 1 surface unit."""
        if explicit is None:
            return DEFAULT_LINE_STROKE_WIDTH
        return explicit * self.scale


Projector = Callable[[Primitive, int, ProjectionContext], "Projected | None"]

_projectors: KindRegistry[Projector] = KindRegistry("projection")


def _offset_label(text: str | None, anchor: XY, color: str) -> ProjectedLabel | None:
    if not text:
        return None
    return ProjectedLabel(text=text, x=anchor[0] + LABEL_OFFSET, y=anchor[1] - LABEL_OFFSET, color=color)


def _inline_label(text: str | None, start: XY, end: XY, stroke_width: float, color: str) -> ProjectedLabel | None:
    if not text:
        return None
    layout = get_inline_label_layout(
        Vec2(x=start[0], y=start[1]),
        Vec2(x=end[0], y=end[1]),
        font_size=LABEL_FONT_SIZE,
        stroke_width=stroke_width,
    )
    return ProjectedLabel(
        text=text,
        x=layout.x,
        y=layout.y,
        color=color,
        angle_degrees=layout.angle_degrees,
        centered=True,
    )


def _project_vertices(points: list[Vec2], matrix: Matrix) -> list[XY]:
    if not points:
        return []
    projected = apply_to_points(matrix, [(p.x, p.y) for p in points])
    return [(float(x), float(y)) for x, y in projected]


@_projectors.register(PrimitiveKind.POINTS)
def project_point(point: Point, index: int, ctx: ProjectionContext) -> ProjectedPoint:
    x, y = apply_to_point(ctx.matrix, point)
    color = point.color or palette_color(ctx.palette, index)
    label = None
    if ctx.labels_for(PrimitiveKind.POINTS):
        label = _offset_label(point.label, (x, y), color)
    return ProjectedPoint(x=x, y=y, radius=POINT_RADIUS, color=color, label=label)


@_projectors.register(PrimitiveKind.LINES)
def project_line(line: Line, index: int, ctx: ProjectionContext) -> ProjectedPolyline | None:
    vertices = _project_vertices(line.points, ctx.matrix)
    if not vertices:
        return None
    stroke = line.stroke_color or palette_color(ctx.palette, index)
    label = None
    if ctx.labels_for(PrimitiveKind.LINES):
        label = _offset_label(line.label, vertices[0], stroke)
    return ProjectedPolyline(
        points=vertices,
        stroke=stroke,
        stroke_width=ctx.stroke_width(line.stroke_width),
        dash=normalize_stroke_dash(line.stroke_dash),
        label=label,
    )


def _outline_stroke(stroke: str | None, fill: str | None, fallback: str) -> str | None:
    # A filled shape without an explicit stroke is drawn without outline.
    if stroke:
        return stroke
    return None if fill else fallback


@_projectors.register(PrimitiveKind.RECTS)
def project_rect(rect: Rect, index: int, ctx: ProjectionContext) -> ProjectedRect:
    hw = rect.width / 2
    hh = rect.height / 2
    x1, y1 = apply_to_point(ctx.matrix, Vec2(x=rect.center.x - hw, y=rect.center.y - hh))
    x2, y2 = apply_to_point(ctx.matrix, Vec2(x=rect.center.x + hw, y=rect.center.y + hh))
    x = min(x1, x2)
    y = min(y1, y2)
    fill = rect.fill
    stroke = _outline_stroke(rect.stroke or rect.color, fill, palette_color(ctx.palette, index))
    label = None
    if ctx.labels_for(PrimitiveKind.RECTS):
        label = _offset_label(rect.label, (x, y), stroke or fill or "black")
    return ProjectedRect(
        x=x,
        y=y,
        width=abs(x2 - x1),
        height=abs(y2 - y1),
        fill=fill,
        stroke=stroke,
        stroke_width=ctx.stroke_width(rect.stroke_width),
        label=label,
    )


@_projectors.register(PrimitiveKind.CIRCLES)
def project_circle(circle: Circle, index: int, ctx: ProjectionContext) -> ProjectedCircle:
    cx, cy = apply_to_point(ctx.matrix, circle.center)
    r = circle.radius * ctx.scale
    fill = circle.fill
    stroke = _outline_stroke(circle.stroke, fill, palette_color(ctx.palette, index))
    label = None
    if ctx.labels_for(PrimitiveKind.CIRCLES):
        label = _offset_label(circle.label, (cx, cy - r), stroke or fill or "black")
    return ProjectedCircle(
        cx=cx,
        cy=cy,
        r=r,
        fill=fill,
        stroke=stroke,
        stroke_width=ctx.stroke_width(circle.stroke_width),
        label=label,
    )


@_projectors.register(PrimitiveKind.POLYGONS)
def project_polygon(polygon: Polygon, index: int, ctx: ProjectionContext) -> ProjectedPolygon | None:
    vertices = _project_vertices(polygon.points, ctx.matrix)
    if not vertices:
        return None
    fill = polygon.fill
    stroke = _outline_stroke(polygon.stroke, fill, palette_color(ctx.palette, index))
    label = None
    if ctx.labels_for(PrimitiveKind.POLYGONS):
        label = _offset_label(polygon.label, vertices[0], stroke or fill or "black")
    return ProjectedPolygon(
        points=vertices,
        fill=fill,
        stroke=stroke,
        stroke_width=ctx.stroke_width(polygon.stroke_width),
        label=label,
    )


@_projectors.register(PrimitiveKind.ARROWS)
def project_arrow(arrow: Arrow, index: int, ctx: ProjectionContext) -> ProjectedArrow:
    geometry = get_arrow_geometry(arrow)
    color = arrow.color or palette_color(ctx.palette, index)
    shaft_start = apply_to_point(ctx.matrix, geometry.shaft_start)
    shaft_end = apply_to_point(ctx.matrix, geometry.shaft_end)
    heads = [_project_vertices(head.outline, ctx.matrix) for head in geometry.heads]
    shaft_width = geometry.shaft_width * ctx.scale
    label = None
    if ctx.labels_for(PrimitiveKind.ARROWS):
        start = apply_to_point(ctx.matrix, geometry.start)
        end = apply_to_point(ctx.matrix, geometry.end)
        label = _inline_label(arrow.label, start, end, shaft_width, color)
    return ProjectedArrow(
        shaft_start=shaft_start,
        shaft_end=shaft_end,
        shaft_width=shaft_width,
        heads=heads,
        color=color,
        label=label,
    )


@_projectors.register(PrimitiveKind.INFINITE_LINES)
def project_infinite_line(line: InfiniteLine, index: int, ctx: ProjectionContext) -> ProjectedInfiniteLine | None:
    bounds = ctx.visible_bounds
    if bounds is None:
        return None
    segment = clip_infinite_line_to_bounds(line, bounds)
    if segment is None:
        return None
    start = apply_to_point(ctx.matrix, segment[0])
    end = apply_to_point(ctx.matrix, segment[1])
    stroke = line.stroke_color or palette_color(ctx.palette, index)
    stroke_width = ctx.stroke_width(line.stroke_width)
    label = None
    if ctx.labels_for(PrimitiveKind.INFINITE_LINES):
        label = _inline_label(line.label, start, end, stroke_width, stroke)
    return ProjectedInfiniteLine(
        start=start,
        end=end,
        stroke=stroke,
        stroke_width=stroke_width,
        dash=normalize_stroke_dash(line.stroke_dash),
        label=label,
    )


@_projectors.register(PrimitiveKind.TEXTS)
def project_text(text: Text, index: int, ctx: ProjectionContext) -> ProjectedText:
    x, y = apply_to_point(ctx.matrix, text)
    return ProjectedText(
        x=x,
        y=y,
        text=text.text,
        font_size=text.font_size * ctx.scale,
        color=text.color or palette_color(ctx.palette, index),
        anchor_side=text.anchor_side,
    )


_projectors.check_exhaustive()


def project_primitive(
    kind: PrimitiveKind,
    primitive: Primitive,
    index: int,
    ctx: ProjectionContext,
) -> Projected | None:
    """Projected record for one primitive, or None when nothing is drawable."""
    return _projectors.get(kind)(primitive, index, ctx)


def label_kinds_for(include_text_labels: bool | list[PrimitiveKind]) -> set[PrimitiveKind]:
    return {kind for kind in PrimitiveKind if should_render_label(include_text_labels, kind)}
