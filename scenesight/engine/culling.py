"""Viewport culling predicates for interactive pan/zoom.

Every test runs in screen space against the viewport grown by a fixed
margin, so no predicate ever needs to invert the live transform. The
predicates may report an off-screen primitive as visible, never the reverse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Callable

from shapely import make_valid
from shapely.geometry import LineString, Polygon as ShapelyPolygon, box

from scenesight.engine.arrows import get_arrow_geometry
from scenesight.engine.infinite_lines import clip_infinite_line_to_bounds
from scenesight.engine.registry import KindRegistry
from scenesight.engine.transform import Matrix, SupportsXY, apply_to_point, horizontal_scale
from scenesight.models.geometry import Viewbox
from scenesight.models.scene import (
    Arrow,
    Circle,
    InfiniteLine,
    Line,
    Point,
    Polygon,
    Primitive,
    PrimitiveKind,
    Rect,
    Scene,
    Text,
    Vec2,
)

logger = logging.getLogger(__name__)

# Pixels around the viewport that still count as on-screen; covers marker
# and glyph radius without knowing their exact size.
OFFSCREEN_MARGIN = 5.0


@dataclass(frozen=True)
class CullingPredicates:
    """Visibility tests bound to one transform and viewport size."""

    matrix: Matrix
    width: float
    height: float
    margin: float = OFFSCREEN_MARGIN

    @property
    def left(self) -> float:
        return -self.margin

    @property
    def top(self) -> float:
        return -self.margin

    @property
    def right(self) -> float:
        return self.width + self.margin

    @property
    def bottom(self) -> float:
        return self.height + self.margin

    @cached_property
    def viewport(self):
        return box(self.left, self.top, self.right, self.bottom)

    def _screen_xy_on_screen(self, sx: float, sy: float) -> bool:
        return self.left <= sx <= self.right and self.top <= sy <= self.bottom

    def is_point_on_screen(self, point: SupportsXY) -> bool:
        return self._screen_xy_on_screen(*apply_to_point(self.matrix, point))

    def does_segment_intersect_viewport(self, p1: SupportsXY, p2: SupportsXY) -> bool:
        sp1 = apply_to_point(self.matrix, p1)
        sp2 = apply_to_point(self.matrix, p2)
        if self._screen_xy_on_screen(*sp1) or self._screen_xy_on_screen(*sp2):
            return True
        if sp1 == sp2:
            return False
        return LineString([sp1, sp2]).intersects(self.viewport)

    def outline_overlaps_viewport(self, vertices: list[SupportsXY]) -> bool:
        # Covers outlines that fully enclose the viewport, where no vertex is
        # on screen and no edge crosses it.
        screen = [apply_to_point(self.matrix, v) for v in vertices]
        outline = ShapelyPolygon(screen)
        if not outline.is_valid:
            # Keeps every lobe of a self-intersecting outline.
            outline = make_valid(outline)
        return outline.intersects(self.viewport)

    def is_visible(self, kind: PrimitiveKind, primitive: Primitive) -> bool:
        return _predicates.get(kind)(self, primitive)

    def points(self, point: Point) -> bool:
        return self.is_visible(PrimitiveKind.POINTS, point)

    def lines(self, line: Line) -> bool:
        return self.is_visible(PrimitiveKind.LINES, line)

    def rects(self, rect: Rect) -> bool:
        return self.is_visible(PrimitiveKind.RECTS, rect)

    def circles(self, circle: Circle) -> bool:
        return self.is_visible(PrimitiveKind.CIRCLES, circle)

    def polygons(self, polygon: Polygon) -> bool:
        return self.is_visible(PrimitiveKind.POLYGONS, polygon)

    def arrows(self, arrow: Arrow) -> bool:
        return self.is_visible(PrimitiveKind.ARROWS, arrow)

    def infinite_lines(self, line: InfiniteLine) -> bool:
        return self.is_visible(PrimitiveKind.INFINITE_LINES, line)

    def texts(self, text: Text) -> bool:
        return self.is_visible(PrimitiveKind.TEXTS, text)


Predicate = Callable[[CullingPredicates, Primitive], bool]

_predicates: KindRegistry[Predicate] = KindRegistry("culling")


@_predicates.register(PrimitiveKind.POINTS)
def _point_visible(preds: CullingPredicates, point: Point) -> bool:
    return preds.is_point_on_screen(point)


@_predicates.register(PrimitiveKind.TEXTS)
def _text_visible(preds: CullingPredicates, text: Text) -> bool:
    return preds.is_point_on_screen(text)


@_predicates.register(PrimitiveKind.LINES)
def _line_visible(preds: CullingPredicates, line: Line) -> bool:
    if any(preds.is_point_on_screen(p) for p in line.points):
        return True
    return any(
        preds.does_segment_intersect_viewport(a, b)
        for a, b in zip(line.points, line.points[1:])
    )


def _rect_corners(rect: Rect) -> list[Vec2]:
    hw = rect.width / 2
    hh = rect.height / 2
    cx, cy = rect.center.x, rect.center.y
    return [
        Vec2(x=cx - hw, y=cy - hh),
        Vec2(x=cx + hw, y=cy - hh),
        Vec2(x=cx + hw, y=cy + hh),
        Vec2(x=cx - hw, y=cy + hh),
    ]


@_predicates.register(PrimitiveKind.RECTS)
def _rect_visible(preds: CullingPredicates, rect: Rect) -> bool:
    corners = _rect_corners(rect)
    if preds.is_point_on_screen(rect.center) or any(preds.is_point_on_screen(c) for c in corners):
        return True
    edges = zip(corners, corners[1:] + corners[:1])
    if any(preds.does_segment_intersect_viewport(a, b) for a, b in edges):
        return True
    if rect.width == 0 or rect.height == 0:
        return False
    return preds.outline_overlaps_viewport(corners)


@_predicates.register(PrimitiveKind.POLYGONS)
def _polygon_visible(preds: CullingPredicates, polygon: Polygon) -> bool:
    pts = polygon.points
    if not pts:
        return False
    if any(preds.is_point_on_screen(p) for p in pts):
        return True
    edges = zip(pts, pts[1:] + pts[:1])
    if any(preds.does_segment_intersect_viewport(a, b) for a, b in edges):
        return True
    if len(pts) < 3:
        return False
    return preds.outline_overlaps_viewport(pts)


@_predicates.register(PrimitiveKind.CIRCLES)
def _circle_visible(preds: CullingPredicates, circle: Circle) -> bool:
    cx, cy, r = circle.center.x, circle.center.y, circle.radius
    cardinal = [
        circle.center,
        Vec2(x=cx + r, y=cy),
        Vec2(x=cx - r, y=cy),
        Vec2(x=cx, y=cy + r),
        Vec2(x=cx, y=cy - r),
    ]
    if any(preds.is_point_on_screen(p) for p in cardinal):
        return True

    sx, sy = apply_to_point(preds.matrix, circle.center)
    screen_radius = r * horizontal_scale(preds.matrix)

    # Center level with the viewport, circle reaching across an edge.
    if preds.left <= sx <= preds.right:
        if abs(sy - preds.top) <= screen_radius or abs(sy - preds.bottom) <= screen_radius:
            return True
    if preds.top <= sy <= preds.bottom:
        if abs(sx - preds.left) <= screen_radius or abs(sx - preds.right) <= screen_radius:
            return True

    # Center diagonally outside, circle clipping a corner.
    radius_sq = screen_radius * screen_radius
    corners = [
        (preds.left, preds.top),
        (preds.right, preds.top),
        (preds.left, preds.bottom),
        (preds.right, preds.bottom),
    ]
    return any((sx - x) ** 2 + (sy - y) ** 2 <= radius_sq for x, y in corners)


@_predicates.register(PrimitiveKind.ARROWS)
def _arrow_visible(preds: CullingPredicates, arrow: Arrow) -> bool:
    geometry = get_arrow_geometry(arrow)
    key_points = [geometry.shaft_start, geometry.shaft_end]
    for head in geometry.heads:
        key_points.extend([head.tip, head.left_wing, head.right_wing, head.base])
    if any(preds.is_point_on_screen(p) for p in key_points):
        return True

    segments = [(geometry.shaft_start, geometry.shaft_end)]
    for head in geometry.heads:
        segments.extend([
            (head.base, head.left_wing),
            (head.left_wing, head.tip),
            (head.tip, head.right_wing),
            (head.right_wing, head.base),
        ])
    if any(preds.does_segment_intersect_viewport(a, b) for a, b in segments):
        return True
    if geometry.head_length <= 0:
        return False
    return any(preds.outline_overlaps_viewport(head.outline) for head in geometry.heads)


@_predicates.register(PrimitiveKind.INFINITE_LINES)
def _infinite_line_visible(preds: CullingPredicates, line: InfiniteLine) -> bool:
    # Clip in screen space: project the origin and a second point on the line.
    ox, oy = apply_to_point(preds.matrix, line.origin)
    tx, ty = apply_to_point(
        preds.matrix,
        Vec2(x=line.origin.x + line.direction_vector.x, y=line.origin.y + line.direction_vector.y),
    )
    screen_line = InfiniteLine(
        origin=Vec2(x=ox, y=oy),
        direction_vector=Vec2(x=tx - ox, y=ty - oy),
    )
    viewport = Viewbox(min_x=preds.left, max_x=preds.right, min_y=preds.top, max_y=preds.bottom)
    return clip_infinite_line_to_bounds(screen_line, viewport) is not None


_predicates.check_exhaustive()


def build_culling_predicates(
    matrix: Matrix,
    width: float,
    height: float,
    margin: float = OFFSCREEN_MARGIN,
) -> CullingPredicates:
    return CullingPredicates(matrix=matrix, width=width, height=height, margin=margin)


def filter_visible(scene: Scene, predicates: CullingPredicates) -> Scene:
    """Copy of ``scene`` keeping only primitives that may be on screen."""
    kept = {
        kind.value: [p for p in scene.primitives(kind) if predicates.is_visible(kind, p)]
        for kind in PrimitiveKind
    }
    total = sum(len(scene.primitives(kind)) for kind in PrimitiveKind)
    logger.debug(
        "Culling kept %d of %d primitives",
        sum(len(v) for v in kept.values()),
        total,
    )
    return scene.model_copy(update=kept)
