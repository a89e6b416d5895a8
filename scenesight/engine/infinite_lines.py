"""Clip infinite lines (origin + direction) to a rectangular viewport."""

from __future__ import annotations

from itertools import combinations

from scenesight.engine.transform import Matrix, apply_to_xy, invert
from scenesight.models.geometry import Viewbox
from scenesight.models.scene import InfiniteLine, Vec2

EPSILON = 1e-9


def _is_within(value: float, lo: float, hi: float) -> bool:
    return lo - EPSILON <= value <= hi + EPSILON


def _dedupe(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    unique: list[tuple[float, float]] = []
    for x, y in points:
        if not any(abs(ux - x) < EPSILON and abs(uy - y) < EPSILON for ux, uy in unique):
            unique.append((x, y))
    return unique


def clip_infinite_line_to_bounds(
    infinite_line: InfiniteLine,
    bounds: Viewbox,
) -> tuple[Vec2, Vec2] | None:
    """Segment of the line visible inside ``bounds``, or None when it misses."""
    ox, oy = infinite_line.origin.x, infinite_line.origin.y
    dx, dy = infinite_line.direction_vector.x, infinite_line.direction_vector.y

    if abs(dx) < EPSILON and abs(dy) < EPSILON:
        return None

    hits: list[tuple[float, float]] = []

    if abs(dx) >= EPSILON:
        for x_edge in (bounds.min_x, bounds.max_x):
            t = (x_edge - ox) / dx
            y = oy + t * dy
            if _is_within(y, bounds.min_y, bounds.max_y):
                hits.append((x_edge, y))

    if abs(dy) >= EPSILON:
        for y_edge in (bounds.min_y, bounds.max_y):
            t = (y_edge - oy) / dy
            x = ox + t * dx
            if _is_within(x, bounds.min_x, bounds.max_x):
                hits.append((x, y_edge))

    unique = _dedupe(hits)
    if len(unique) < 2:
        return None

    # Corner grazes can leave three or four candidates; the farthest pair
    # spans the visible chord.
    first, second = max(
        combinations(unique, 2),
        key=lambda pair: (pair[0][0] - pair[1][0]) ** 2 + (pair[0][1] - pair[1][1]) ** 2,
    )
    return Vec2(x=first[0], y=first[1]), Vec2(x=second[0], y=second[1])


def get_viewport_bounds_from_matrix(matrix: Matrix, width: float, height: float) -> Viewbox:
    """Real-world box visible through ``matrix`` on a width x height surface."""
    screen_to_real = invert(matrix)
    corners = [
        apply_to_xy(screen_to_real, 0, 0),
        apply_to_xy(screen_to_real, width, 0),
        apply_to_xy(screen_to_real, 0, height),
        apply_to_xy(screen_to_real, width, height),
    ]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]
    return Viewbox(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))
