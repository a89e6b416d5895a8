"""Scene bounding box across every primitive kind.

Text extents use a font-metric-free heuristic (character count times a
fixed width ratio) so framing stays deterministic.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from scenesight.engine.arrows import get_arrow_bounding_box
from scenesight.models.geometry import Viewbox
from scenesight.models.scene import CoordinateSystem, Scene, Text

FONT_SIZE_WIDTH_RATIO = 0.6
FONT_SIZE_HEIGHT_RATIO = 1.0

DEFAULT_BOUNDS = Viewbox(min_x=-1.0, max_x=1.0, min_y=-1.0, max_y=1.0)


def y_flip_for(scene: Scene) -> bool:
    """Screen scenes keep y downward; cartesian and untagged scenes flip."""
    return scene.coordinate_system != CoordinateSystem.SCREEN


def get_text_bounds(text: Text, y_flip: bool = False) -> Viewbox:
    """Approximate box covered by a text label, honouring its anchor side.

    Under a y-flip a top-anchored label hangs toward real -y, so the
    vertical offsets are mirrored.
    """
    width = len(text.text) * text.font_size * FONT_SIZE_WIDTH_RATIO
    height = text.font_size * FONT_SIZE_HEIGHT_RATIO

    horizontal = text.anchor_side.horizontal
    if horizontal == "left":
        min_x = text.x
    elif horizontal == "right":
        min_x = text.x - width
    else:
        min_x = text.x - width / 2

    vertical = text.anchor_side.vertical
    if y_flip and vertical in ("top", "bottom"):
        vertical = "bottom" if vertical == "top" else "top"
    if vertical == "top":
        min_y = text.y
    elif vertical == "bottom":
        min_y = text.y - height
    else:
        min_y = text.y - height / 2

    return Viewbox(min_x=min_x, max_x=min_x + width, min_y=min_y, max_y=min_y + height)


def _box_corners(box: Viewbox) -> list[tuple[float, float]]:
    return [(box.min_x, box.min_y), (box.max_x, box.max_y)]


def collect_extent_points(scene: Scene, y_flip: bool = False) -> NDArray[np.float64]:
    """Every point that bounds the scene's visual extent, as an Nx2 array."""
    pts: list[tuple[float, float]] = [(p.x, p.y) for p in scene.points]

    for line in scene.lines:
        pts.extend((p.x, p.y) for p in line.points)

    for rect in scene.rects:
        hw = rect.width / 2
        hh = rect.height / 2
        cx, cy = rect.center.x, rect.center.y
        pts.extend([(cx - hw, cy - hh), (cx + hw, cy - hh), (cx - hw, cy + hh), (cx + hw, cy + hh)])

    for circle in scene.circles:
        cx, cy, r = circle.center.x, circle.center.y, circle.radius
        pts.extend([(cx - r, cy), (cx + r, cy), (cx, cy - r), (cx, cy + r)])

    for polygon in scene.polygons:
        pts.extend((p.x, p.y) for p in polygon.points)

    for arrow in scene.arrows:
        pts.extend(_box_corners(get_arrow_bounding_box(arrow)))

    for text in scene.texts:
        pts.extend(_box_corners(get_text_bounds(text, y_flip)))

    # Infinite lines have no extent of their own.
    return np.array(pts, dtype=np.float64).reshape(-1, 2)


def get_bounds(scene: Scene, y_flip: bool | None = None) -> Viewbox:
    if y_flip is None:
        y_flip = y_flip_for(scene)
    pts = collect_extent_points(scene, y_flip)
    if len(pts) == 0:
        return DEFAULT_BOUNDS
    return Viewbox(
        min_x=float(np.min(pts[:, 0])),
        max_x=float(np.max(pts[:, 0])),
        min_y=float(np.min(pts[:, 1])),
        max_y=float(np.max(pts[:, 1])),
    )


def get_bounds_with_padding(
    scene: Scene, fraction: float = 0.1, y_flip: bool | None = None
) -> Viewbox:
    """Scene bounds grown by ``fraction`` of their extent on every side."""
    bounds = get_bounds(scene, y_flip)
    pad_x = bounds.width * fraction
    pad_y = bounds.height * fraction
    return Viewbox(
        min_x=bounds.min_x - pad_x,
        max_x=bounds.max_x + pad_x,
        min_y=bounds.min_y - pad_y,
        max_y=bounds.max_y + pad_y,
    )
