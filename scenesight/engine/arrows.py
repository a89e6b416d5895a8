"""Arrow geometry solver.

Derives shaft and head outlines from an Arrow. Geometry is recomputed on
every call; scenes are caller-owned and may change between renders.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from scenesight.models.geometry import Viewbox
from scenesight.models.scene import Arrow, Vec2

DEFAULT_SHAFT_WIDTH = 2.0

# Default head length is 30% of the shaft, but never shorter than two shaft
# widths so short or thick arrows still show a proportioned head.
HEAD_LENGTH_RATIO = 0.3
MIN_HEAD_LENGTH_IN_SHAFT_WIDTHS = 2.0
MIN_HEAD_WIDTH_IN_SHAFT_WIDTHS = 3.0

# Inline label: the glyph half-height is ~0.65 em above the baseline.
INLINE_LABEL_FONT_OFFSET_RATIO = 0.65
INLINE_LABEL_DEFAULT_FONT_SIZE = 12.0
INLINE_LABEL_DEFAULT_PADDING = 6.0

_SQRT1_2 = 1 / math.sqrt(2)

DIRECTION_VECTORS: dict[str, tuple[float, float]] = {
    "right": (1.0, 0.0),
    "left": (-1.0, 0.0),
    "top": (0.0, 1.0),
    "bottom": (0.0, -1.0),
    "right-top": (_SQRT1_2, _SQRT1_2),
    "right-bottom": (_SQRT1_2, -_SQRT1_2),
    "left-top": (-_SQRT1_2, _SQRT1_2),
    "left-bottom": (-_SQRT1_2, -_SQRT1_2),
}

DEFAULT_DIRECTION_LENGTH = 1.0


@dataclass(frozen=True)
class ArrowHead:
    tip: Vec2
    base: Vec2
    left_wing: Vec2
    right_wing: Vec2

    @property
    def outline(self) -> list[Vec2]:
        return [self.tip, self.left_wing, self.right_wing]


@dataclass(frozen=True)
class ArrowGeometry:
    start: Vec2
    end: Vec2
    shaft_start: Vec2
    shaft_end: Vec2
    shaft_width: float
    head_length: float
    head_width: float
    length: float
    heads: list[ArrowHead] = field(default_factory=list)

    def key_points(self) -> list[Vec2]:
        """Tail, tip and every head vertex."""
        pts = [self.start, self.end]
        for head in self.heads:
            pts.extend([head.base, head.tip, head.left_wing, head.right_wing])
        return pts


@dataclass(frozen=True)
class InlineLabelLayout:
    x: float
    y: float
    angle_degrees: float
    normal: Vec2


def resolve_arrow_end(arrow: Arrow) -> Vec2:
    """End point for either arrow form."""
    if arrow.end is not None:
        return arrow.end
    ux, uy = DIRECTION_VECTORS[arrow.direction]
    length = arrow.length if arrow.length is not None else DEFAULT_DIRECTION_LENGTH
    return Vec2(x=arrow.start.x + ux * length, y=arrow.start.y + uy * length)


def _build_head(tip: Vec2, ux: float, uy: float, head_length: float, head_width: float) -> ArrowHead:
    # (ux, uy) points from the shaft toward the tip.
    base = Vec2(x=tip.x - ux * head_length, y=tip.y - uy * head_length)
    off_x = -uy * head_width / 2
    off_y = ux * head_width / 2
    return ArrowHead(
        tip=tip,
        base=base,
        left_wing=Vec2(x=base.x + off_x, y=base.y + off_y),
        right_wing=Vec2(x=base.x - off_x, y=base.y - off_y),
    )


def get_arrow_geometry(arrow: Arrow) -> ArrowGeometry:
    start = arrow.start
    end = resolve_arrow_end(arrow)

    if arrow.shaft_width is not None:
        shaft_width = arrow.shaft_width
    elif arrow.stroke_width is not None:
        shaft_width = arrow.stroke_width
    else:
        shaft_width = DEFAULT_SHAFT_WIDTH

    vx = end.x - start.x
    vy = end.y - start.y
    length = math.hypot(vx, vy)
    head_at_start = arrow.flip or arrow.double_sided
    head_at_end = not arrow.flip or arrow.double_sided

    if length == 0:
        head_width = arrow.head_width if arrow.head_width is not None else (
            shaft_width * MIN_HEAD_WIDTH_IN_SHAFT_WIDTHS
        )
        collapsed = ArrowHead(tip=end, base=end, left_wing=end, right_wing=end)
        return ArrowGeometry(
            start=start,
            end=end,
            shaft_start=start,
            shaft_end=end,
            shaft_width=shaft_width,
            head_length=0.0,
            head_width=head_width,
            length=0.0,
            heads=[collapsed],
        )

    ux = vx / length
    uy = vy / length

    if arrow.head_length is not None:
        head_length = arrow.head_length
    else:
        available = length / 2 if (head_at_start and head_at_end) else length
        head_length = min(
            available,
            max(HEAD_LENGTH_RATIO * length, MIN_HEAD_LENGTH_IN_SHAFT_WIDTHS * shaft_width),
        )
    if arrow.head_width is not None:
        head_width = arrow.head_width
    else:
        head_width = max(head_length, MIN_HEAD_WIDTH_IN_SHAFT_WIDTHS * shaft_width)

    heads: list[ArrowHead] = []
    shaft_start, shaft_end = start, end
    if head_at_end:
        head = _build_head(end, ux, uy, head_length, head_width)
        heads.append(head)
        shaft_end = head.base
    if head_at_start:
        head = _build_head(start, -ux, -uy, head_length, head_width)
        heads.append(head)
        shaft_start = head.base

    return ArrowGeometry(
        start=start,
        end=end,
        shaft_start=shaft_start,
        shaft_end=shaft_end,
        shaft_width=shaft_width,
        head_length=head_length,
        head_width=head_width,
        length=length,
        heads=heads,
    )


def get_arrow_bounding_box(arrow: Arrow) -> Viewbox:
    """Extent of tail, tip and all wing points."""
    geometry = get_arrow_geometry(arrow)
    pts = [geometry.start, geometry.end]
    for head in geometry.heads:
        pts.extend([head.left_wing, head.right_wing])
    arr = np.array([(p.x, p.y) for p in pts])
    return Viewbox(
        min_x=float(arr[:, 0].min()),
        max_x=float(arr[:, 0].max()),
        min_y=float(arr[:, 1].min()),
        max_y=float(arr[:, 1].max()),
    )


def get_inline_label_layout(
    start: Vec2,
    end: Vec2,
    font_size: float = INLINE_LABEL_DEFAULT_FONT_SIZE,
    stroke_width: float = DEFAULT_SHAFT_WIDTH,
    padding: float = INLINE_LABEL_DEFAULT_PADDING,
) -> InlineLabelLayout:
    """Place a label beside the midpoint of a shaft, rotated to stay upright.

    Works in whatever space ``start``/``end`` are given in; the backends pass
    projected surface coordinates.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        ux, uy = 1.0, 0.0
    else:
        ux, uy = dx / length, dy / length

    angle = math.degrees(math.atan2(uy, ux))
    nx, ny = -uy, ux
    if angle > 90 or angle <= -90:
        angle = angle - 180 if angle > 0 else angle + 180
        nx, ny = -nx, -ny

    offset = stroke_width / 2 + font_size * INLINE_LABEL_FONT_OFFSET_RATIO + padding
    mid_x = (start.x + end.x) / 2
    mid_y = (start.y + end.y) / 2
    return InlineLabelLayout(
        x=mid_x + nx * offset,
        y=mid_y + ny * offset,
        angle_degrees=angle,
        normal=Vec2(x=nx, y=ny),
    )
