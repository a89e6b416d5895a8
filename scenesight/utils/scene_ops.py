"""Scene composition helpers: translate, merge, stack, grid and step tagging.

All helpers return new scenes; inputs are never modified.
"""

from __future__ import annotations

from collections.abc import Sequence

from scenesight.engine.bounds import get_bounds
from scenesight.models.scene import AnchorSide, PrimitiveKind, Rect, Scene, Text, Vec2

# Title font size as a share of the stacked row's total width.
TITLE_FONT_SIZE_RATIO = 0.025

# Gap between stacked scenes, as a share of the two neighbours' summed extent.
STACK_PADDING_DIVISOR = 8


def _shift(v: Vec2, dx: float, dy: float) -> Vec2:
    return Vec2(x=v.x + dx, y=v.y + dy)


def translate_scene(scene: Scene, dx: float, dy: float) -> Scene:
    """Move every primitive by (dx, dy). Infinite-line directions are unchanged."""
    return scene.model_copy(
        update={
            "points": [p.model_copy(update={"x": p.x + dx, "y": p.y + dy}) for p in scene.points],
            "lines": [
                line.model_copy(update={"points": [_shift(p, dx, dy) for p in line.points]})
                for line in scene.lines
            ],
            "rects": [r.model_copy(update={"center": _shift(r.center, dx, dy)}) for r in scene.rects],
            "circles": [c.model_copy(update={"center": _shift(c.center, dx, dy)}) for c in scene.circles],
            "polygons": [
                poly.model_copy(update={"points": [_shift(p, dx, dy) for p in poly.points]})
                for poly in scene.polygons
            ],
            "arrows": [
                a.model_copy(
                    update={
                        "start": _shift(a.start, dx, dy),
                        "end": _shift(a.end, dx, dy) if a.end is not None else None,
                    }
                )
                for a in scene.arrows
            ],
            "infinite_lines": [
                il.model_copy(update={"origin": _shift(il.origin, dx, dy)}) for il in scene.infinite_lines
            ],
            "texts": [t.model_copy(update={"x": t.x + dx, "y": t.y + dy}) for t in scene.texts],
        }
    )


def merge_scenes(first: Scene, second: Scene) -> Scene:
    """Concatenate every primitive kind; ``first`` keeps its title and coordinate system."""
    return first.model_copy(
        update={
            kind.value: list(first.primitives(kind)) + list(second.primitives(kind))
            for kind in PrimitiveKind
        }
    )


def stack_scenes_horizontally(scenes: Sequence[Scene], titles: Sequence[str] | None = None) -> Scene:
    """Lay scenes out left to right, bottoms aligned, with optional titles above each."""
    if not scenes:
        return Scene()

    result = scenes[0]
    prev_bounds = get_bounds(result)
    base_min_y = prev_bounds.min_y
    bounds_list = [prev_bounds]

    for scene in scenes[1:]:
        bounds = get_bounds(scene)
        padding = (prev_bounds.width + bounds.width) / STACK_PADDING_DIVISOR
        dx = prev_bounds.max_x + padding - bounds.min_x
        dy = base_min_y - bounds.min_y
        shifted = translate_scene(scene, dx, dy)
        result = merge_scenes(result, shifted)
        prev_bounds = get_bounds(shifted)
        bounds_list.append(prev_bounds)

    if titles:
        overall = get_bounds(result)
        font_size = overall.width * TITLE_FONT_SIZE_RATIO
        title_texts = [
            Text(
                x=(b.min_x + b.max_x) / 2,
                y=b.max_y + font_size,
                text=title,
                font_size=font_size,
                anchor_side=AnchorSide.BOTTOM_CENTER,
            )
            for title, b in zip(titles, bounds_list)
        ]
        result = merge_scenes(result, Scene(texts=title_texts))

    return result


def stack_scenes_vertically(scenes: Sequence[Scene]) -> Scene:
    """Lay scenes out top to bottom (decreasing y), left edges aligned."""
    if not scenes:
        return Scene()

    result = scenes[0]
    prev_bounds = get_bounds(result)
    base_min_x = prev_bounds.min_x

    for scene in scenes[1:]:
        bounds = get_bounds(scene)
        padding = (prev_bounds.height + bounds.height) / STACK_PADDING_DIVISOR
        dx = base_min_x - bounds.min_x
        dy = prev_bounds.min_y - padding - bounds.max_y
        shifted = translate_scene(scene, dx, dy)
        result = merge_scenes(result, shifted)
        prev_bounds = get_bounds(shifted)

    return result


def create_scene_grid(
    rows: Sequence[Sequence[Scene]],
    cell_width: float | None = None,
    cell_height: float | None = None,
    gap: float | None = None,
    gap_as_cell_width_fraction: float | None = None,
) -> Scene:
    """Place scenes on a grid; row 0 is on top and rows grow downward in y."""
    if not rows or not rows[0]:
        return Scene()

    max_width = 0.0
    max_height = 0.0
    for row in rows:
        for scene in row:
            b = get_bounds(scene)
            max_width = max(max_width, b.width)
            max_height = max(max_height, b.height)

    cell_w = cell_width if cell_width is not None else max_width
    cell_h = cell_height if cell_height is not None else max_height
    if gap is None:
        gap = gap_as_cell_width_fraction * cell_w if gap_as_cell_width_fraction is not None else 0.0

    result: Scene | None = None
    for r, row in enumerate(rows):
        for c, scene in enumerate(row):
            b = get_bounds(scene)
            dx = c * (cell_w + gap) - b.min_x
            dy = -r * (cell_h + gap) - b.min_y
            shifted = translate_scene(scene, dx, dy)
            result = shifted if result is None else merge_scenes(result, shifted)

    return result if result is not None else Scene()


def set_step_of_all_objects(scene: Scene, step: int) -> Scene:
    return scene.model_copy(
        update={
            kind.value: [p.model_copy(update={"step": step}) for p in scene.primitives(kind)]
            for kind in PrimitiveKind
        }
    )


def sort_rects_by_area(rects: Sequence[Rect]) -> list[Rect]:
    """Largest first, so smaller rects are drawn on top."""
    return sorted(rects, key=lambda r: r.width * r.height, reverse=True)


def get_max_step(scene: Scene) -> int:
    """Highest ``step`` over all primitives; 0 when none carries one."""
    steps = [p.step for _, _, p in scene.iter_primitives() if p.step is not None]
    return max([0, *steps])


def filter_scene_by_step(scene: Scene, step: int | None) -> Scene:
    """Keep primitives without a step plus those tagged with ``step``; None keeps all."""
    if step is None:
        return scene
    return scene.model_copy(
        update={
            kind.value: [p for p in scene.primitives(kind) if p.step is None or p.step == step]
            for kind in PrimitiveKind
        }
    )
