"""Tests for scene composition helpers."""

import pytest

from scenesight.engine.bounds import get_bounds
from scenesight.models.scene import Rect, Scene
from scenesight.utils.scene_ops import (
    STACK_PADDING_DIVISOR,
    create_scene_grid,
    filter_scene_by_step,
    get_max_step,
    merge_scenes,
    set_step_of_all_objects,
    sort_rects_by_area,
    stack_scenes_horizontally,
    stack_scenes_vertically,
    translate_scene,
)
from tests.conftest import make_scene


def _square(x=0.0, y=0.0, size=10.0) -> Scene:
    return make_scene({"rects": [{"center": {"x": x, "y": y}, "width": size, "height": size}]})


def test_translate_scene_moves_every_kind(mixed_scene):
    moved = translate_scene(mixed_scene, 100, -50)
    assert (moved.points[0].x, moved.points[0].y) == (100, -50)
    assert moved.lines[0].points[1].x == 110
    assert moved.rects[0].center.y == -45
    assert moved.arrows[0].end.x == 110
    assert moved.infinite_lines[0].origin.y == -45
    assert moved.infinite_lines[0].direction_vector == mixed_scene.infinite_lines[0].direction_vector
    assert moved.texts[0].x == 105
    # Original is untouched.
    assert mixed_scene.points[0].x == 0


def test_translate_keeps_legacy_arrows():
    scene = make_scene({"arrows": [{"start": {"x": 0, "y": 0}, "direction": "right", "length": 2}]})
    moved = translate_scene(scene, 1, 1)
    assert moved.arrows[0].end is None
    assert moved.arrows[0].start.x == 1


def test_merge_keeps_first_title():
    merged = merge_scenes(make_scene({"title": "a", "points": [{"x": 0, "y": 0}]}), make_scene({"title": "b", "points": [{"x": 1, "y": 1}]}))
    assert merged.title == "a"
    assert [p.x for p in merged.points] == [0, 1]


def test_stack_horizontally():
    result = stack_scenes_horizontally([_square(0, 0), _square(100, 100)])
    first, second = result.rects
    # Gap is (10 + 10) / 8; bottoms align.
    assert second.center.x - 5 == pytest.approx(5 + 20 / STACK_PADDING_DIVISOR)
    assert second.center.y == first.center.y


def test_stack_horizontally_with_titles():
    result = stack_scenes_horizontally([_square(), _square()], titles=["left", "right"])
    assert [t.text for t in result.texts] == ["left", "right"]
    assert result.texts[0].y > get_bounds(_square()).max_y


def test_stack_vertically_goes_down():
    result = stack_scenes_vertically([_square(0, 0), _square(50, 50)])
    first, second = result.rects
    assert second.center.x == first.center.x
    assert second.center.y < first.center.y


def test_stack_empty():
    assert stack_scenes_horizontally([]).is_empty
    assert stack_scenes_vertically([]).is_empty


def test_grid_layout():
    grid = create_scene_grid([[_square(), _square()], [_square()]], gap=5)
    centers = [(r.center.x, r.center.y) for r in grid.rects]
    assert centers == [(5, 5), (20, 5), (5, -10)]


def test_grid_gap_fraction():
    grid = create_scene_grid([[_square(), _square()]], gap_as_cell_width_fraction=0.5)
    assert grid.rects[1].center.x - grid.rects[0].center.x == 15


def test_grid_empty():
    assert create_scene_grid([]).is_empty


def test_steps(mixed_scene):
    tagged = set_step_of_all_objects(mixed_scene, 2)
    assert all(p.step == 2 for _, _, p in tagged.iter_primitives())
    assert get_max_step(tagged) == 2
    assert get_max_step(mixed_scene) == 0


def test_filter_by_step():
    scene = make_scene({"points": [{"x": 0, "y": 0, "step": 1}, {"x": 1, "y": 1, "step": 2}, {"x": 2, "y": 2}]})
    assert [p.x for p in filter_scene_by_step(scene, 1).points] == [0, 2]
    assert filter_scene_by_step(scene, None) is scene


def test_sort_rects_by_area():
    rects = [
        Rect.model_validate({"center": {"x": 0, "y": 0}, "width": 1, "height": 1}),
        Rect.model_validate({"center": {"x": 0, "y": 0}, "width": 5, "height": 5}),
        Rect.model_validate({"center": {"x": 0, "y": 0}, "width": 2, "height": 2}),
    ]
    assert [r.width for r in sort_rects_by_area(rects)] == [5, 2, 1]
