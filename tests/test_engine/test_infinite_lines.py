"""Tests for infinite-line clipping."""

import pytest

from scenesight.engine.infinite_lines import (
    clip_infinite_line_to_bounds,
    get_viewport_bounds_from_matrix,
)
from scenesight.engine.transform import DegenerateTransformError, compose, scale, translate
from scenesight.models.geometry import Viewbox
from scenesight.models.scene import InfiniteLine

BOX = Viewbox(min_x=0, max_x=10, min_y=0, max_y=10)


def _line(ox, oy, dx, dy) -> InfiniteLine:
    return InfiniteLine.model_validate(
        {"origin": {"x": ox, "y": oy}, "directionVector": {"x": dx, "y": dy}}
    )


def _as_set(segment):
    return {(round(p.x, 9), round(p.y, 9)) for p in segment}


def test_horizontal_line_spans_box():
    seg = clip_infinite_line_to_bounds(_line(-100, 5, 1, 0), BOX)
    assert _as_set(seg) == {(0, 5), (10, 5)}


def test_vertical_line_spans_box():
    seg = clip_infinite_line_to_bounds(_line(3, 50, 0, -2), BOX)
    assert _as_set(seg) == {(3, 0), (3, 10)}


def test_diagonal_through_corners():
    seg = clip_infinite_line_to_bounds(_line(5, 5, 1, 1), BOX)
    assert _as_set(seg) == {(0, 0), (10, 10)}


def test_line_missing_the_box():
    assert clip_infinite_line_to_bounds(_line(0, 20, 1, 0), BOX) is None


def test_line_grazing_a_single_corner():
    assert clip_infinite_line_to_bounds(_line(0, 20, 1, -1), BOX) is None


def test_zero_direction_is_skipped():
    assert clip_infinite_line_to_bounds(_line(5, 5, 0, 0), BOX) is None


def test_viewport_bounds_from_matrix():
    m = compose(scale(10, -10), translate(0, 100))
    b = get_viewport_bounds_from_matrix(m, 100, 100)
    assert (b.min_x, b.max_x) == pytest.approx((0, 10))
    assert (b.min_y, b.max_y) == pytest.approx((0, 10))


def test_viewport_bounds_singular_matrix():
    with pytest.raises(DegenerateTransformError):
        get_viewport_bounds_from_matrix(scale(0), 100, 100)


def test_axis_line_through_origin():
    box = Viewbox(min_x=-10, max_x=10, min_y=-10, max_y=10)
    seg = clip_infinite_line_to_bounds(_line(0, 0, 1, 0), box)
    assert _as_set(seg) == {(-10, 0), (10, 0)}
