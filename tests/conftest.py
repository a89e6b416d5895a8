"""Shared test fixtures."""

from __future__ import annotations

import pytest

from scenesight.models.scene import Scene


# Scenes as they arrive over the wire (camelCase keys)

SINGLE_POINT_SCENE = {
    "points": [{"x": 0, "y": 0, "label": "origin"}],
}

MIXED_SCENE = {
    "title": "Mixed",
    "points": [
        {"x": 0, "y": 0, "label": "A"},
        {"x": 10, "y": 10, "color": "blue"},
    ],
    "lines": [
        {"points": [{"x": 0, "y": 0}, {"x": 10, "y": 0}], "strokeDash": "5,5", "label": "base"},
    ],
    "rects": [
        {"center": {"x": 5, "y": 5}, "width": 4, "height": 2, "fill": "rgba(0, 0, 255, 0.5)"},
    ],
    "circles": [
        {"center": {"x": 2, "y": 8}, "radius": 1.5, "stroke": "green"},
    ],
    "polygons": [
        {"points": [{"x": 6, "y": 6}, {"x": 9, "y": 6}, {"x": 7.5, "y": 9}], "label": "tri"},
    ],
    "arrows": [
        {"start": {"x": 0, "y": 0}, "end": {"x": 10, "y": 10}, "label": "diag"},
    ],
    "infiniteLines": [
        {"origin": {"x": 0, "y": 5}, "directionVector": {"x": 1, "y": 0}, "strokeDash": 2},
    ],
    "texts": [
        {"x": 5, "y": -1, "text": "caption", "fontSize": 1, "anchorSide": "top_center"},
    ],
}

SCREEN_SCENE = {
    "coordinateSystem": "screen",
    "rects": [{"center": {"x": 50, "y": 50}, "width": 100, "height": 100, "fill": "red"}],
}

# Two well-formed graphics payloads surrounded by unrelated log noise
LOG_WITH_GRAPHICS = """\
[12:00:01] starting solver
[12:00:02] {graphics: {title: 'First', points: [{x: 0, y: 0}, {x: 1, y: 1},]}}
[12:00:03] iteration 2
[12:00:04] :graphics {"title": "Second", "lines": [{"points": [{"x": 0, "y": 0}, {"x": 3, "y": 4}]}]}
[12:00:05] done
"""


def make_scene(data: dict) -> Scene:
    return Scene.model_validate(data)


@pytest.fixture
def single_point_scene() -> Scene:
    return make_scene(SINGLE_POINT_SCENE)


@pytest.fixture
def mixed_scene() -> Scene:
    return make_scene(MIXED_SCENE)


@pytest.fixture
def screen_scene() -> Scene:
    return make_scene(SCREEN_SCENE)


@pytest.fixture
def log_with_graphics() -> str:
    return LOG_WITH_GRAPHICS
