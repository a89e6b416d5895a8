"""Tests for pulling scenes out of free-form log text."""

import logging

from scenesight.logs.extractor import (
    DEFAULT_TITLE,
    MARKDOWN_HEADING,
    get_markdown_from_log_string,
    get_scenes_from_log_string,
    get_svg_from_log_string,
    get_svgs_from_log_string,
)
from tests.conftest import LOG_WITH_GRAPHICS


def test_finds_every_fragment_in_order():
    scenes = get_scenes_from_log_string(LOG_WITH_GRAPHICS)
    assert [s.title for s in scenes] == ["First", "Second"]
    assert len(scenes[0].points) == 2
    assert scenes[1].lines[0].points[1].y == 4


def test_relaxed_json_is_repaired():
    log = "x {graphics: {rects: [{center: {x: 1, y: 2}, width: 3, height: 4, fill: 'red',},]}} y"
    (scene,) = get_scenes_from_log_string(log)
    assert scene.rects[0].fill == "red"
    assert scene.rects[0].center.y == 2


def test_quoted_graphics_key():
    log = '{"graphics": {"points": [{"x": 5, "y": 6}]}}'
    (scene,) = get_scenes_from_log_string(log)
    assert scene.points[0].x == 5


def test_unparseable_fragment_is_skipped(caplog):
    log = "{graphics: {points: [{x: 1 y: 2}]}}\n:graphics {\"points\": [{\"x\": 0, \"y\": 0}]}"
    with caplog.at_level(logging.WARNING, logger="scenesight.logs.extractor"):
        scenes = get_scenes_from_log_string(log)
    assert len(scenes) == 1
    assert any("Failed to parse" in r.message for r in caplog.records)


def test_invalid_scene_is_skipped(caplog):
    log = ':graphics {"arrows": [{"start": {"x": 0, "y": 0}}]}'
    with caplog.at_level(logging.WARNING, logger="scenesight.logs.extractor"):
        assert get_scenes_from_log_string(log) == []
    assert any("invalid scene" in r.message for r in caplog.records)


def test_null_kind_lists_are_read_as_empty():
    log = ':graphics {"points": null, "circles": [{"center": {"x": 1, "y": 2}, "radius": 3}], "texts": null}'
    (scene,) = get_scenes_from_log_string(log)
    assert scene.points == [] and scene.texts == []
    assert scene.circles[0].radius == 3


def test_svg_of_first_scene():
    svg = get_svg_from_log_string(LOG_WITH_GRAPHICS)
    assert svg.startswith("<svg")
    assert svg.count('data-type="point"') == 2


def test_no_graphics_gives_empty_outputs():
    assert get_scenes_from_log_string("plain text") == []
    assert get_svg_from_log_string("plain text") == ""
    assert get_svgs_from_log_string("plain text") == []
    assert get_markdown_from_log_string("plain text") == ""


def test_svgs_use_default_title():
    result = get_svgs_from_log_string(':graphics {"points": [{"x": 0, "y": 0}]}')
    assert result[0]["title"] == DEFAULT_TITLE
    assert result[0]["svg"].startswith("<svg")


def test_markdown():
    md = get_markdown_from_log_string(LOG_WITH_GRAPHICS)
    assert md.startswith(MARKDOWN_HEADING + "\n\n<svg")
