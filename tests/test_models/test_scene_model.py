"""Tests for scene validation."""

import pytest
from pydantic import ValidationError

from scenesight.models.scene import PrimitiveKind, Scene


def test_null_kind_lists_validate_as_empty():
    scene = Scene.model_validate({
        "points": None,
        "circles": [{"center": {"x": 0, "y": 0}, "radius": 1}],
    })
    assert scene.points == []
    assert len(scene.circles) == 1


def test_every_kind_accepts_null():
    scene = Scene.model_validate({kind.value: None for kind in PrimitiveKind})
    assert all(scene.primitives(kind) == [] for kind in PrimitiveKind)
    # camelCase keys go through the same path.
    assert Scene.model_validate({"infiniteLines": None}).infinite_lines == []


def test_null_inside_a_kind_list_is_still_rejected():
    with pytest.raises(ValidationError):
        Scene.model_validate({"points": [None]})
