"""Tests for the SVG backend."""

import xml.etree.ElementTree as ET

import pytest

from scenesight.engine.transform import Matrix
from scenesight.models.options import RenderOptions
from scenesight.models.scene import PrimitiveKind
from scenesight.svg.renderer import SVG_NS, build_svg_tree, get_svg_from_scene
from tests.conftest import make_scene


def _groups(root: ET.Element, data_type: str) -> list[ET.Element]:
    return root.findall(f"g[@data-type='{data_type}']")


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


def test_root_attributes(mixed_scene):
    root = build_svg_tree(mixed_scene, RenderOptions(svg_width=300, svg_height=200))
    assert root.tag == "svg"
    assert root.get("xmlns") == SVG_NS
    assert root.get("width") == "300"
    assert root.get("height") == "200"
    assert root.get("viewBox") == "0 0 300 200"


def test_one_group_per_primitive(mixed_scene):
    root = build_svg_tree(mixed_scene)
    counts = {
        data_type: len(_groups(root, data_type))
        for data_type in ("point", "line", "rect", "circle", "polygon", "arrow", "infinite_line", "text")
    }
    assert counts == {
        "point": 2,
        "line": 1,
        "rect": 1,
        "circle": 1,
        "polygon": 1,
        "arrow": 1,
        "infinite_line": 1,
        "text": 1,
    }


def test_real_world_data_attributes(mixed_scene):
    root = build_svg_tree(mixed_scene)
    point = _groups(root, "point")[0]
    assert point.get("data-x") == "0"
    assert point.get("data-y") == "0"
    assert point.get("data-label") == "A"

    rect = _groups(root, "rect")[0]
    assert (rect.get("data-x"), rect.get("data-y")) == ("5", "5")
    assert (rect.get("data-width"), rect.get("data-height")) == ("4", "2")

    line = _groups(root, "line")[0]
    assert line.get("data-points") == "0,0 10,0"

    infinite = _groups(root, "infinite_line")[0]
    assert (infinite.get("data-dx"), infinite.get("data-dy")) == ("1", "0")


def test_text_group_label_is_its_content(mixed_scene):
    root = build_svg_tree(mixed_scene)
    text_group = _groups(root, "text")[0]
    assert text_group.get("data-label") == "caption"
    el = text_group.find("text")
    assert el.text == "caption"
    assert el.get("text-anchor") == "middle"
    assert el.get("dominant-baseline") == "text-before-edge"


@pytest.mark.parametrize("coordinate_system", ["cartesian", "screen"])
@pytest.mark.parametrize("anchor_side", ["top_left", "bottom_left"])
def test_framed_text_stays_on_the_surface(coordinate_system, anchor_side):
    scene = make_scene({
        "coordinateSystem": coordinate_system,
        "texts": [{"x": 0, "y": 0, "text": "abcd", "fontSize": 10, "anchorSide": anchor_side}],
    })
    el = _groups(build_svg_tree(scene), "text")[0].find("text")
    y, font_size = float(el.get("y")), float(el.get("font-size"))
    # Top-anchored glyphs hang below y, bottom-anchored ones sit above it.
    top, bottom = (y, y + font_size) if anchor_side.startswith("top") else (y - font_size, y)
    assert top >= -1e-6
    assert bottom <= 640 + 1e-6


def test_layer_and_step_attributes():
    scene = make_scene({"points": [{"x": 0, "y": 0, "layer": "debug", "step": 3}, {"x": 1, "y": 1}]})
    first, second = _groups(build_svg_tree(scene), "point")
    assert first.get("data-layer") == "debug"
    assert first.get("data-step") == "3"
    assert second.get("data-layer") is None
    assert second.get("data-step") is None


# ---------------------------------------------------------------------------
# Styling
# ---------------------------------------------------------------------------


def test_dash_arrays(mixed_scene):
    root = build_svg_tree(mixed_scene)
    polyline = _groups(root, "line")[0].find("polyline")
    assert polyline.get("stroke-dasharray") == "5,5"
    assert polyline.get("fill") == "none"
    infinite = _groups(root, "infinite_line")[0].find("line")
    assert infinite.get("stroke-dasharray") == "2,2"


def test_filled_rect_without_stroke(mixed_scene):
    el = _groups(build_svg_tree(mixed_scene), "rect")[0].find("rect")
    assert el.get("fill") == "rgba(0, 0, 255, 0.5)"
    assert el.get("stroke") == "none"
    assert el.get("stroke-width") is None


def test_explicit_stroke_width_is_scaled():
    scene = make_scene({"lines": [{"points": [{"x": 0, "y": 0}, {"x": 10, "y": 0}], "strokeWidth": 2}]})
    options = RenderOptions(transform=Matrix(a=3, d=3))
    polyline = _groups(build_svg_tree(scene, options), "line")[0].find("polyline")
    assert polyline.get("stroke-width") == "6"
    assert polyline.get("points") == "0,0 30,0"


def test_arrow_shaft_and_head(mixed_scene):
    g = _groups(build_svg_tree(mixed_scene), "arrow")[0]
    shaft = g.find("line")
    assert shaft.get("stroke-linecap") == "butt"
    assert len(g.findall("polygon")) == 1


def test_background(mixed_scene):
    root = build_svg_tree(mixed_scene, RenderOptions(background_color="white"))
    first = root[0]
    assert first.tag == "rect"
    assert first.get("width") == "100%"
    assert first.get("fill") == "white"

    plain = build_svg_tree(mixed_scene)
    assert plain[0].tag == "g"
    assert build_svg_tree(mixed_scene, RenderOptions(background_color="none"))[0].tag == "g"


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def test_label_filter(mixed_scene):
    root = build_svg_tree(mixed_scene, RenderOptions(include_text_labels=[PrimitiveKind.ARROWS]))
    assert _groups(root, "arrow")[0].find("text") is not None
    assert _groups(root, "point")[0].find("text") is None
    assert _groups(root, "polygon")[0].find("text") is None
    # Text primitives are content, not labels.
    assert _groups(root, "text")[0].find("text") is not None


def test_rotated_arrow_label(mixed_scene):
    label = _groups(build_svg_tree(mixed_scene), "arrow")[0].find("text")
    assert label.text == "diag"
    assert label.get("transform").startswith("rotate(")
    assert label.get("text-anchor") == "middle"


def test_no_labels(mixed_scene):
    root = build_svg_tree(mixed_scene, RenderOptions(include_text_labels=False))
    for data_type in ("point", "line", "polygon", "arrow"):
        for g in _groups(root, data_type):
            assert g.find("text") is None


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------


def test_crosshair_and_readout(mixed_scene):
    root = build_svg_tree(mixed_scene)
    crosshair = root.find("g[@id='crosshair']")
    assert crosshair.get("style") == "display: none"
    assert crosshair.find("line[@id='crosshair-h']") is not None
    assert crosshair.find("line[@id='crosshair-v']") is not None
    assert crosshair.find("text[@id='coordinates']") is not None
    script = root.find("script")
    assert script is not None
    assert "<" not in script.text and "&" not in script.text


def test_singular_transform_skips_readout_and_infinite_lines(mixed_scene):
    root = build_svg_tree(mixed_scene, RenderOptions(transform=Matrix(a=0, d=0)))
    assert root.find("script") is None
    assert _groups(root, "infinite_line") == []
    assert len(_groups(root, "point")) == 2


def test_empty_scene_renders():
    root = build_svg_tree(make_scene({}))
    assert root.findall("g[@data-type]") == []
    assert root.find("g[@id='crosshair']") is not None


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def test_svg_string_parses(mixed_scene):
    svg = get_svg_from_scene(mixed_scene)
    assert svg.startswith("<svg")
    parsed = ET.fromstring(svg)
    assert parsed.tag == f"{{{SVG_NS}}}svg"
    assert len(parsed.findall(f"{{{SVG_NS}}}g[@data-type]")) == 9


def test_input_scene_is_not_modified(mixed_scene):
    before = mixed_scene.model_dump()
    get_svg_from_scene(mixed_scene)
    assert mixed_scene.model_dump() == before


def test_point_and_circle_scenario():
    from scenesight.engine.bounds import get_bounds
    from scenesight.engine.transform import horizontal_scale
    from scenesight.engine.viewbox import compute_transform_from_viewbox

    scene = make_scene({"points": [{"x": 0, "y": 0}], "circles": [{"center": {"x": 50, "y": 50}, "radius": 10}]})
    root = build_svg_tree(scene)
    assert len(_groups(root, "point")) == 1
    (circle_group,) = _groups(root, "circle")
    scale_factor = horizontal_scale(compute_transform_from_viewbox(get_bounds(scene), 640, 640, y_flip=True))
    assert float(circle_group.find("circle").get("r")) == pytest.approx(10 * scale_factor, abs=1e-5)
