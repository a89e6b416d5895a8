"""Serialize a Scene into a standalone SVG document.

Each primitive becomes one ``<g>`` carrying its real-world coordinates as
``data-*`` attributes next to the projected geometry. A hidden crosshair and
a small pointer-tracking script give a coordinate readout when the document
is opened in a browser.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Callable

from scenesight.engine.projection import (
    ProjectedArrow,
    ProjectedCircle,
    ProjectedInfiniteLine,
    ProjectedLabel,
    ProjectedPoint,
    ProjectedPolygon,
    ProjectedPolyline,
    ProjectedRect,
    ProjectedText,
    ProjectionContext,
    label_kinds_for,
    project_primitive,
)
from scenesight.engine.registry import KindRegistry
from scenesight.engine.styles import (
    LABEL_FONT_FAMILY,
    format_dash,
    format_number,
    svg_text_alignment,
)
from scenesight.engine.transform import DegenerateTransformError, Matrix, invert
from scenesight.engine.viewbox import get_projection_matrix
from scenesight.models.options import RenderOptions
from scenesight.models.scene import (
    Arrow,
    Circle,
    InfiniteLine,
    Line,
    Point,
    Polygon,
    PrimitiveKind,
    Rect,
    Scene,
    Text,
    Vec2,
)

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

CROSSHAIR_COLOR = "#666"
CROSSHAIR_STROKE_WIDTH = 0.5
READOUT_FONT_FAMILY = "monospace"
READOUT_FONT_SIZE = 12

Emitter = Callable[[ET.Element, object, object], None]

_emitters: KindRegistry[Emitter] = KindRegistry("svg")


# ---------------------------------------------------------------------------
# Attribute helpers
# ---------------------------------------------------------------------------


def _num(value: float) -> str:
    return format_number(round(value, 6))


def _points_attr(points: list[tuple[float, float]]) -> str:
    return " ".join(f"{_num(x)},{_num(y)}" for x, y in points)


def _real_points_attr(points: list[Vec2]) -> str:
    return " ".join(f"{format_number(p.x)},{format_number(p.y)}" for p in points)


def _group(parent: ET.Element, data_type: str, primitive, **data: str) -> ET.Element:
    g = ET.SubElement(parent, "g")
    g.set("data-type", data_type)
    g.set("data-label", primitive.label or "")
    for key, value in data.items():
        g.set(f"data-{key.replace('_', '-')}", value)
    if primitive.layer is not None:
        g.set("data-layer", primitive.layer)
    if primitive.step is not None:
        g.set("data-step", str(primitive.step))
    return g


def _stroke_attrs(el: ET.Element, stroke: str | None, width: float, dash: list[float] | None = None) -> None:
    el.set("stroke", stroke or "none")
    if stroke:
        el.set("stroke-width", _num(width))
    if dash:
        el.set("stroke-dasharray", format_dash(dash))


def _emit_label(parent: ET.Element, label: ProjectedLabel | None) -> None:
    if label is None:
        return
    text = ET.SubElement(parent, "text")
    text.set("x", _num(label.x))
    text.set("y", _num(label.y))
    text.set("font-family", LABEL_FONT_FAMILY)
    text.set("font-size", _num(label.font_size))
    text.set("fill", label.color)
    if label.centered:
        text.set("text-anchor", "middle")
        text.set("dominant-baseline", "central")
        text.set("transform", f"rotate({_num(label.angle_degrees)} {_num(label.x)} {_num(label.y)})")
    text.text = label.text


# ---------------------------------------------------------------------------
# Per-kind emitters
# ---------------------------------------------------------------------------


@_emitters.register(PrimitiveKind.POINTS)
def _emit_point(parent: ET.Element, proj: ProjectedPoint, point: Point) -> None:
    g = _group(parent, "point", point, x=format_number(point.x), y=format_number(point.y))
    marker = ET.SubElement(g, "circle")
    marker.set("cx", _num(proj.x))
    marker.set("cy", _num(proj.y))
    marker.set("r", _num(proj.radius))
    marker.set("fill", proj.color)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.LINES)
def _emit_line(parent: ET.Element, proj: ProjectedPolyline, line: Line) -> None:
    g = _group(parent, "line", line, points=_real_points_attr(line.points))
    polyline = ET.SubElement(g, "polyline")
    polyline.set("points", _points_attr(proj.points))
    polyline.set("fill", "none")
    _stroke_attrs(polyline, proj.stroke, proj.stroke_width, proj.dash)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.RECTS)
def _emit_rect(parent: ET.Element, proj: ProjectedRect, rect: Rect) -> None:
    g = _group(
        parent,
        "rect",
        rect,
        x=format_number(rect.center.x),
        y=format_number(rect.center.y),
        width=format_number(rect.width),
        height=format_number(rect.height),
    )
    el = ET.SubElement(g, "rect")
    el.set("x", _num(proj.x))
    el.set("y", _num(proj.y))
    el.set("width", _num(proj.width))
    el.set("height", _num(proj.height))
    el.set("fill", proj.fill or "none")
    _stroke_attrs(el, proj.stroke, proj.stroke_width)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.CIRCLES)
def _emit_circle(parent: ET.Element, proj: ProjectedCircle, circle: Circle) -> None:
    g = _group(
        parent,
        "circle",
        circle,
        x=format_number(circle.center.x),
        y=format_number(circle.center.y),
        radius=format_number(circle.radius),
    )
    el = ET.SubElement(g, "circle")
    el.set("cx", _num(proj.cx))
    el.set("cy", _num(proj.cy))
    el.set("r", _num(proj.r))
    el.set("fill", proj.fill or "none")
    _stroke_attrs(el, proj.stroke, proj.stroke_width)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.POLYGONS)
def _emit_polygon(parent: ET.Element, proj: ProjectedPolygon, polygon: Polygon) -> None:
    g = _group(parent, "polygon", polygon, points=_real_points_attr(polygon.points))
    el = ET.SubElement(g, "polygon")
    el.set("points", _points_attr(proj.points))
    el.set("fill", proj.fill or "none")
    _stroke_attrs(el, proj.stroke, proj.stroke_width)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.ARROWS)
def _emit_arrow(parent: ET.Element, proj: ProjectedArrow, arrow: Arrow) -> None:
    g = _group(parent, "arrow", arrow, x=format_number(arrow.start.x), y=format_number(arrow.start.y))
    shaft = ET.SubElement(g, "line")
    shaft.set("x1", _num(proj.shaft_start[0]))
    shaft.set("y1", _num(proj.shaft_start[1]))
    shaft.set("x2", _num(proj.shaft_end[0]))
    shaft.set("y2", _num(proj.shaft_end[1]))
    shaft.set("stroke", proj.color)
    shaft.set("stroke-width", _num(proj.shaft_width))
    shaft.set("stroke-linecap", "butt")
    for head in proj.heads:
        el = ET.SubElement(g, "polygon")
        el.set("points", _points_attr(head))
        el.set("fill", proj.color)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.INFINITE_LINES)
def _emit_infinite_line(parent: ET.Element, proj: ProjectedInfiniteLine, line: InfiniteLine) -> None:
    g = _group(
        parent,
        "infinite_line",
        line,
        x=format_number(line.origin.x),
        y=format_number(line.origin.y),
        dx=format_number(line.direction_vector.x),
        dy=format_number(line.direction_vector.y),
    )
    el = ET.SubElement(g, "line")
    el.set("x1", _num(proj.start[0]))
    el.set("y1", _num(proj.start[1]))
    el.set("x2", _num(proj.end[0]))
    el.set("y2", _num(proj.end[1]))
    _stroke_attrs(el, proj.stroke, proj.stroke_width, proj.dash)
    _emit_label(g, proj.label)


@_emitters.register(PrimitiveKind.TEXTS)
def _emit_text(parent: ET.Element, proj: ProjectedText, text: Text) -> None:
    g = _group(parent, "text", text, x=format_number(text.x), y=format_number(text.y))
    # Text primitives report their content as the label.
    g.set("data-label", text.text)
    anchor, baseline = svg_text_alignment(proj.anchor_side)
    el = ET.SubElement(g, "text")
    el.set("x", _num(proj.x))
    el.set("y", _num(proj.y))
    el.set("fill", proj.color)
    el.set("font-size", _num(proj.font_size))
    el.set("font-family", LABEL_FONT_FAMILY)
    el.set("text-anchor", anchor)
    el.set("dominant-baseline", baseline)
    el.text = proj.text


_emitters.check_exhaustive()


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------

_READOUT_SCRIPT = """
var svg = document.currentScript.parentElement;
var inverse = {inverse};
svg.addEventListener('mousemove', function (e) {{
  var box = svg.getBoundingClientRect();
  var x = e.clientX - box.left;
  var y = e.clientY - box.top;
  var h = svg.getElementById('crosshair-h');
  var v = svg.getElementById('crosshair-v');
  var coords = svg.getElementById('coordinates');
  svg.getElementById('crosshair').style.display = 'block';
  h.setAttribute('y1', y);
  h.setAttribute('y2', y);
  v.setAttribute('x1', x);
  v.setAttribute('x2', x);
  var rx = inverse.a * x + inverse.c * y + inverse.e;
  var ry = inverse.b * x + inverse.d * y + inverse.f;
  coords.textContent = '(' + rx.toFixed(2) + ', ' + ry.toFixed(2) + ')';
  coords.setAttribute('x', x + 5);
  coords.setAttribute('y', y - 5);
}});
svg.addEventListener('mouseleave', function () {{
  svg.getElementById('crosshair').style.display = 'none';
}});
"""


def _emit_crosshair(root: ET.Element, width: int, height: int) -> None:
    g = ET.SubElement(root, "g", {"id": "crosshair", "style": "display: none"})
    ET.SubElement(
        g,
        "line",
        {
            "id": "crosshair-h",
            "x1": "0",
            "x2": str(width),
            "y1": "0",
            "y2": "0",
            "stroke": CROSSHAIR_COLOR,
            "stroke-width": str(CROSSHAIR_STROKE_WIDTH),
        },
    )
    ET.SubElement(
        g,
        "line",
        {
            "id": "crosshair-v",
            "x1": "0",
            "x2": "0",
            "y1": "0",
            "y2": str(height),
            "stroke": CROSSHAIR_COLOR,
            "stroke-width": str(CROSSHAIR_STROKE_WIDTH),
        },
    )
    coords = ET.SubElement(
        g,
        "text",
        {
            "id": "coordinates",
            "font-family": READOUT_FONT_FAMILY,
            "font-size": str(READOUT_FONT_SIZE),
            "fill": CROSSHAIR_COLOR,
        },
    )
    coords.text = ""


def _emit_readout_script(root: ET.Element, matrix: Matrix) -> None:
    try:
        inverse = invert(matrix)
    except DegenerateTransformError:
        logger.warning("Singular projection %s, skipping coordinate readout", matrix)
        return
    coefficients = ", ".join(
        f"{name}: {getattr(inverse, name)!r}" for name in ("a", "b", "c", "d", "e", "f")
    )
    script = ET.SubElement(root, "script")
    script.text = _READOUT_SCRIPT.format(inverse="{" + coefficients + "}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_svg_tree(scene: Scene, options: RenderOptions | None = None) -> ET.Element:
    """Build the SVG element tree for ``scene``."""
    options = options or RenderOptions()
    width, height = options.svg_width, options.svg_height
    matrix = get_projection_matrix(scene, width, height, options)

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": str(width),
            "height": str(height),
            "viewBox": f"0 0 {width} {height}",
        },
    )

    if options.background_color and options.background_color != "none":
        ET.SubElement(root, "rect", {"width": "100%", "height": "100%", "fill": options.background_color})

    ctx = ProjectionContext(
        matrix=matrix,
        surface_width=width,
        surface_height=height,
        palette=options.palette,
        label_kinds=label_kinds_for(options.include_text_labels),
    )

    emitted = 0
    for kind, index, primitive in scene.iter_primitives():
        projected = project_primitive(kind, primitive, index, ctx)
        if projected is None:
            continue
        _emitters.get(kind)(root, projected, primitive)
        emitted += 1

    _emit_crosshair(root, width, height)
    _emit_readout_script(root, matrix)

    logger.debug("Built SVG tree: %d primitive groups, %sx%s", emitted, width, height)
    return root


def get_svg_from_scene(scene: Scene, options: RenderOptions | None = None) -> str:
    """Render ``scene`` to an indented SVG string."""
    root = build_svg_tree(scene, options)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode")
