"""Immediate-mode drawing context over a Pillow image.

``RasterSurface`` plays the role of an HTML canvas element and
``RasterContext`` that of its 2D context: stateful fill/stroke styles, a
current path, ``save()``/``restore()`` and a current transform. Every fill
and stroke is drawn onto a transparent overlay and alpha-composited, so
translucent palette colours blend the way they do in a browser.
"""

from __future__ import annotations

import io
import logging
import math
import re
from dataclasses import dataclass, field, replace
from typing import Protocol, runtime_checkable

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from scenesight.engine.styles import MIN_DASH_LENGTH
from scenesight.engine.transform import (
    Matrix,
    apply_to_xy,
    compose,
    horizontal_scale,
    identity,
    translate,
)
from scenesight.utils.colors import RGBA, TRANSPARENT, parse_color

logger = logging.getLogger(__name__)

DEFAULT_FONT = "10px sans-serif"

# Segments used to approximate a full circle; partial arcs use a share of it.
ARC_SEGMENTS = 64

_FONT_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)px")

# canvas textAlign / textBaseline -> Pillow anchor characters
_PIL_HORIZONTAL = {"left": "l", "start": "l", "center": "m", "right": "r", "end": "r"}
_PIL_VERTICAL = {"top": "t", "middle": "m", "bottom": "b", "alphabetic": "s"}


class MissingDrawingContextError(RuntimeError):
    """Raised when a surface cannot provide a 2D drawing context."""


class CanvasLike(Protocol):
    width: int
    height: int


@runtime_checkable
class DrawingContext(Protocol):
    """Subset of the HTML canvas 2D context the canvas backend calls."""

    canvas: CanvasLike
    fill_style: str
    stroke_style: str
    line_width: float
    line_cap: str
    font: str
    text_align: str
    text_baseline: str

    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, x: float, y: float) -> None: ...
    def rotate(self, angle: float) -> None: ...
    def set_line_dash(self, segments: list[float]) -> None: ...
    def clear_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None: ...
    def rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def close_path(self) -> None: ...
    def fill(self) -> None: ...
    def stroke(self) -> None: ...
    def fill_text(self, text: str, x: float, y: float) -> None: ...


@dataclass
class _State:
    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    line_width: float = 1.0
    line_cap: str = "butt"
    line_dash: list[float] = field(default_factory=list)
    font: str = DEFAULT_FONT
    text_align: str = "start"
    text_baseline: str = "alphabetic"
    transform: Matrix = field(default_factory=identity)


@dataclass
class _SubPath:
    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False


def _font_size(font: str) -> float:
    match = _FONT_SIZE_RE.search(font)
    return float(match.group(1)) if match else 10.0


def _dash_runs(
    points: list[tuple[float, float]], pattern: list[float]
) -> list[list[tuple[float, float]]]:
    """Split a polyline into its "on" runs; the dash phase carries across vertices."""
    pattern = [max(d, MIN_DASH_LENGTH) for d in pattern]
    runs: list[list[tuple[float, float]]] = []
    index = 0
    remaining = pattern[0]
    on = True
    current: list[tuple[float, float]] = [points[0]]

    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        seg_len = math.hypot(x2 - x1, y2 - y1)
        travelled = 0.0
        while seg_len - travelled > remaining:
            travelled += remaining
            t = travelled / seg_len
            split = (x1 + (x2 - x1) * t, y1 + (y2 - y1) * t)
            if on:
                current.append(split)
                runs.append(current)
            current = [split]
            on = not on
            index = (index + 1) % len(pattern)
            remaining = pattern[index]
        remaining -= seg_len - travelled
        if on:
            current.append((x2, y2))
        else:
            current = [(x2, y2)]

    if on and len(current) > 1:
        runs.append(current)
    return runs


class RasterContext:
    """2D drawing context bound to one RasterSurface."""

    def __init__(self, surface: RasterSurface) -> None:
        self.canvas = surface
        self._state = _State()
        self._stack: list[_State] = []
        self._path: list[_SubPath] = []

    # -- state ------------------------------------------------------------

    @property
    def fill_style(self) -> str:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value: str) -> None:
        self._state.fill_style = value

    @property
    def stroke_style(self) -> str:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value: str) -> None:
        self._state.stroke_style = value

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        # Non-positive widths are ignored, as in a browser canvas.
        if value > 0:
            self._state.line_width = value

    @property
    def line_cap(self) -> str:
        return self._state.line_cap

    @line_cap.setter
    def line_cap(self, value: str) -> None:
        self._state.line_cap = value

    @property
    def font(self) -> str:
        return self._state.font

    @font.setter
    def font(self, value: str) -> None:
        self._state.font = value

    @property
    def text_align(self) -> str:
        return self._state.text_align

    @text_align.setter
    def text_align(self, value: str) -> None:
        self._state.text_align = value

    @property
    def text_baseline(self) -> str:
        return self._state.text_baseline

    @text_baseline.setter
    def text_baseline(self, value: str) -> None:
        self._state.text_baseline = value

    def set_line_dash(self, segments: list[float]) -> None:
        self._state.line_dash = list(segments)

    def get_line_dash(self) -> list[float]:
        return list(self._state.line_dash)

    def save(self) -> None:
        self._stack.append(replace(self._state, line_dash=list(self._state.line_dash)))

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        self._state.transform = compose(translate(x, y), self._state.transform)

    def rotate(self, angle: float) -> None:
        cos, sin = math.cos(angle), math.sin(angle)
        rotation = Matrix(a=cos, b=sin, c=-sin, d=cos)
        self._state.transform = compose(rotation, self._state.transform)

    @property
    def transform(self) -> Matrix:
        return self._state.transform

    # -- paths ------------------------------------------------------------

    def _device(self, x: float, y: float) -> tuple[float, float]:
        return apply_to_xy(self._state.transform, x, y)

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(_SubPath(points=[self._device(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        if not self._path:
            self.move_to(x, y)
            return
        self._path[-1].points.append(self._device(x, y))

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None:
        sweep = end_angle - start_angle
        steps = max(8, int(math.ceil(ARC_SEGMENTS * min(abs(sweep), 2 * math.pi) / (2 * math.pi))))
        angles = np.linspace(start_angle, end_angle, steps + 1)
        xs = x + radius * np.cos(angles)
        ys = y + radius * np.sin(angles)
        points = [self._device(float(px), float(py)) for px, py in zip(xs, ys)]
        if not self._path:
            self._path.append(_SubPath())
        self._path[-1].points.extend(points)

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        self._path.append(_SubPath(points=[self._device(cx, cy) for cx, cy in corners], closed=True))
        self._path.append(_SubPath(points=[self._device(x, y)]))

    def close_path(self) -> None:
        if self._path:
            self._path[-1].closed = True

    # -- painting ---------------------------------------------------------

    def _rgba(self, style: str) -> RGBA:
        try:
            return parse_color(style)
        except ValueError:
            logger.warning("Unrecognised colour %r, drawing transparent", style)
            return TRANSPARENT

    def fill(self) -> None:
        color = self._rgba(self._state.fill_style)
        if color[3] == 0:
            return
        overlay, draw = self.canvas.new_layer()
        for sub in self._path:
            if len(sub.points) >= 3:
                draw.polygon(sub.points, fill=color)
        self.canvas.composite(overlay)

    def stroke(self) -> None:
        color = self._rgba(self._state.stroke_style)
        if color[3] == 0:
            return
        width = max(1, round(self._state.line_width * horizontal_scale(self._state.transform)))
        dash = [d for d in self._state.line_dash if d > 0]
        overlay, draw = self.canvas.new_layer()
        for sub in self._path:
            points = list(sub.points)
            if sub.closed and len(points) > 1:
                points.append(points[0])
            if len(points) < 2:
                continue
            runs = _dash_runs(points, dash) if dash else [points]
            for run in runs:
                draw.line(run, fill=color, width=width, joint="curve")
        self.canvas.composite(overlay)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        saved = self._path
        self._path = []
        self.rect(x, y, width, height)
        self.fill()
        self._path = saved

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        corners = [self._device(x, y), self._device(x + width, y + height)]
        x0 = max(0, round(min(c[0] for c in corners)))
        y0 = max(0, round(min(c[1] for c in corners)))
        x1 = min(self.canvas.width, round(max(c[0] for c in corners)))
        y1 = min(self.canvas.height, round(max(c[1] for c in corners)))
        if x1 > x0 and y1 > y0:
            self.canvas.image.paste(TRANSPARENT, (x0, y0, x1, y1))

    def fill_text(self, text: str, x: float, y: float) -> None:
        color = self._rgba(self._state.fill_style)
        if not text or color[3] == 0:
            return
        size = _font_size(self._state.font) * horizontal_scale(self._state.transform)
        font = self.canvas.font(size)
        anchor = _PIL_HORIZONTAL.get(self._state.text_align, "l") + _PIL_VERTICAL.get(
            self._state.text_baseline, "s"
        )
        origin = self._device(x, y)
        m = self._state.transform
        angle = math.degrees(math.atan2(m.b, m.a))

        overlay, draw = self.canvas.new_layer()
        draw.text(origin, text, fill=color, font=font, anchor=anchor)
        if abs(angle) > 1e-9:
            # Image.rotate turns counter-clockwise; canvas angles turn clockwise.
            overlay = overlay.rotate(
                -angle, resample=Image.Resampling.BICUBIC, center=origin, expand=False
            )
        self.canvas.composite(overlay)


class RasterSurface:
    """RGBA pixel surface with a canvas-style 2D context."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.image = Image.new("RGBA", (width, height), TRANSPARENT)
        self._context: RasterContext | None = None
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def get_context(self) -> RasterContext | None:
        if self._context is None:
            self._context = RasterContext(self)
        return self._context

    def new_layer(self) -> tuple[Image.Image, ImageDraw.ImageDraw]:
        layer = Image.new("RGBA", self.image.size, TRANSPARENT)
        return layer, ImageDraw.Draw(layer)

    def composite(self, layer: Image.Image) -> None:
        self.image.alpha_composite(layer)

    def font(self, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        key = max(1, round(size))
        if key not in self._fonts:
            self._fonts[key] = ImageFont.load_default(size=key)
        return self._fonts[key]

    def to_image(self) -> Image.Image:
        return self.image.copy()

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()

    def pixel(self, x: int, y: int) -> RGBA:
        return self.image.getpixel((x, y))
