"""CSS colour strings to RGBA tuples for the raster surface."""

from __future__ import annotations

import re

from PIL import ImageColor

RGBA = tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)

_TRANSPARENT_NAMES = {"none", "transparent"}

# rgb()/rgba() with a fractional alpha in [0, 1], which ImageColor rejects.
_CSS_RGB_RE = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)


def _channel(value: str) -> int:
    return max(0, min(255, round(float(value))))


def _alpha(value: str | None) -> int:
    if value is None:
        return 255
    if value.endswith("%"):
        fraction = float(value[:-1]) / 100
    else:
        fraction = float(value)
    return max(0, min(255, round(fraction * 255)))


def parse_color(css: str) -> RGBA:
    """Parse ``rgba(r, g, b, a)``, ``rgb(...)``, hex or a named colour.

    Raises ValueError for strings that are none of these.
    """
    text = css.strip()
    if text.lower() in _TRANSPARENT_NAMES:
        return TRANSPARENT

    match = _CSS_RGB_RE.match(text)
    if match:
        r, g, b, a = match.groups()
        return (_channel(r), _channel(g), _channel(b), _alpha(a))

    return ImageColor.getcolor(text, "RGBA")
