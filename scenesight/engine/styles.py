"""Style normalisation shared by both backends.

Palette lookup, dash parsing, the label filter and anchor-side mapping all
live here so the SVG and canvas output cannot drift apart.
"""

from __future__ import annotations

from collections.abc import Sequence

from scenesight.models.scene import AnchorSide, PrimitiveKind, StrokeDash

# Primitives without an explicit colour take palette[index % len(palette)],
# where index is the position within the primitive's own kind.
DEFAULT_PALETTE: tuple[str, ...] = (
    "rgba(239, 68, 68, 0.5)",  # red
    "rgba(249, 115, 22, 0.5)",  # orange
    "rgba(245, 158, 11, 0.5)",  # amber
    "rgba(234, 179, 8, 0.5)",  # yellow
    "rgba(132, 204, 22, 0.5)",  # lime
    "rgba(34, 197, 94, 0.5)",  # green
    "rgba(16, 185, 129, 0.5)",  # emerald
    "rgba(20, 184, 166, 0.5)",  # teal
    "rgba(6, 182, 212, 0.5)",  # cyan
    "rgba(14, 165, 233, 0.5)",  # sky
    "rgba(59, 130, 246, 0.5)",  # blue
    "rgba(99, 102, 241, 0.5)",  # indigo
    "rgba(139, 92, 246, 0.5)",  # violet
    "rgba(168, 85, 247, 0.5)",  # purple
    "rgba(217, 70, 239, 0.5)",  # fuchsia
    "rgba(236, 72, 153, 0.5)",  # pink
    "rgba(249, 168, 212, 0.5)",  # rose
    "rgba(161, 161, 170, 0.5)",  # zinc
)

LABEL_FONT_SIZE = 12.0
LABEL_FONT_FAMILY = "sans-serif"
# Labels of points, lines, rects etc. sit up and to the right of their anchor.
LABEL_OFFSET = 5.0
POINT_RADIUS = 3.0
DEFAULT_LINE_STROKE_WIDTH = 1.0
# Shorter dashes and gaps are lengthened to this many pixels.
MIN_DASH_LENGTH = 0.5


def palette_color(palette: Sequence[str], index: int) -> str:
    return palette[index % len(palette)]


def normalize_stroke_dash(dash: StrokeDash | Sequence[float] | None) -> list[float] | None:
    """Turn any accepted dash form into an explicit dash/gap list, or None for solid.

    ``"5,5"`` and ``[5, 5]`` give ``[5, 5]``; a single value ``"5"``/``[5]``
    alternates dash and gap of that length; ``0``/``"0"``/``[0]`` is solid.
    Positive lengths below ``MIN_DASH_LENGTH`` are raised to it.
    """
    if dash is None:
        return None

    if isinstance(dash, str):
        values: list[float] = []
        for token in dash.replace(",", " ").split():
            try:
                values.append(float(token))
            except ValueError:
                continue
    elif isinstance(dash, (int, float)):
        values = [float(dash)]
    else:
        values = [float(v) for v in dash]

    if not values or all(v == 0 for v in values):
        return None
    values = [max(v, MIN_DASH_LENGTH) if v > 0 else v for v in values]
    if len(values) == 1:
        return [values[0], values[0]]
    return values


def format_dash(dash: Sequence[float]) -> str:
    return ",".join(format_number(v) for v in dash)


def format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def should_render_label(include_text_labels: bool | Sequence[PrimitiveKind], kind: PrimitiveKind) -> bool:
    if isinstance(include_text_labels, bool):
        return include_text_labels
    return kind in include_text_labels


# Nine-point anchor → SVG text-anchor / dominant-baseline.
SVG_TEXT_ANCHOR = {"left": "start", "center": "middle", "right": "end"}
SVG_DOMINANT_BASELINE = {"top": "text-before-edge", "center": "central", "bottom": "text-after-edge"}

# Nine-point anchor → canvas textAlign / textBaseline.
CANVAS_TEXT_ALIGN = {"left": "left", "center": "center", "right": "right"}
CANVAS_TEXT_BASELINE = {"top": "top", "center": "middle", "bottom": "bottom"}


def svg_text_alignment(anchor: AnchorSide) -> tuple[str, str]:
    return SVG_TEXT_ANCHOR[anchor.horizontal], SVG_DOMINANT_BASELINE[anchor.vertical]


def canvas_text_alignment(anchor: AnchorSide) -> tuple[str, str]:
    return CANVAS_TEXT_ALIGN[anchor.horizontal], CANVAS_TEXT_BASELINE[anchor.vertical]
