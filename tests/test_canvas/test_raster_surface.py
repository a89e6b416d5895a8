"""Tests for the Pillow-backed raster surface and its 2D context."""

import math

import pytest

from scenesight.canvas.surface import RasterSurface, _dash_runs
from scenesight.utils.colors import TRANSPARENT


@pytest.fixture
def surface() -> RasterSurface:
    return RasterSurface(100, 100)


def _painted(surface: RasterSurface) -> int:
    return sum(1 for px in surface.to_image().getdata() if px[3] > 0)


def test_size_must_be_positive():
    with pytest.raises(ValueError):
        RasterSurface(0, 10)


def test_context_is_reused(surface):
    assert surface.get_context() is surface.get_context()
    assert surface.get_context().canvas is surface


def test_starts_transparent(surface):
    assert surface.pixel(10, 10) == TRANSPARENT


def test_fill_rect(surface):
    ctx = surface.get_context()
    ctx.fill_style = "red"
    ctx.fill_rect(10, 10, 20, 20)
    assert surface.pixel(20, 20) == (255, 0, 0, 255)
    assert surface.pixel(50, 50) == TRANSPARENT


def test_translucent_fill_blends(surface):
    ctx = surface.get_context()
    ctx.fill_style = "white"
    ctx.fill_rect(0, 0, 100, 100)
    ctx.fill_style = "rgba(0, 0, 255, 0.5)"
    ctx.fill_rect(0, 0, 100, 100)
    r, g, b, a = surface.pixel(50, 50)
    assert a == 255
    assert r == pytest.approx(128, abs=2)
    assert b == 255


def test_clear_rect(surface):
    ctx = surface.get_context()
    ctx.fill_style = "black"
    ctx.fill_rect(0, 0, 100, 100)
    ctx.clear_rect(0, 0, 50, 100)
    assert surface.pixel(25, 50) == TRANSPARENT
    assert surface.pixel(75, 50) == (0, 0, 0, 255)


def test_stroke_line(surface):
    ctx = surface.get_context()
    ctx.stroke_style = "green"
    ctx.line_width = 3
    ctx.begin_path()
    ctx.move_to(0, 50)
    ctx.line_to(100, 50)
    ctx.stroke()
    assert surface.pixel(50, 50)[3] == 255
    assert surface.pixel(50, 20) == TRANSPARENT


def test_dashed_stroke_leaves_gaps(surface):
    ctx = surface.get_context()
    ctx.stroke_style = "black"
    ctx.set_line_dash([10, 10])
    ctx.begin_path()
    ctx.move_to(0, 10)
    ctx.line_to(100, 10)
    ctx.stroke()
    assert surface.pixel(5, 10)[3] == 255
    assert surface.pixel(15, 10) == TRANSPARENT
    assert surface.pixel(25, 10)[3] == 255


def test_arc_fill(surface):
    ctx = surface.get_context()
    ctx.fill_style = "blue"
    ctx.begin_path()
    ctx.arc(50, 50, 10, 0, 2 * math.pi)
    ctx.fill()
    assert surface.pixel(50, 50) == (0, 0, 255, 255)
    assert surface.pixel(50, 70) == TRANSPARENT


def test_translate_and_restore(surface):
    ctx = surface.get_context()
    ctx.fill_style = "red"
    ctx.save()
    ctx.translate(50, 50)
    ctx.fill_style = "blue"
    ctx.fill_rect(0, 0, 10, 10)
    ctx.restore()
    assert surface.pixel(55, 55) == (0, 0, 255, 255)
    assert surface.pixel(5, 5) == TRANSPARENT
    assert ctx.fill_style == "red"
    ctx.fill_rect(0, 0, 10, 10)
    assert surface.pixel(5, 5) == (255, 0, 0, 255)


def test_restore_without_save_is_noop(surface):
    ctx = surface.get_context()
    ctx.fill_style = "red"
    ctx.restore()
    assert ctx.fill_style == "red"


def test_non_positive_line_width_is_ignored(surface):
    ctx = surface.get_context()
    ctx.line_width = 4
    ctx.line_width = 0
    ctx.line_width = -1
    assert ctx.line_width == 4


def test_line_dash_is_saved(surface):
    ctx = surface.get_context()
    ctx.set_line_dash([4, 2])
    ctx.save()
    ctx.set_line_dash([])
    ctx.restore()
    assert ctx.get_line_dash() == [4, 2]


def test_unknown_colour_draws_nothing(surface):
    ctx = surface.get_context()
    ctx.fill_style = "not-a-colour"
    ctx.fill_rect(0, 0, 100, 100)
    assert _painted(surface) == 0


def test_fill_text_paints_pixels(surface):
    ctx = surface.get_context()
    ctx.fill_style = "black"
    ctx.font = "20px sans-serif"
    ctx.fill_text("Hello", 10, 50)
    assert _painted(surface) > 0


def test_rotated_text_paints_pixels(surface):
    ctx = surface.get_context()
    ctx.fill_style = "black"
    ctx.font = "16px sans-serif"
    ctx.translate(50, 50)
    ctx.rotate(math.pi / 4)
    ctx.text_align = "center"
    ctx.text_baseline = "middle"
    ctx.fill_text("tilted", 0, 0)
    assert _painted(surface) > 0


def test_png_bytes(surface):
    assert surface.to_png_bytes().startswith(b"\x89PNG")


# ---------------------------------------------------------------------------
# Dash splitting
# ---------------------------------------------------------------------------


def test_dash_runs_single_segment():
    runs = _dash_runs([(0, 0), (30, 0)], [10, 5])
    # on 0-10, off 10-15, on 15-25, off 25-30
    assert len(runs) == 2
    assert runs[0] == [(0, 0), pytest.approx((10, 0))]
    assert runs[1] == [pytest.approx((15, 0)), pytest.approx((25, 0))]


def test_dash_phase_carries_across_vertices():
    runs = _dash_runs([(0, 0), (6, 0), (6, 8)], [10, 10])
    # The first dash turns the corner: 6 along x, then 4 along y.
    assert runs == [[(0, 0), (6, 0), (6.0, 4.0)]]


def test_tiny_dash_pattern_is_bounded():
    runs = _dash_runs([(0, 0), (10, 0)], [0.0001])
    # Raised to 0.5 on, 0.5 off.
    assert len(runs) == pytest.approx(10, abs=1)
    assert runs[0][1] == pytest.approx((0.5, 0))
