"""2D affine transform algebra. Leaf module, no engine imports.

A Matrix maps (x, y) to (a*x + c*y + e, b*x + d*y + f), the same six
coefficients SVG's ``matrix(a b c d e f)`` uses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from numpy.typing import NDArray


class DegenerateTransformError(ValueError):
    """Raised when inverting a matrix whose determinant is zero."""


class SupportsXY(Protocol):
    x: float
    y: float


@dataclass(frozen=True)
class Matrix:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def to_array(self) -> NDArray[np.float64]:
        """3x3 homogeneous form."""
        return np.array(
            [
                [self.a, self.c, self.e],
                [self.b, self.d, self.f],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> Matrix:
        return cls(
            a=float(arr[0, 0]),
            b=float(arr[1, 0]),
            c=float(arr[0, 1]),
            d=float(arr[1, 1]),
            e=float(arr[0, 2]),
            f=float(arr[1, 2]),
        )

    @property
    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def to_svg(self) -> str:
        return f"matrix({self.a} {self.b} {self.c} {self.d} {self.e} {self.f})"


def identity() -> Matrix:
    return Matrix()


def translate(dx: float, dy: float = 0.0) -> Matrix:
    return Matrix(e=dx, f=dy)


def scale(sx: float, sy: float | None = None) -> Matrix:
    return Matrix(a=sx, d=sx if sy is None else sy)


def compose(*matrices: Matrix) -> Matrix:
    """Combine matrices so that the first one listed is applied to a point first.

    ``compose(translate(-cx, -cy), scale(s), translate(w / 2, h / 2))`` moves
    the point to the origin, scales it, then moves it to the surface center.
    """
    result = np.identity(3)
    for m in matrices:
        result = m.to_array() @ result
    return Matrix.from_array(result)


def apply_to_point(m: Matrix, point: SupportsXY) -> tuple[float, float]:
    return (
        m.a * point.x + m.c * point.y + m.e,
        m.b * point.x + m.d * point.y + m.f,
    )


def apply_to_xy(m: Matrix, x: float, y: float) -> tuple[float, float]:
    return (m.a * x + m.c * y + m.e, m.b * x + m.d * y + m.f)


def apply_to_points(m: Matrix, points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Vectorised apply for an Nx2 array."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    linear = np.array([[m.a, m.c], [m.b, m.d]])
    return pts @ linear.T + np.array([m.e, m.f])


def invert(m: Matrix) -> Matrix:
    det = m.determinant
    if det == 0:
        raise DegenerateTransformError(f"cannot invert degenerate matrix {m}")
    return Matrix(
        a=m.d / det,
        b=-m.b / det,
        c=-m.c / det,
        d=m.a / det,
        e=(m.c * m.f - m.d * m.e) / det,
        f=(m.b * m.e - m.a * m.f) / det,
    )


def horizontal_scale(m: Matrix) -> float:
    """Length of the transformed x basis vector. Stroke widths scale by this."""
    return math.hypot(m.a, m.b)


def vertical_scale(m: Matrix) -> float:
    return math.hypot(m.c, m.d)
