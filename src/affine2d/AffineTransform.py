from __future__ import annotations

import math
import numbers
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from affine2d.InvalidArgument import InvalidArgument
from affine2d.PointFloat import PointFloat

Matrix2x3 = Tuple[float, float, float, float, float, float]
PointLike = Union[PointFloat, Sequence[float]]


def matrix_multiply(a: Sequence[float], b: Sequence[float]) -> Matrix2x3:
    """Multiply two affine matrices given as (m11, m12, m21, m22, tx, ty).

    Both operands stand for 3x3 matrices whose third column is (0, 0, 1):

        a11 a12 0       b11 b12 0
        a21 a22 0   x   b21 b22 0
        a31 a32 1       b31 b32 1

    Points are row vectors, so the result maps a point through `a` first and
    then through `b`. The third column of the product is always (0, 0, 1) and
    is not computed.
    """
    if len(a) != 6 or len(b) != 6:
        raise InvalidArgument(f"Expected two 2x3 matrices of 6 values, got {len(a)} and {len(b)}")

    a11, a12, a21, a22, a31, a32 = a
    b11, b12, b21, b22, b31, b32 = b

    return (
        a11 * b11 + a12 * b21, a11 * b12 + a12 * b22,
        a21 * b11 + a22 * b21, a21 * b12 + a22 * b22,
        a31 * b11 + a32 * b21 + b31, a31 * b12 + a32 * b22 + b32,
    )


class AffineTransform:
    """2D affine transform held as six coefficients.

        | m11  m12  0 |
        | m21  m22  0 |
        | tx   ty   1 |

    Points are row vectors: x' = m11*x + m21*y + tx, y' = m12*x + m22*y + ty.
    Every builder (translate, scale, rotate, shear, concatenate) post-multiplies,
    so the new operation runs after everything already accumulated. Builders
    mutate in place and return self for chaining.
    """

    __slots__ = ("m11", "m12", "m21", "m22", "tx", "ty")

    matrix_multiply = staticmethod(matrix_multiply)

    def __init__(self, m11: float = 1.0, m12: float = 0.0, m21: float = 0.0,
                 m22: float = 1.0, tx: float = 0.0, ty: float = 0.0):
        self.m11 = m11
        self.m12 = m12
        self.m21 = m21
        self.m22 = m22
        self.tx = tx
        self.ty = ty

    @staticmethod
    def identity() -> "AffineTransform":
        return AffineTransform()

    @staticmethod
    def from_numpy(m: Any) -> "AffineTransform":
        """Build from a 3x3 array laid out like matrix(); third column must be (0, 0, 1)."""
        arr = np.asarray(m, dtype=float)
        if arr.shape != (3, 3):
            raise InvalidArgument(f"Expected a 3x3 matrix, got shape {arr.shape}")
        if not np.array_equal(arr[:, 2], [0.0, 0.0, 1.0]):
            raise InvalidArgument(f"Not an affine matrix, third column is {arr[:, 2].tolist()}")
        return AffineTransform(*(float(v) for v in arr[:, :2].ravel()))

    # Accessors

    def matrix_2x3(self) -> Matrix2x3:
        return (self.m11, self.m12, self.m21, self.m22, self.tx, self.ty)

    def matrix(self) -> Tuple[float, ...]:
        """Full 3x3 matrix, row major."""
        return (self.m11, self.m12, 0, self.m21, self.m22, 0, self.tx, self.ty, 1)

    def to_numpy(self) -> np.ndarray:
        return np.array(self.matrix(), dtype=float).reshape(3, 3)

    def set_matrix_2x3(self, m11: float, m12: float, m21: float, m22: float,
                       tx: float, ty: float) -> "AffineTransform":
        self.m11, self.m12, self.m21, self.m22, self.tx, self.ty = m11, m12, m21, m22, tx, ty
        return self

    # Builders

    def concatenate_matrix_2x3(self, m11: float, m12: float, m21: float, m22: float,
                               tx: float, ty: float) -> "AffineTransform":
        return self.set_matrix_2x3(*matrix_multiply(self.matrix_2x3(), (m11, m12, m21, m22, tx, ty)))

    def concatenate(self, other: Any) -> "AffineTransform":
        return self.concatenate_matrix_2x3(*AffineTransform._operand(other))

    def pre_concatenate(self, other: Any) -> "AffineTransform":
        """Apply `other` before the transforms accumulated so far."""
        return self.set_matrix_2x3(*matrix_multiply(AffineTransform._operand(other), self.matrix_2x3()))

    def translate(self, tx: float, ty: float) -> "AffineTransform":
        return self.concatenate_matrix_2x3(1, 0, 0, 1, tx, ty)

    def scale(self, sx: float, sy: Optional[float] = None) -> "AffineTransform":
        if sy is None:
            sy = sx
        return self.concatenate_matrix_2x3(sx, 0, 0, sy, 0, 0)

    def rotate(self, degrees: float) -> "AffineTransform":
        rad = math.radians(degrees)
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        return self.concatenate_matrix_2x3(cos_a, sin_a, -sin_a, cos_a, 0, 0)

    def shear(self, shx: float, shy: float = 0.0) -> "AffineTransform":
        """x' = x + shx*y, y' = shy*x + y"""
        return self.concatenate_matrix_2x3(1, shy, shx, 1, 0, 0)

    # Point mapping

    def transform(self, *coords: float) -> Tuple[float, ...]:
        """Map flat coordinates x1, y1, x2, y2, ... and return them flat, in order."""
        if len(coords) % 2 != 0:
            raise InvalidArgument(f"Expected complete (x, y) pairs, got {len(coords)} values")

        m11, m12, m21, m22, tx, ty = self.matrix_2x3()
        out: List[float] = []
        for i in range(0, len(coords), 2):
            x, y = coords[i], coords[i + 1]
            out.append(m11 * x + m21 * y + tx)
            out.append(m12 * x + m22 * y + ty)
        return tuple(out)

    def transform_point(self, p: PointFloat) -> PointFloat:
        return PointFloat(*self.transform(p.x, p.y))

    def transform_points(self, points: Iterable[PointLike]) -> List[PointFloat]:
        coords: List[float] = []
        for pt in points:
            if isinstance(pt, PointFloat):
                coords.extend(pt.as_tuple())
                continue
            if isinstance(pt, str):
                raise InvalidArgument(f"Unsupported point format: {pt!r}")
            try:
                x, y = pt
            except (TypeError, ValueError):
                raise InvalidArgument(f"Unsupported point format: {pt!r}") from None
            if not (isinstance(x, numbers.Real) and isinstance(y, numbers.Real)):
                raise InvalidArgument(f"Unsupported point format: {pt!r}")
            coords.extend((x, y))

        mapped = self.transform(*coords)
        return [PointFloat(mapped[i], mapped[i + 1]) for i in range(0, len(mapped), 2)]

    def transform_array(self, points: Any) -> np.ndarray:
        """Map an (N, 2) array of points, returns a new (N, 2) float array."""
        pts = np.asarray(points, dtype=float)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise InvalidArgument(f"Expected an (N, 2) array of points, got shape {pts.shape}")
        homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
        return (homogeneous @ self.to_numpy())[:, :2]

    # Value behaviour

    def clone(self) -> "AffineTransform":
        return AffineTransform(*self.matrix_2x3())

    def __matmul__(self, other: Any) -> "AffineTransform":
        return self.clone().concatenate(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return self.matrix_2x3() == other.matrix_2x3()

    __hash__ = None

    def __repr__(self) -> str:
        return ("AffineTransform(m11={!r}, m12={!r}, m21={!r}, m22={!r}, tx={!r}, ty={!r})"
                .format(*self.matrix_2x3()))

    @staticmethod
    def _operand(other: Any) -> Matrix2x3:
        """Six coefficients of anything exposing matrix_2x3()."""
        getter = getattr(other, "matrix_2x3", None)
        if not callable(getter):
            raise InvalidArgument(f"Expecting an AffineTransform, got {type(other).__name__}")
        try:
            m = tuple(getter())
        except TypeError:
            raise InvalidArgument(f"matrix_2x3() of {type(other).__name__} is not a sequence") from None
        if len(m) != 6 or not all(isinstance(v, numbers.Real) for v in m):
            raise InvalidArgument(f"matrix_2x3() of {type(other).__name__} returned {m!r}, expected 6 numbers")
        return m
