"""Points and vectors in homogeneous Cartesian coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np


def _frame_matrix(matrix) -> np.ndarray:
    m = np.asarray(matrix, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"a frame change must be a 4x4 matrix, got shape {m.shape}")
    return m


@dataclass
class Cartesian2DPoint:
    """A 2D point (w = 1) or vector (w = 0) in homogeneous coordinates."""

    x: float = 0.0
    y: float = 0.0
    w: float = 1.0

    size: ClassVar[int] = 2

    def set_point(self, x: float, y: float) -> None:
        """Set the coordinates of a point, forcing w to 1."""
        self.x, self.y, self.w = float(x), float(y), 1.0

    def set_vector(self, x: float, y: float) -> None:
        """Set the coordinates of a vector, forcing w to 0."""
        self.x, self.y, self.w = float(x), float(y), 0.0

    def to_euclidean(self) -> None:
        """Scale the coordinates so that w equals 1; a vector cannot be."""
        if self.w == 0:
            raise ValueError("a vector (w = 0) has no Euclidean point form")
        self.x /= self.w
        self.y /= self.w
        self.w = 1.0

    def change_frame(self, matrix) -> Cartesian2DPoint:
        """Apply a 4x4 frame change to the point taken on the z = 0 plane."""
        res = _frame_matrix(matrix) @ np.array([self.x, self.y, 0.0, self.w])
        return Cartesian2DPoint(float(res[0]), float(res[1]), float(res[3]))

    def __sub__(self, other):
        if not isinstance(other, Cartesian2DPoint):
            return NotImplemented
        return np.array([self.x - other.x, self.y - other.y])

    def __array__(self, dtype=None, copy=None):
        return np.array([self.x, self.y, self.w], dtype=dtype)


@dataclass
class Cartesian3DPoint:
    """A 3D point (W = 1) or vector (W = 0) in homogeneous coordinates."""

    X: float = 0.0
    Y: float = 0.0
    Z: float = 0.0
    W: float = 1.0

    size: ClassVar[int] = 3

    def set_point(self, x: float, y: float, z: float) -> None:
        """Set the coordinates of a point, forcing W to 1."""
        self.X, self.Y, self.Z, self.W = float(x), float(y), float(z), 1.0

    def set_vector(self, x: float, y: float, z: float) -> None:
        """Set the coordinates of a vector, forcing W to 0."""
        self.X, self.Y, self.Z, self.W = float(x), float(y), float(z), 0.0

    def to_euclidean(self) -> None:
        """Scale the coordinates so that W equals 1; a vector cannot be."""
        if self.W == 0:
            raise ValueError("a vector (W = 0) has no Euclidean point form")
        self.X /= self.W
        self.Y /= self.W
        self.Z /= self.W
        self.W = 1.0

    def change_frame(self, matrix) -> Cartesian3DPoint:
        """Return the point expressed in the frame given by a 4x4 frame change."""
        res = _frame_matrix(matrix) @ np.array([self.X, self.Y, self.Z, self.W])
        return Cartesian3DPoint(*(float(c) for c in res))

    def __array__(self, dtype=None, copy=None):
        return np.array([self.X, self.Y, self.Z, self.W], dtype=dtype)