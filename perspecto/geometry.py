"""Rigid transformations: 4x4 homogeneous pose matrices and 6-vector poses."""

from __future__ import annotations

import math

import numpy as np

_SMALL_ANGLE = 1e-4


def _skew(u: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [0.0, -u[2], u[1]],
            [u[2], 0.0, -u[0]],
            [-u[1], u[0], 0.0],
        ]
    )


def _rotation_coefficients(theta: float) -> tuple[float, float, float]:
    """Return sin(t)/t, (1-cos(t))/t^2 and (1-sin(t)/t)/t^2, stable near zero."""
    if theta < _SMALL_ANGLE:
        t2 = theta * theta
        return 1.0 - t2 / 6.0, 0.5 - t2 / 24.0, 1.0 / 6.0 - t2 / 120.0
    sinc = math.sin(theta) / theta
    mcosc = (1.0 - math.cos(theta)) / (theta * theta)
    msinc = (1.0 - sinc) / (theta * theta)
    return sinc, mcosc, msinc


def _rotation_from_theta_u(u: np.ndarray) -> np.ndarray:
    theta = float(np.linalg.norm(u))
    sinc, mcosc, _ = _rotation_coefficients(theta)
    k = _skew(u)
    return np.eye(3) + sinc * k + mcosc * (k @ k)


def _theta_u_from_rotation(r: np.ndarray) -> np.ndarray:
    antisym = np.array([r[2, 1] - r[1, 2], r[0, 2] - r[2, 0], r[1, 0] - r[0, 1]])
    diagonal_sum = float(r[0, 0] + r[1, 1] + r[2, 2])
    c = min(1.0, max(-1.0, (diagonal_sum - 1.0) / 2.0))
    s = 0.5 * float(np.linalg.norm(antisym))
    theta = math.atan2(s, c)
    if 1.0 + c > 1e-4:
        factor = 0.5 if s < 1e-12 else theta / (2.0 * s)
        return factor * antisym
    # Close to a half turn: the symmetric part carries the axis.
    sym = ((r + r.T) / 2.0 - c * np.eye(3)) / (1.0 - c)
    i = int(np.argmax(np.diag(sym)))
    axis = sym[:, i] / math.sqrt(max(sym[i, i], 1e-300))
    axis /= np.linalg.norm(axis)
    if float(axis @ antisym) < 0.0:
        axis = -axis
    return theta * axis


class PoseMatrix:
    """A 4x4 homogeneous rigid transformation matrix (identity by default)."""

    __slots__ = ("_data",)

    def __init__(self, data=None):
        if data is None:
            arr = np.eye(4)
        else:
            arr = np.array(data, dtype=float)
            if arr.shape != (4, 4):
                raise ValueError(f"a pose matrix must be 4x4, got shape {arr.shape}")
        self._data = arr

    @property
    def data(self) -> np.ndarray:
        """The underlying 4x4 array."""
        return self._data

    @property
    def rotation(self) -> np.ndarray:
        return self._data[:3, :3].copy()

    @property
    def translation(self) -> np.ndarray:
        return self._data[:3, 3].copy()

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value):
        self._data[index] = value

    def inverse(self) -> PoseMatrix:
        """Return [R T]^-1 = [R^T  -R^T T]."""
        r = self._data[:3, :3]
        t = self._data[:3, 3]
        out = np.eye(4)
        out[:3, :3] = r.T
        out[:3, 3] = -(r.T @ t)
        return PoseMatrix(out)

    def t(self) -> PoseMatrix:
        """Return the transposed matrix."""
        return PoseMatrix(self._data.T)

    def __matmul__(self, other):
        if isinstance(other, PoseMatrix):
            return PoseMatrix(self._data @ other._data)
        return self._data @ np.asarray(other, dtype=float)

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype)

    def __repr__(self) -> str:
        return f"PoseMatrix({self._data.tolist()!r})"


class PoseVector:
    """A pose as (tX, tY, tZ, theta*uX, theta*uY, theta*uZ), zero by default."""

    __slots__ = ("_data",)

    def __init__(self, values=None):
        if values is None:
            arr = np.zeros(6)
        else:
            arr = np.array(values, dtype=float).reshape(-1)
            if arr.shape != (6,):
                raise ValueError(f"a pose vector has 6 values, got {arr.size}")
        self._data = arr

    @property
    def translation(self) -> np.ndarray:
        return self._data[:3].copy()

    @property
    def theta_u(self) -> np.ndarray:
        return self._data[3:].copy()

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value):
        self._data[index] = value

    def __len__(self) -> int:
        return 6

    def __iter__(self):
        return iter(self._data.tolist())

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype)

    def __repr__(self) -> str:
        return f"PoseVector({self._data.tolist()!r})"


def _six_vector(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float).reshape(-1)
    if arr.shape != (6,):
        raise ValueError(f"expected 6 values, got {arr.size}")
    return arr


def exponential_map(velocity) -> PoseMatrix:
    """Integrate a twist (v, omega) over unit time into a pose matrix."""
    vel = _six_vector(velocity)
    v = vel[:3]
    u = vel[3:]
    theta = float(np.linalg.norm(u))
    sinc, mcosc, msinc = _rotation_coefficients(theta)
    k = _skew(u)
    out = np.eye(4)
    out[:3, :3] = np.eye(3) + sinc * k + mcosc * (k @ k)
    out[:3, 3] = (sinc * np.eye(3) + msinc * np.outer(u, u) + mcosc * k) @ v
    return PoseMatrix(out)


def pose_matrix_from_vector(vector) -> PoseMatrix:
    """Build the homogeneous matrix of a translation / theta-u pose vector."""
    vec = _six_vector(vector)
    out = np.eye(4)
    out[:3, :3] = _rotation_from_theta_u(vec[3:])
    out[:3, 3] = vec[:3]
    return PoseMatrix(out)


def pose_vector_from_matrix(matrix) -> PoseVector:
    """Extract the translation / theta-u pose vector of a homogeneous matrix."""
    m = np.asarray(matrix, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"a pose matrix must be 4x4, got shape {m.shape}")
    return PoseVector(np.concatenate([m[:3, 3], _theta_u_from_rotation(m[:3, :3])]))