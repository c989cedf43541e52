"""Photometric / geometric pose estimation of spherical cameras by Gauss-Newton."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import IO, Any, Callable, Protocol, Sequence

import numpy as np

from perspecto.geometry import (
    PoseMatrix,
    PoseVector,
    exponential_map,
    pose_matrix_from_vector,
    pose_vector_from_matrix,
)

logger = logging.getLogger(__name__)

_NB_DOF = 6


class FeatureSet(Protocol):
    """What the estimator needs from a set of features."""

    def update(self, matrix: PoseMatrix, compute_jacobian: bool) -> None:
        """Move the features by a frame change."""

    def compute_feature_pose_jacobian(self, nb_dof: int, dof: Sequence[bool]) -> np.ndarray:
        """Return the interaction matrix (features x active degrees of freedom)."""


class FeaturesComparison(Protocol):
    """The comparison of a current feature set with a desired one."""

    error: Any
    cost: float
    robust_cost: float
    robust_weights: Any


ComparatorFactory = Callable[[Any, Any, bool], FeaturesComparison]


@dataclass(frozen=True)
class TrackResult:
    """Outcome of a tracking run."""

    residual: float
    pose: PoseVector
    iterations: int


def _scalar(value) -> float:
    return float(np.asarray(value, dtype=float).reshape(-1)[0])


def _compare(comparison: FeaturesComparison, robust: bool):
    """Return the error vector, the residual and the weights of a comparison."""
    error = np.asarray(comparison.error, dtype=float).reshape(-1)
    if not robust:
        return error, _scalar(comparison.cost), None
    weights = np.asarray(comparison.robust_weights, dtype=float).reshape(-1)
    residual = _scalar(comparison.robust_cost)
    if residual == 0:
        weights = np.ones_like(error)
        residual = _scalar(comparison.cost)
    return error, residual, weights


class PoseSphericalEstimator:
    """Pose estimation of a spherical camera from a reference feature set.

    ``comparator_factory(current, desired, robust)`` builds the comparison of
    two feature sets: its ``error`` vector, ``cost``, ``robust_cost`` and
    ``robust_weights``.
    """

    def __init__(self, comparator_factory: ComparatorFactory, residual_threshold: float = 1e-9):
        self.comparator_factory = comparator_factory
        self.residual_threshold = float(residual_threshold)
        self.iter_max = 10
        self.nb_incr_max = 5
        self.dof: list[bool] = [True] * _NB_DOF
        self.feature_set: Any = None
        self._iteration_file: IO[str] | None = None

        self._control_init = False
        self._current = True
        self._gain = 1.0
        self._residual = 1e20
        self._nb_dof = _NB_DOF
        self._jacobian: np.ndarray | None = None
        self._iter = 0
        self._nb_incr = 0

    def set_dof(self, tx=True, ty=True, tz=True, rx=True, ry=True, rz=True) -> None:
        """Choose which degrees of freedom the estimation considers."""
        self.dof = [bool(v) for v in (tx, ty, tz, rx, ry, rz)]

    @property
    def nb_dof(self) -> int:
        """The number of active degrees of freedom."""
        return sum(self.dof)

    def build_from(self, feature_set) -> None:
        """Keep a copy of the reference feature set."""
        self.feature_set = copy.deepcopy(feature_set)

    def start_save_iterations(self, file_name) -> None:
        """Open the file to which the iteration count of each track is appended."""
        self.stop_save_iterations()
        self._iteration_file = open(file_name, "w", encoding="utf-8")

    def stop_save_iterations(self) -> None:
        """Close the iteration file, if any."""
        if self._iteration_file is not None:
            self._iteration_file.close()
            self._iteration_file = None

    def _require_reference(self) -> None:
        if self.feature_set is None:
            raise RuntimeError("no reference feature set: call build_from first")

    def _expand_velocity(self, velocity: np.ndarray) -> np.ndarray:
        full = np.zeros(_NB_DOF)
        full[np.array(self.dof, dtype=bool)] = velocity
        return full

    def track(self, desired, pose=None, gain: float = 1.0, robust: bool = False) -> TrackResult:
        """Update the pose of the reference set so that it matches ``desired``.

        Starts from ``pose`` (zero by default) and returns the final residual,
        the pose of the last iteration that reduced the residual and the number
        of iterations.
        """
        self._require_reference()
        dof = list(self.dof)
        nb_dof = sum(dof)

        desired.compute_feature_pose_jacobian(nb_dof, dof)

        r = PoseVector(pose)
        r_back = PoseVector()
        d_m_c = pose_matrix_from_vector(r)

        residual = 1e20
        residual_prev = 2.0 * residual
        iterations = 0
        nb_incr = 0
        error = np.zeros(0)
        weighted_jacobian: np.ndarray | None = None
        weighted_error: np.ndarray | None = None

        while (
            iterations < self.iter_max
            and nb_incr < self.nb_incr_max
            and abs(residual - residual_prev) > self.residual_threshold
        ):
            residual_prev = residual

            self.feature_set.update(d_m_c, True)
            jacobian = np.asarray(
                self.feature_set.compute_feature_pose_jacobian(nb_dof, dof), dtype=float
            )

            comparison = self.comparator_factory(self.feature_set, desired, robust)
            error, residual, weights = _compare(comparison, robust)
            logger.debug("residual: %g", residual)

            if iterations < 1 or residual < residual_prev:
                logger.debug("decrease: %s", list(r))
                nb_incr = 0
                r_back = PoseVector(r)
                if robust:
                    weighted_jacobian = weights[:, None] * jacobian
                    weighted_error = weights * error
            else:
                logger.debug("increase: %s", list(r))

            if robust:
                step = np.linalg.pinv(weighted_jacobian) @ weighted_error
            else:
                step = np.linalg.pinv(jacobian) @ error

            velocity = -gain * step
            d_m_c = exponential_map(self._expand_velocity(velocity)).inverse() @ d_m_c
            r = pose_vector_from_matrix(d_m_c)
            iterations += 1

        if self._iteration_file is not None:
            self._iteration_file.write(f"{iterations}\n")

        logger.debug(
            "%d residual: %g (new) | %g (features); increases: %d",
            iterations,
            residual,
            float(error @ error),
            nb_incr,
        )
        return TrackResult(residual=residual, pose=r_back, iterations=iterations)

    def init_control(self, gain: float = 1.0, current: bool = True) -> None:
        """Prepare the control law.

        With ``current`` the interaction matrix is computed on the current
        features at each call of :meth:`control`, otherwise once here on the
        reference (desired) features.
        """
        self._current = bool(current)
        self._residual = 1e20
        self._gain = float(gain)
        self._nb_dof = self.nb_dof
        if not self._current:
            self._require_reference()
            self._jacobian = np.asarray(
                self.feature_set.compute_feature_pose_jacobian(self._nb_dof, list(self.dof)),
                dtype=float,
            )
        self._iter = 0
        self._nb_incr = 0
        self._control_init = True

    def control(self, current_set, robust: bool = False) -> tuple[float, np.ndarray]:
        """Compute the velocity moving ``current_set`` toward the reference set.

        Returns the residual and the velocity over the active degrees of
        freedom. Raises RuntimeError when :meth:`init_control` was not called.
        """
        if not self._control_init:
            raise RuntimeError("the control law is not initialized: call init_control first")
        self._require_reference()

        residual_back = self._residual

        if self._current:
            self._jacobian = np.asarray(
                current_set.compute_feature_pose_jacobian(self._nb_dof, list(self.dof)),
                dtype=float,
            )
        if self._jacobian is None:
            raise RuntimeError("no interaction matrix is available")

        comparison = self.comparator_factory(current_set, self.feature_set, robust)
        error, residual, weights = _compare(comparison, robust)
        self._residual = residual

        if self._iter < 1 or residual < residual_back:
            logger.debug("decrease")
            self._nb_incr = 0
        else:
            logger.debug("increase")

        if robust:
            weighted_jacobian = weights[:, None] * self._jacobian
            step = np.linalg.pinv(weighted_jacobian) @ (weights * error)
        else:
            step = np.linalg.pinv(self._jacobian) @ error

        velocity = -self._gain * step
        self._iter += 1
        return residual, velocity