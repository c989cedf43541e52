"""Base camera model: intrinsic parameters shared by every projection model."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum

import numpy as np

from perspecto.features import PointFeature

_NB_DISTORTIONS = 8
_NB_BASE_PARAMETERS = 4


class CameraModelType(IntEnum):
    """The supported camera projection models."""

    OMNI = 0
    PERSP = 1
    FISHEYE = 2
    PARABOLOID = 3
    EQUIRECTANGULAR = 4
    ORTHO = 5
    FISHEYE_EQUIDISTANT = 6
    POLY_CART = 7


def _inverse(value: float, name: str) -> float:
    if value == 0:
        raise ValueError(f"the scale factor {name} is zero and cannot be inverted")
    return 1.0 / value


class CameraModel(ABC):
    """Intrinsic parameters common to every camera model.

    ``au`` and ``av`` scale the normalized image plane to the digital image,
    ``u0`` and ``v0`` locate the principal point.  ``k`` holds the eight
    distortion parameters (k1-k3 radial, k4-k5 tangential, k6-k8 rational
    radial), ``ik`` the matching undistortion parameters and ``active_k``
    which of them the model considers.
    """

    type: CameraModelType = CameraModelType.PERSP
    name: str = ""

    def __init__(
        self,
        au: float = 0.0,
        av: float = 0.0,
        u0: float = 0.0,
        v0: float = 0.0,
        k1: float = 0.0,
        k2: float = 0.0,
        k3: float = 0.0,
        k4: float = 0.0,
        k5: float = 0.0,
        k6: float = 0.0,
        k7: float = 0.0,
        k8: float = 0.0,
    ):
        self.au = 0.0
        self.av = 0.0
        self.u0 = 0.0
        self.v0 = 0.0
        self.k = [0.0] * _NB_DISTORTIONS
        self.ik = [0.0] * _NB_DISTORTIONS
        self.active_k = [False] * _NB_DISTORTIONS
        self.distortions = False
        self.nb_active_parameters_base = _NB_BASE_PARAMETERS
        self.nb_active_parameters = _NB_BASE_PARAMETERS
        self.set_pixel_ratio(au, av)
        self.set_principal_point(u0, v0)
        self.set_distortion_parameters(k1, k2, k3, k4, k5, k6, k7, k8)

    @property
    def inv_au(self) -> float:
        """1 / au; raises ValueError when au is zero."""
        return _inverse(self.au, "au")

    @property
    def inv_av(self) -> float:
        """1 / av; raises ValueError when av is zero."""
        return _inverse(self.av, "av")

    def init_from(self, other: CameraModel) -> None:
        """Copy every intrinsic parameter of another camera model."""
        self.au, self.av = other.au, other.av
        self.u0, self.v0 = other.u0, other.v0
        self.k = list(other.k)
        self.ik = list(other.ik)
        self.active_k = list(other.active_k)
        self.distortions = other.distortions
        self.nb_active_parameters_base = other.nb_active_parameters_base
        self.nb_active_parameters = other.nb_active_parameters
        self.type = other.type
        self.name = other.name

    def meter_pixel_conversion(self, point: PointFeature) -> None:
        """Convert the normalized image plane coordinates of a point to pixels."""
        point.set_pix_uv(
            self.u0 + self.au * point.metric.x,
            self.v0 + self.av * point.metric.y,
        )

    def pixel_meter_conversion(self, point: PointFeature) -> None:
        """Convert the pixel coordinates of a point to the normalized image plane."""
        point.metric.x = (point.pixel.x - self.u0) * self.inv_au
        point.metric.y = (point.pixel.y - self.v0) * self.inv_av

    @abstractmethod
    def project_3d_image(self, point: PointFeature) -> None:
        """Project the sensor frame 3D point onto the normalized image plane."""

    @abstractmethod
    def project_image_sphere(self, point: PointFeature) -> tuple[float, float, float]:
        """Lift the normalized image point onto the unit sphere.

        Returns the sphere coordinates; raises ValueError when the point
        cannot be lifted.
        """

    def set_pixel_ratio(self, au: float, av: float) -> None:
        """Set the scale factors from the normalized image plane to pixels."""
        self.au = float(au)
        self.av = float(av)

    def set_principal_point(self, u0: float, v0: float) -> None:
        """Set the principal point coordinates."""
        self.u0 = float(u0)
        self.v0 = float(v0)

    def set_distortion_parameters(
        self, k1=0.0, k2=0.0, k3=0.0, k4=0.0, k5=0.0, k6=0.0, k7=0.0, k8=0.0
    ) -> None:
        """Set the eight distortion parameters."""
        self.k = [float(v) for v in (k1, k2, k3, k4, k5, k6, k7, k8)]

    def set_undistortion_parameters(
        self, ik1=0.0, ik2=0.0, ik3=0.0, ik4=0.0, ik5=0.0, ik6=0.0, ik7=0.0, ik8=0.0
    ) -> None:
        """Set the eight undistortion parameters."""
        self.ik = [float(v) for v in (ik1, ik2, ik3, ik4, ik5, ik6, ik7, ik8)]

    def set_active_distortion_parameters(
        self, k1=True, k2=True, k3=True, k4=True, k5=True, k6=True, k7=True, k8=True
    ) -> None:
        """Choose which distortion parameters the model considers."""
        self.active_k = [bool(v) for v in (k1, k2, k3, k4, k5, k6, k7, k8)]
        self.nb_active_parameters = self.nb_active_parameters_base + sum(self.active_k)

    def nb_active_distortion_parameters(self) -> int:
        """The number of considered distortion parameters."""
        return self.nb_active_parameters - self.nb_active_parameters_base

    def k_matrix(self) -> np.ndarray:
        """The 3x3 intrinsic matrix built from au, av, u0 and v0."""
        return np.array(
            [
                [self.au, 0.0, self.u0],
                [0.0, self.av, self.v0],
                [0.0, 0.0, 1.0],
            ]
        )

    def __str__(self) -> str:
        lines = [
            f"{self.name or self.type.name} camera model",
            f"au = {self.au}\tav = {self.av}",
            f"u0 = {self.u0}\tv0 = {self.v0}",
        ]
        if self.distortions:
            lines.append("k = " + " ".join(str(v) for v in self.k))
            lines.append("ik = " + " ".join(str(v) for v in self.ik))
        return "\n".join(lines)