"""A point feature seen through its successive frames: world, sensor, image, pixel."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from perspecto.points import Cartesian2DPoint, Cartesian3DPoint


class Place(IntEnum):
    """Where a point feature's coordinates are defined."""

    WORLD = 0
    SENSOR = 1
    INTERMEDIATE = 2
    METRIC = 3
    PIXEL = 4


@dataclass
class PointFeature:
    """A feature point with world, sensor and intermediate 3D coordinates,
    normalized image plane coordinates and digital image coordinates."""

    world: Cartesian3DPoint = field(default_factory=Cartesian3DPoint)
    sensor: Cartesian3DPoint = field(default_factory=Cartesian3DPoint)
    intermediate: Cartesian3DPoint = field(default_factory=Cartesian3DPoint)
    metric: Cartesian2DPoint = field(default_factory=Cartesian2DPoint)
    pixel: Cartesian2DPoint = field(default_factory=Cartesian2DPoint)

    @property
    def world_coordinates(self) -> tuple[float, float, float]:
        """The X, Y, Z coordinates of the point in the world frame."""
        return self.world.X, self.world.Y, self.world.Z

    @property
    def pixel_uv(self) -> tuple[float, float]:
        """The u, v coordinates of the point in the digital image plane."""
        return self.pixel.x, self.pixel.y

    def set_world_coordinates(self, point) -> None:
        """Set the world coordinates from a 3D point or 3 or 4 values.

        The stored point is made Euclidean (W = 1); a vector raises ValueError.
        """
        if isinstance(point, Cartesian3DPoint):
            candidate = Cartesian3DPoint(point.X, point.Y, point.Z, point.W)
        else:
            values = [float(c) for c in point]
            if len(values) not in (3, 4):
                raise ValueError(f"expected 3 or 4 coordinates, got {len(values)}")
            candidate = Cartesian3DPoint(*values)
        candidate.to_euclidean()
        self.world = candidate

    def change_frame(self, matrix) -> Cartesian3DPoint:
        """Express the world point in the sensor frame given by a world-to-sensor matrix."""
        self.sensor = self.world.change_frame(matrix)
        return self.sensor

    def set_image_metric(self, x: float, y: float, w: float = 1.0) -> None:
        """Set the normalized image plane coordinates."""
        self.metric = Cartesian2DPoint(float(x), float(y), float(w))

    def set_pix_uv(self, u: float, v: float) -> None:
        """Set the digital image plane coordinates."""
        self.pixel.x = float(u)
        self.pixel.y = float(v)

    def set_object_pix_uv(self, ox: float, oy: float, oz: float, u: float, v: float) -> None:
        """Set both the world point and its digital image plane coordinates."""
        self.world.set_point(ox, oy, oz)
        self.set_pix_uv(u, v)

    def to_double(self, place: Place | int = Place.WORLD) -> np.ndarray:
        """Return the homogeneous coordinates of the point at the given place."""
        try:
            where = Place(place)
        except ValueError:
            raise ValueError(f"unknown place of definition: {place!r}") from None
        element = {
            Place.WORLD: self.world,
            Place.SENSOR: self.sensor,
            Place.INTERMEDIATE: self.intermediate,
            Place.METRIC: self.metric,
            Place.PIXEL: self.pixel,
        }[where]
        return np.asarray(element, dtype=float)