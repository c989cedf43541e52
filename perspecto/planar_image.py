"""A planar image seen as a regular row-major grid of Cartesian 2D samples."""

from __future__ import annotations

import copy as _copy
from typing import ClassVar

import numpy as np

from perspecto.acquisition import AcquisitionModel, InterpType
from perspecto.points import Cartesian2DPoint


def _as_image(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.ndim != 2:
        raise ValueError(f"an image must be two-dimensional, got {arr.ndim} dimensions")
    return arr


class RegularlySampledCPImage(AcquisitionModel):
    """An image plane sampled on a regular grid of ``height`` x ``width`` points.

    Sample ``i * width + j`` lies at the planar point ``(j, i)``.
    """

    sample_dim: ClassVar[int] = 2

    def __init__(self, height: int = 0, width: int = 0):
        if height < 0 or width < 0:
            raise ValueError("grid dimensions must not be negative")
        self.height = int(height)
        self.width = int(width)
        samples = [
            Cartesian2DPoint(float(j), float(i))
            for i in range(self.height)
            for j in range(self.width)
        ]
        super().__init__(bitmap=np.zeros(len(samples)), samples=samples)

    def _scaled_coordinates(self, im_height: int, im_width: int):
        height_scale = np.float32(im_height / np.float32(self.height))
        width_scale = np.float32(im_width / np.float32(self.width))
        xs = np.array([p.x for p in self.samples], dtype=np.float64)
        ys = np.array([p.y for p in self.samples], dtype=np.float64)
        u = (xs * width_scale).astype(np.float32)
        v = (ys * height_scale).astype(np.float32)
        return u, v

    def _require_samples(self) -> None:
        if self.nb_samples == 0:
            raise ValueError("the sampling grid is empty")

    def build_from(self, image, mask=None) -> None:
        """Sample the image intensities on the grid.

        Samples outside the image interior are set to zero. With a ``mask``
        (same shape as the image), pixels whose mask value is zero are ignored.
        """
        self._require_samples()
        img = _as_image(image)
        msk = None
        if mask is not None:
            msk = _as_image(mask)
            if msk.shape != img.shape:
                raise ValueError("the mask must have the same shape as the image")

        bilinear = self.interp_type is InterpType.BILINEAR
        n = self.nb_samples
        self.bitmap = np.zeros(n, dtype=img.dtype)
        if bilinear:
            self.bitmapf = np.zeros(n, dtype=np.float32)

        im_height, im_width = img.shape
        u, v = self._scaled_coordinates(im_height, im_width)
        inside = (u >= 0) & (v >= 0) & (u < im_width - 1) & (v < im_height - 1)
        if not inside.any():
            return
        ui, vi = u[inside], v[inside]

        if bilinear:
            i = vi.astype(np.int64)
            j = ui.astype(np.int64)
            dv = (vi - i).astype(np.float32)
            du = (ui - j).astype(np.float32)
            unmdv = np.float32(1.0) - dv
            unmdu = np.float32(1.0) - du
            vals = img.astype(np.float32)
            corners = [
                (i, j, unmdv * unmdu),
                (i + 1, j, dv * unmdu),
                (i, j + 1, unmdv * du),
                (i + 1, j + 1, dv * du),
            ]
            acc = np.zeros(i.shape, dtype=np.float32)
            for ci, cj, weight in corners:
                term = vals[ci, cj] * weight
                if msk is not None:
                    term = np.where(msk[ci, cj] != 0, term, np.float32(0.0))
                acc = acc + term
            self.bitmapf[inside] = acc
            self.bitmap[inside] = acc.astype(img.dtype)
        else:
            i = np.floor(vi.astype(np.float64) + 0.5).astype(np.int64)
            j = np.floor(ui.astype(np.float64) + 0.5).astype(np.int64)
            picked = img[i, j]
            if msk is not None:
                keep = msk[i, j] != 0
                picked = np.where(keep, picked, np.zeros_like(picked))
            self.bitmap[inside] = picked

    def to_image(self, image) -> np.ndarray:
        """Write the raw samples into ``image`` (in place) and return it."""
        self._require_samples()
        out = _as_image(image)
        im_height, im_width = out.shape
        u, v = self._scaled_coordinates(im_height, im_width)
        inside = (u >= 0) & (v >= 0) & (u < im_width) & (v < im_height)
        i = v[inside].astype(np.int64)
        j = u[inside].astype(np.int64)
        out[i, j] = self.bitmap[inside]
        return out

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.nb_samples:
            raise IndexError(f"sample index {index} out of range [0, {self.nb_samples})")

    def get_raw_sample(self, index: int):
        """Return the position and raw value of a sample."""
        self._check_index(index)
        point = self.samples[index]
        return Cartesian2DPoint(point.x, point.y, point.w), self.bitmap[index]

    def get_sample(self, index: int):
        """Return the position and interpolated value of a sample."""
        self._check_index(index)
        if self.bitmapf is None:
            raise ValueError("the interpolated intensities are not set")
        point = self.samples[index]
        return Cartesian2DPoint(point.x, point.y, point.w), float(self.bitmapf[index])

    def change_sample_frame(self, index: int, matrix):
        """Return a sample's position after a frame change, with its depth (always 1)."""
        self._check_index(index)
        return self.samples[index].change_frame(matrix), 1.0

    def copy(self) -> RegularlySampledCPImage:
        """Return an independent copy of the grid and its intensities."""
        return _copy.deepcopy(self)