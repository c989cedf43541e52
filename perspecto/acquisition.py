"""Base of data acquisition models: sampling elements and their intensities."""

from __future__ import annotations

from enum import IntEnum

import numpy as np


class InterpType(IntEnum):
    """Interpolation used when sampling pixel intensities."""

    NEAREST_NEIGHBOR = 0
    BILINEAR = 1


class AcquisitionModel:
    """Signal sampling elements with raw and interpolated intensities.

    ``bitmap`` holds the raw sample values and ``bitmapf`` the interpolated or
    normalized float values, which exist only once they have been set.
    """

    def __init__(self, bitmap=None, samples=None, interp_type=InterpType.NEAREST_NEIGHBOR):
        self.bitmap = np.zeros(0) if bitmap is None else np.array(bitmap)
        self.samples = [] if samples is None else list(samples)
        self.bitmapf: np.ndarray | None = None
        self.interp_type = InterpType(interp_type)

    @property
    def nb_samples(self) -> int:
        """The number of samples of the signal."""
        return int(self.bitmap.size)

    @property
    def is_bitmapf_set(self) -> bool:
        """Whether the interpolated intensities are allocated."""
        return self.bitmapf is not None

    def set_interp_type(self, interp_type: InterpType | int) -> None:
        """Select the interpolation; bilinear allocates the interpolated intensities."""
        self.interp_type = InterpType(interp_type)
        if self.interp_type is InterpType.BILINEAR:
            self.bitmapf = np.zeros(self.nb_samples, dtype=np.float32)

    def to_abs_zn(self) -> np.ndarray:
        """Make intensities zero-mean, absolute, normalized by their mean and then by their sum.

        Starts from the interpolated intensities when they are set, otherwise
        from the raw ones. Raises ValueError when there is no sample.
        """
        if self.nb_samples == 0:
            raise ValueError("the acquisition model holds no sample")

        source = self.bitmap if self.bitmapf is None else self.bitmapf
        values = np.asarray(source, dtype=np.float64)
        centered = (values - values.mean()).astype(np.float32)

        absolute = np.abs(centered)
        with np.errstate(divide="ignore", invalid="ignore"):
            scaled = (absolute / np.float64(absolute.astype(np.float64).mean())).astype(np.float32)
            total = scaled.astype(np.float64).sum()
            self.bitmapf = (scaled / total).astype(np.float32)
        return self.bitmapf