"""Back-projection of the polynomial Cartesian camera model."""

from __future__ import annotations

import math
from typing import Sequence


def polycart_image_to_sphere(
    u: float, v: float, intrinsics: Sequence[float]
) -> tuple[float, float, float]:
    """Lift digital image coordinates to the polynomial Cartesian model's 3D ray.

    ``intrinsics`` holds ``[au, u0, v0, a0, a1, a2, a3, a4]``: the common scale
    factor, the principal point and the coefficients of the Taylor expansion
    of the distortions.  Returns ``(Xs, Ys, Zs)``.
    """
    values = [float(c) for c in intrinsics]
    if len(values) != 8:
        raise ValueError(f"expected 8 intrinsic parameters, got {len(values)}")
    au, u0, v0, *a = values
    if au == 0:
        raise ValueError("the scale factor au is zero")

    up = u - u0
    vp = v - v0
    rho = math.hypot(up, vp)
    r_rho = a[0] + a[1] * rho + a[2] * rho**2 + a[3] * rho**3 + a[4] * rho**4

    return up / au, vp / au, r_rho / au