# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""V/W recursion for spherical harmonic geomagnetic field synthesis.

Singularity-free algorithm that works directly in ITRS Cartesian
coordinates. No trig, no polar singularity. Unnormalized coefficients.

Unlike a table-based evaluator, only three scalars per family are kept
(diagonal, current, previous), and the (n, m) pairs are visited in one
forward pass: order-major, degree-minor, both up to N+1 (the gradient
formulas reference one degree above the model).

Arithmetic runs in the dtype of the coefficient tables, so a float32
store reproduces the single-precision embedded reference bit for bit.

Reference: Montenbruck & Gill, "Satellite Orbits", Ch. 3.2.4-3.2.5
"""
from typing import Protocol, runtime_checkable

import numpy as np

from geomag.domain.coefficients import CoefficientStore, GeomagConstants


@runtime_checkable
class MagneticFieldModel(Protocol):
    """Structural typing port for magnetic field evaluators."""

    def field(
        self,
        dyear: float,
        position_itrs: tuple[float, float, float],
    ) -> tuple[float, float, float]: ...


def magnetic_field(
    dyear: float,
    position_itrs: tuple[float, float, float],
    model: CoefficientStore,
) -> tuple[float, float, float]:
    """Magnetic field in ITRS coordinates, units Tesla.

    Args:
        dyear: Decimal year, should be within a few years of model.epoch.
        position_itrs: (x, y, z) in meters, above the surface of Earth.
        model: Coefficient store to evaluate.

    Returns:
        (Bx, By, Bz) in Tesla, same axes as position_itrs. Non-finite at
        the origin; no other failure mode.
    """
    scalar = model.dtype.type
    n_max = model.max_degree
    n_ext = n_max + 1  # extended degree for V/W
    re = scalar(GeomagConstants.EARTH_R)
    dyear = scalar(dyear)

    x = scalar(position_itrs[0])
    y = scalar(position_itrs[1])
    z = scalar(position_itrs[2])
    px = scalar(0)
    py = scalar(0)
    pz = scalar(0)

    rsqrd = x * x + y * y + z * z
    temp = re / rsqrd
    a = x * temp
    b = y * temp
    f = z * temp
    g = re * temp

    # Seed: V₀₀ = Rₑ/r, W₀₀ = 0
    v_top = re / np.sqrt(rsqrd)
    w_top = scalar(0)
    v_prev = scalar(0)
    w_prev = scalar(0)
    v_nm = v_top
    w_nm = w_top

    c = model.value_c
    s = model.value_s

    for m in range(n_ext + 1):
        for n in range(m, n_ext + 1):
            if n == m:
                if m != 0:
                    # Diagonal: V_mm, W_mm from V_m-1,m-1, W_m-1,m-1
                    temp = v_top
                    v_top = (2 * m - 1) * (a * v_top - b * w_top)
                    w_top = (2 * m - 1) * (a * w_top + b * temp)
                    v_prev = scalar(0)
                    w_prev = scalar(0)
                    v_nm = v_top
                    w_nm = w_top
            else:
                # Vertical: V_nm from V_n-1,m and V_n-2,m
                inv = scalar(1) / scalar(n - m)
                temp = v_nm
                v_nm = ((2 * n - 1) * f * v_nm - (n + m - 1) * g * v_prev) * inv
                v_prev = temp
                temp = w_nm
                w_nm = ((2 * n - 1) * f * w_nm - (n + m - 1) * g * w_prev) * inv
                w_prev = temp

            if m < n_max and n >= m + 2:
                weight = 0.5 * (n - m) * (n - m - 1)
                c_nm = c(n - 1, m + 1, dyear)
                s_nm = s(n - 1, m + 1, dyear)
                px += weight * (c_nm * v_nm + s_nm * w_nm)
                py += weight * (-c_nm * w_nm + s_nm * v_nm)
            if n >= 2 and m >= 2:
                c_nm = c(n - 1, m - 1, dyear)
                s_nm = s(n - 1, m - 1, dyear)
                px += 0.5 * (-c_nm * v_nm - s_nm * w_nm)
                py += 0.5 * (-c_nm * w_nm + s_nm * v_nm)
            if m == 1 and n >= 2:
                c_n0 = c(n - 1, 0, dyear)
                px += -c_n0 * v_nm
                py += -c_n0 * w_nm
            if n >= 2 and n > m:
                pz += (n - m) * (-c(n - 1, m, dyear) * v_nm - s(n - 1, m, dyear) * w_nm)

    scale = GeomagConstants.NT_TO_T
    return (float(-px * scale), float(-py * scale), float(-pz * scale))


class MagneticFieldSynthesizer:
    """Spherical harmonic magnetic field bound to one coefficient store.

    Stateless apart from the (immutable) store: safe to share between
    threads. Implements the MagneticFieldModel protocol.
    """

    def __init__(self, model: CoefficientStore) -> None:
        self._model = model

    @property
    def model(self) -> CoefficientStore:
        return self._model

    def field(
        self,
        dyear: float,
        position_itrs: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        """Magnetic field (T) at position_itrs (m) and decimal year dyear."""
        return magnetic_field(dyear, position_itrs, self._model)
