# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Geomagnetic coefficient store with flat triangular indexing.

One store per published model: an epoch plus four tables (main-field C/S,
secular-variation C/S) of unnormalized coefficients, in the form the
Montenbruck & Gill V/W recursion consumes them.

Flat triangular storage, order-major: index = m*(2N - m + 1)//2 + n for
(n, m) with 0 <= m <= n <= N. Tables are sized (N+1)*(N+2)//2.

Tables only need indexing, len() and a numpy dtype, so an in-memory array
and a read-only memmap are interchangeable. The dtype of the tables sets
the arithmetic precision used by the field synthesis.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np


@dataclass(frozen=True)
class _GeomagConstants:
    """Model-independent constants of the field synthesis."""
    EARTH_R: float = 6_371_200.0   # m — mean radius, WMM2015 technical report §1.2
    NMAX: int = 12                 # degree of the bundled WMM models
    NT_TO_T: float = 1.0e-9        # coefficient units (nT) to Tesla


GeomagConstants: _GeomagConstants = _GeomagConstants()


class Precision(Enum):
    """Arithmetic precision of coefficient tables and synthesis."""
    SINGLE = "float32"   # embedded reference arithmetic
    DOUBLE = "float64"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)


def coefficient_count(max_degree: int) -> int:
    """Number of (n, m) pairs with 0 <= m <= n <= max_degree."""
    return (max_degree + 1) * (max_degree + 2) // 2


def triangular_index(n: int, m: int, max_degree: int) -> int:
    """Triangular index: maps (n, m) to its flat table position.

    m*(2N - m + 1) is always even, so the division is exact.
    """
    return m * (2 * max_degree - m + 1) // 2 + n


@dataclass(frozen=True)
class CoefficientStore:
    """Immutable coefficient tables of one geomagnetic model.

    name: model label, e.g. "WMM2020".
    epoch: decimal year at which the main-field coefficients are exact.
    max_degree: maximum degree N of the expansion.
    main_field_c/s: main-field cosine/sine terms (nT).
    secular_var_c/s: secular-variation cosine/sine terms (nT/year).
    """

    name: str
    epoch: float
    max_degree: int
    main_field_c: Any
    main_field_s: Any
    secular_var_c: Any
    secular_var_s: Any

    def __post_init__(self) -> None:
        expected = coefficient_count(self.max_degree)
        for label in ("main_field_c", "main_field_s", "secular_var_c", "secular_var_s"):
            size = len(getattr(self, label))
            if size != expected:
                raise ValueError(
                    f"{self.name}: {label} has {size} coefficients, "
                    f"expected {expected} for max_degree {self.max_degree}"
                )
        dtypes = {
            np.dtype(t.dtype) for t in (
                self.main_field_c, self.main_field_s,
                self.secular_var_c, self.secular_var_s,
            )
        }
        if len(dtypes) != 1:
            raise ValueError(
                f"{self.name}: coefficient tables mix dtypes {sorted(map(str, dtypes))}"
            )

    @property
    def dtype(self) -> np.dtype:
        """Scalar dtype of the tables (float32 or float64)."""
        return np.dtype(self.main_field_c.dtype)

    def value_c(self, n: int, m: int, dyear: float) -> float:
        """Cosine coefficient C(n, m) linearly extrapolated to dyear.

        No bounds checks: (n, m) must satisfy 0 <= m <= n <= max_degree.
        """
        index = m * (2 * self.max_degree - m + 1) // 2 + n
        scalar = self.main_field_c.dtype.type
        return self.main_field_c[index] + (
            (scalar(dyear) - scalar(self.epoch)) * self.secular_var_c[index]
        )

    def value_s(self, n: int, m: int, dyear: float) -> float:
        """Sine coefficient S(n, m) linearly extrapolated to dyear.

        No bounds checks: (n, m) must satisfy 0 <= m <= n <= max_degree.
        """
        index = m * (2 * self.max_degree - m + 1) // 2 + n
        scalar = self.main_field_s.dtype.type
        return self.main_field_s[index] + (
            (scalar(dyear) - scalar(self.epoch)) * self.secular_var_s[index]
        )


def _readonly_table(values: Any, dtype: np.dtype) -> np.ndarray:
    table = np.array(values, dtype=dtype)
    table.flags.writeable = False
    return table


def build_store(
    name: str,
    epoch: float,
    max_degree: int,
    main_field_c: Any,
    main_field_s: Any,
    secular_var_c: Any,
    secular_var_s: Any,
    precision: Precision = Precision.SINGLE,
) -> CoefficientStore:
    """Build a store from plain sequences, copying into read-only arrays.

    Raises:
        ValueError: If a table length does not match max_degree.
    """
    dtype = precision.dtype
    return CoefficientStore(
        name=name,
        epoch=float(epoch),
        max_degree=int(max_degree),
        main_field_c=_readonly_table(main_field_c, dtype),
        main_field_s=_readonly_table(main_field_s, dtype),
        secular_var_c=_readonly_table(secular_var_c, dtype),
        secular_var_s=_readonly_table(secular_var_s, dtype),
    )
