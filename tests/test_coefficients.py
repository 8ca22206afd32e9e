# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the triangular coefficient store (coefficients.py)."""

import ast
import dataclasses

import numpy as np
import pytest

from geomag import GeomagConstants, Precision, load_model
from geomag.domain.coefficients import (
    CoefficientStore,
    build_store,
    coefficient_count,
    triangular_index,
)


@pytest.fixture
def wmm2020():
    return load_model("WMM2020")


@pytest.fixture
def wmm2020_double():
    return load_model("WMM2020", precision=Precision.DOUBLE)


def _zero_tables(max_degree):
    size = coefficient_count(max_degree)
    return [0.0] * size, [0.0] * size, [0.0] * size, [0.0] * size


# ── Triangular indexing ──────────────────────────────────────────────


class TestTriangularIndex:

    def test_coefficient_count_degree_12(self):
        """Degree 12 packs into 13*14/2 = 91 slots."""
        assert coefficient_count(12) == 91

    @pytest.mark.parametrize("max_degree", [0, 1, 2, 5, 12, 13])
    def test_index_is_bijection(self, max_degree):
        """Every (n, m) maps to a distinct slot in [0, count)."""
        count = coefficient_count(max_degree)
        indices = [
            triangular_index(n, m, max_degree)
            for m in range(max_degree + 1)
            for n in range(m, max_degree + 1)
        ]
        assert len(indices) == count
        assert len(set(indices)) == count
        assert min(indices) == 0
        assert max(indices) == count - 1

    def test_order_major_layout(self):
        """m=0 column occupies the first N+1 slots, in degree order."""
        assert [triangular_index(n, 0, 12) for n in range(13)] == list(range(13))
        # m=1 column starts right after, at n=1
        assert triangular_index(1, 1, 12) == 13
        assert triangular_index(12, 12, 12) == 90

    def test_index_is_integer(self):
        assert isinstance(triangular_index(7, 3, 12), int)


# ── CoefficientStore ─────────────────────────────────────────────────


class TestCoefficientStore:

    def test_bundled_table_lengths(self, wmm2020):
        assert wmm2020.max_degree == GeomagConstants.NMAX
        for table in (
            wmm2020.main_field_c, wmm2020.main_field_s,
            wmm2020.secular_var_c, wmm2020.secular_var_s,
        ):
            assert len(table) == 91

    def test_g10_g11_h11_reference_values(self, wmm2020):
        """Degree-1 unnormalized terms equal the published Gauss coefficients."""
        assert wmm2020.value_c(1, 0, 2020.0) == np.float32(-29404.5)
        assert wmm2020.value_c(1, 1, 2020.0) == np.float32(-1450.7)
        assert wmm2020.value_s(1, 1, 2020.0) == np.float32(4652.9)

    def test_epoch_identity(self, wmm2020):
        """At the epoch the secular variation contributes exactly nothing."""
        for m in range(13):
            for n in range(m, 13):
                idx = triangular_index(n, m, 12)
                assert wmm2020.value_c(n, m, wmm2020.epoch) == wmm2020.main_field_c[idx]
                assert wmm2020.value_s(n, m, wmm2020.epoch) == wmm2020.main_field_s[idx]

    def test_linear_extrapolation(self, wmm2020_double):
        """C(t) = C0 + (t - epoch) * Cdot."""
        m = wmm2020_double
        # g10 2020: -29404.5 nT, secular variation 6.7 nT/yr
        assert m.value_c(1, 0, 2022.5) == pytest.approx(-29404.5 + 2.5 * 6.7, abs=1e-9)
        # h11: 4652.9 nT, -25.1 nT/yr
        assert m.value_s(1, 1, 2019.0) == pytest.approx(4652.9 + 25.1, abs=1e-9)

    def test_far_from_epoch_does_not_raise(self, wmm2020):
        """Extrapolation degrades but never fails."""
        value = wmm2020.value_c(1, 0, 2100.0)
        assert np.isfinite(value)

    def test_single_precision_returns_float32(self, wmm2020):
        assert wmm2020.dtype == np.float32
        assert isinstance(wmm2020.value_c(2, 1, 2021.0), np.float32)
        assert isinstance(wmm2020.value_s(2, 1, 2021.0), np.float32)

    def test_double_precision_returns_float64(self, wmm2020_double):
        assert wmm2020_double.dtype == np.float64
        assert isinstance(wmm2020_double.value_c(2, 1, 2021.0), np.float64)

    def test_store_is_frozen(self, wmm2020):
        with pytest.raises(dataclasses.FrozenInstanceError):
            wmm2020.epoch = 2030.0  # type: ignore[misc]

    def test_tables_are_read_only(self, wmm2020):
        with pytest.raises(ValueError):
            wmm2020.main_field_c[1] = 0.0

    def test_wrong_table_length_raises(self):
        c, s, cdot, sdot = _zero_tables(12)
        with pytest.raises(ValueError, match="expected 91"):
            build_store("BAD", 2020.0, 12, c[:-1], s, cdot, sdot)

    def test_mixed_dtypes_raise(self):
        c, s, cdot, sdot = _zero_tables(2)
        with pytest.raises(ValueError, match="mix dtypes"):
            CoefficientStore(
                name="MIXED",
                epoch=2020.0,
                max_degree=2,
                main_field_c=np.array(c, dtype=np.float32),
                main_field_s=np.array(s, dtype=np.float64),
                secular_var_c=np.array(cdot, dtype=np.float32),
                secular_var_s=np.array(sdot, dtype=np.float32),
            )

    def test_build_store_copies_input(self):
        c, s, cdot, sdot = _zero_tables(1)
        c[1] = -30000.0
        store = build_store("DIPOLE", 2020.0, 1, c, s, cdot, sdot)
        c[1] = 0.0
        assert store.value_c(1, 0, 2020.0) == np.float32(-30000.0)


# ── Domain purity ────────────────────────────────────────────────────


class TestDomainPurity:

    def test_coefficients_domain_purity(self):
        """coefficients.py must only import from stdlib, numpy and domain."""
        import geomag.domain.coefficients as mod

        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        allowed_top = {"numpy", "dataclasses", "enum", "typing"}
        allowed_internal_prefix = "geomag.domain"

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    top = alias.name.split(".")[0]
                    assert top in allowed_top or alias.name.startswith(
                        allowed_internal_prefix
                    ), f"Forbidden import: {alias.name}"
            elif isinstance(node, ast.ImportFrom):
                if node.module and node.level == 0:
                    top = node.module.split(".")[0]
                    assert top in allowed_top or node.module.startswith(
                        allowed_internal_prefix
                    ), f"Forbidden import from: {node.module}"
