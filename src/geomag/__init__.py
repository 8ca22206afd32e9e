# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
geomag

Magnetic field in the International Terrestrial Reference System from
truncated spherical harmonic models (WMM), using the singularity-free
Montenbruck & Gill V/W recursion with minimal working state.
Unnormalized coefficients, Tesla output, single precision by default.
"""

from geomag.domain.coefficients import (
    GeomagConstants,
    Precision,
    CoefficientStore,
    build_store,
    coefficient_count,
    triangular_index,
)
from geomag.domain.synthesis import (
    MagneticFieldModel,
    MagneticFieldSynthesizer,
    magnetic_field,
)
from geomag.domain.frames import (
    decimal_year,
    geodetic_to_itrs,
    itrs_to_ned,
)
from geomag.ports import CoefficientSource
from geomag.adapters.json_models import JsonCoefficientSource, bundled_source, load_model
from geomag.adapters.npy_models import NpyCoefficientSource, export_npy

MODEL_NAMES = bundled_source().model_names()

__all__ = [
    "GeomagConstants",
    "Precision",
    "CoefficientStore",
    "build_store",
    "coefficient_count",
    "triangular_index",
    "MagneticFieldModel",
    "MagneticFieldSynthesizer",
    "magnetic_field",
    "decimal_year",
    "geodetic_to_itrs",
    "itrs_to_ned",
    "CoefficientSource",
    "JsonCoefficientSource",
    "bundled_source",
    "load_model",
    "NpyCoefficientSource",
    "export_npy",
    "MODEL_NAMES",
]
