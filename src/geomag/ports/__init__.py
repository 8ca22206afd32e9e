# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for coefficient storage.

Adapters decide where the constant tables live (in-memory arrays, memory-
mapped files); the coefficient store and the field synthesis only ever
read values through indexing.
"""
from typing import Protocol, runtime_checkable

from geomag.domain.coefficients import CoefficientStore


@runtime_checkable
class CoefficientSource(Protocol):
    """Port for loading immutable geomagnetic coefficient stores."""

    def model_names(self) -> tuple[str, ...]:
        """Names of the models this source can load."""
        ...

    def load_model(self, name: str) -> CoefficientStore:
        """Load a model by name."""
        ...
