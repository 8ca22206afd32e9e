# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON coefficient source adapter.

Loads geomagnetic models from JSON files into read-only in-memory arrays.
By default reads the bundled WMM models shipped in geomag/data. The JSON
format is::

    {"name": "...", "epoch": 2020.0, "max_degree": 12,
     "main_field_c": [...], "main_field_s": [...],
     "secular_var_c": [...], "secular_var_s": [...]}

with each table packed by the triangular index m*(2N-m+1)//2 + n.
"""
import functools
import json
import logging
import pathlib
from typing import Any

from geomag.ports import CoefficientSource
from geomag.domain.coefficients import CoefficientStore, Precision, build_store

logger = logging.getLogger(__name__)

BUNDLED_DATA_DIR = pathlib.Path(__file__).parent.parent / "data"

_TABLE_KEYS = ("main_field_c", "main_field_s", "secular_var_c", "secular_var_s")


class JsonCoefficientSource(CoefficientSource):
    """Reads coefficient stores from a directory of JSON model files."""

    def __init__(
        self,
        directory: str | pathlib.Path | None = None,
        precision: Precision = Precision.SINGLE,
    ) -> None:
        self._directory = BUNDLED_DATA_DIR if directory is None else pathlib.Path(directory)
        self._precision = precision
        self._cache: dict[str, CoefficientStore] = {}

    @property
    def precision(self) -> Precision:
        return self._precision

    def _paths(self) -> dict[str, tuple[str, pathlib.Path]]:
        """Model files keyed by lowercased model name, falling back to the file stem."""
        paths = {}
        for path in sorted(self._directory.glob("*.json")):
            with open(path, encoding='utf-8') as f:
                name = json.load(f).get("name", path.stem)
            paths[name.lower()] = (name, path)
        return paths

    def model_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._paths().values())

    def load_model(self, name: str) -> CoefficientStore:
        """Load a model by name (case-insensitive).

        Raises:
            ValueError: If no model file matches, or the file is malformed.
        """
        key = name.lower()
        if key in self._cache:
            return self._cache[key]

        paths = self._paths()
        if key not in paths:
            available = ", ".join(self.model_names()) or "none"
            raise ValueError(
                f"Unknown geomagnetic model '{name}' in {self._directory} "
                f"(available: {available})"
            )

        _, path = paths[key]
        with open(path, encoding='utf-8') as f:
            raw: dict[str, Any] = json.load(f)

        missing = [k for k in ("name", "epoch", "max_degree", *_TABLE_KEYS) if k not in raw]
        if missing:
            raise ValueError(f"{path}: missing keys {missing}")

        store = build_store(
            name=raw["name"],
            epoch=raw["epoch"],
            max_degree=raw["max_degree"],
            main_field_c=raw["main_field_c"],
            main_field_s=raw["main_field_s"],
            secular_var_c=raw["secular_var_c"],
            secular_var_s=raw["secular_var_s"],
            precision=self._precision,
        )
        logger.debug(
            "Loaded %s (epoch %.1f, degree %d, %s) from %s",
            store.name, store.epoch, store.max_degree,
            self._precision.value, path,
        )
        self._cache[key] = store
        return store


@functools.lru_cache(maxsize=None)
def bundled_source(precision: Precision = Precision.SINGLE) -> JsonCoefficientSource:
    """Shared source over the bundled models, one per precision."""
    return JsonCoefficientSource(precision=precision)


def load_model(name: str, precision: Precision = Precision.SINGLE) -> CoefficientStore:
    """Load a bundled WMM model ("WMM2015", "WMM2015v2", "WMM2020")."""
    return bundled_source(precision).load_model(name)
