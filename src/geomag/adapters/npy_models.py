# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Memory-mapped coefficient source adapter.

Stores each model as four .npy tables plus a small JSON sidecar:

    <dir>/<name>.json                  {"name", "epoch", "max_degree", "tables"}
    <dir>/<name>.main_field_c.npy      ...one file per table

With mmap=True the tables are opened as read-only numpy memmaps, so the
coefficients stay on disk and are paged in on lookup. The store's logical
interface is the same as for in-memory tables.
"""
import json
import logging
import pathlib
from typing import Any

import numpy as np

from geomag.ports import CoefficientSource
from geomag.domain.coefficients import CoefficientStore, Precision

logger = logging.getLogger(__name__)

_TABLE_KEYS = ("main_field_c", "main_field_s", "secular_var_c", "secular_var_s")


def export_npy(store: CoefficientStore, directory: str | pathlib.Path) -> pathlib.Path:
    """Write a store as .npy tables plus JSON sidecar. Returns the sidecar path."""
    directory = pathlib.Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    tables = {}
    for key in _TABLE_KEYS:
        filename = f"{store.name}.{key}.npy"
        np.save(directory / filename, np.asarray(getattr(store, key)))
        tables[key] = filename

    sidecar = directory / f"{store.name}.json"
    with open(sidecar, 'w', encoding='utf-8') as f:
        json.dump(
            {
                "name": store.name,
                "epoch": store.epoch,
                "max_degree": store.max_degree,
                "tables": tables,
            },
            f,
            indent=2,
        )
    logger.debug("Exported %s to %s", store.name, directory)
    return sidecar


class NpyCoefficientSource(CoefficientSource):
    """Reads coefficient stores written by export_npy."""

    def __init__(
        self,
        directory: str | pathlib.Path,
        mmap: bool = True,
        precision: Precision | None = None,
    ) -> None:
        """
        Args:
            directory: Directory written by export_npy.
            mmap: Open tables as read-only memmaps instead of loading them.
            precision: Arithmetic precision. None keeps the stored dtype;
                otherwise tables of another dtype are converted into
                read-only in-memory arrays.
        """
        self._directory = pathlib.Path(directory)
        self._mmap = mmap
        self._precision = precision

    def _sidecars(self) -> dict[str, dict[str, Any]]:
        sidecars = {}
        for path in sorted(self._directory.glob("*.json")):
            with open(path, encoding='utf-8') as f:
                raw = json.load(f)
            if "tables" in raw:
                sidecars[raw["name"].lower()] = raw
        return sidecars

    def model_names(self) -> tuple[str, ...]:
        return tuple(raw["name"] for raw in self._sidecars().values())

    def load_model(self, name: str) -> CoefficientStore:
        """Open a model by name (case-insensitive).

        Raises:
            ValueError: If no sidecar for the model exists in the directory.
        """
        sidecars = self._sidecars()
        raw = sidecars.get(name.lower())
        if raw is None:
            available = ", ".join(r["name"] for r in sidecars.values()) or "none"
            raise ValueError(
                f"Unknown geomagnetic model '{name}' in {self._directory} "
                f"(available: {available})"
            )

        mmap_mode = "r" if self._mmap else None
        tables = {}
        for key in _TABLE_KEYS:
            table = np.load(self._directory / raw["tables"][key], mmap_mode=mmap_mode)
            if self._precision is not None and table.dtype != self._precision.dtype:
                table = np.array(table, dtype=self._precision.dtype)
            if not isinstance(table, np.memmap):
                table.flags.writeable = False
            tables[key] = table

        logger.debug(
            "Opened %s from %s (%s)",
            raw["name"], self._directory, "memmap" if self._mmap else "in-memory",
        )
        return CoefficientStore(
            name=raw["name"],
            epoch=float(raw["epoch"]),
            max_degree=int(raw["max_degree"]),
            **tables,
        )
