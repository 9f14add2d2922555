"""Read-back access to .mat files written by Mat73Writer.

Follows the MATLAB conventions used on write: struct groups, cell strings
resolved through ``/#refs#``, and the preamble in the user block.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import h5py
import numpy as np

from mat73writer.storage.format import (
    BANNER_LENGTH,
    CLASS_ATTR,
    CLASS_STRUCT,
    PROPERTIES_NAME,
    REFS_GROUP,
)
from mat73writer.storage.text import read_text


class MatReader:
    """Reader for .mat files produced by this package.

    Lazy — sample data is only read when a dataset is requested.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"File not found: {self.path}")

        self._file: h5py.File | None = None

    def open(self) -> None:
        self._file = h5py.File(str(self.path), "r")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> MatReader:
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def file(self) -> h5py.File:
        if self._file is None:
            raise RuntimeError("Reader not opened. Call .open() first.")
        return self._file

    @property
    def banner(self) -> str:
        """The text part of the preamble, without padding."""
        with open(self.path, "rb") as f:
            head = f.read(BANNER_LENGTH)
        return head.decode("ascii").rstrip()

    @property
    def userblock_size(self) -> int:
        return self.file.userblock_size

    @property
    def properties(self) -> dict[str, str]:
        """Session-wide text fields (date_time, sample_period)."""
        group = self.file[PROPERTIES_NAME]
        return {key: read_text(self.file, group, key) for key in group}

    @property
    def catalog_ids(self) -> list[str]:
        """Physical ids of all catalog groups."""
        return [
            name for name, obj in self.file.items()
            if name not in (PROPERTIES_NAME, REFS_GROUP) and _is_struct(obj)
        ]

    def catalog_properties(self, catalog_id: str) -> dict[str, Any] | None:
        """Decoded properties blob of a catalog, or None if it has none."""
        raw = self.catalog_properties_text(catalog_id)
        return None if raw is None else json.loads(raw)

    def catalog_properties_text(self, catalog_id: str) -> str | None:
        group = self.file[catalog_id]
        if PROPERTIES_NAME not in group:
            return None
        return read_text(self.file, group, PROPERTIES_NAME)

    def resource_ids(self, catalog_id: str) -> list[str]:
        group = self.file[catalog_id]
        return [name for name, obj in group.items() if _is_struct(obj)]

    def dataset_names(self, catalog_id: str, resource_id: str) -> list[str]:
        return list(self.file[catalog_id][resource_id].keys())

    def dataset(self, catalog_id: str, resource_id: str, name: str) -> h5py.Dataset:
        group = self.file[catalog_id][resource_id]
        if name not in group:
            raise KeyError(
                f"Dataset '{name}' not found. "
                f"Available: {list(group.keys())}"
            )
        return group[name]

    def read_dataset(
        self,
        catalog_id: str,
        resource_id: str,
        name: str,
        start: int = 0,
        end: int | None = None,
    ) -> np.ndarray:
        """Read samples of one dataset, optionally sliced.

        Args:
            catalog_id: Physical catalog id, e.g. ``A_B_C``.
            resource_id: Resource group name.
            name: Dataset name, e.g. ``dataset_1_s_mean``.
            start: First sample (inclusive).
            end: Last sample (exclusive). None means all remaining samples.
        """
        ds = self.dataset(catalog_id, resource_id, name)
        if end is None:
            end = ds.shape[0]
        return ds[start:end]


def _is_struct(obj: h5py.HLObject) -> bool:
    if not isinstance(obj, h5py.Group):
        return False
    value = obj.attrs.get(CLASS_ATTR)
    if isinstance(value, bytes):
        value = value.decode("ascii")
    return value == CLASS_STRUCT
