"""MATLAB text fields, stored as cell strings.

MATLAB does not store strings inline. A text field is a 1x1 ``cell`` dataset
holding an object reference to a UTF-16 ``char`` array in ``/#refs#``.

Entries are collected while the file skeleton is built and written in a single
pass afterwards:

    registry = TextBlockRegistry()
    registry.add(group, "date_time", "2020-01-01T00-00-00Z")
    ...
    registry.flush(h5file)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import h5py
import numpy as np

from mat73writer.storage.format import (
    CHAR_INT_DECODE,
    CLASS_ATTR,
    CLASS_CELL,
    CLASS_CHAR,
    INT_DECODE_ATTR,
    REFS_ALPHABET,
    REFS_GROUP,
)

logger = logging.getLogger(__name__)


@dataclass
class TextEntry:
    """A text field waiting to be written."""

    parent: h5py.Group
    key: str
    value: str


def refs_name(index: int) -> str:
    """Slot name in ``/#refs#`` for the entry at ``index``.

    The first 64 entries get one symbol each. Later entries continue with
    two symbols and so on (bijective base-64), so names never collide.
    """
    if index < 0:
        raise ValueError(f"index must be >= 0, got {index}")

    base = len(REFS_ALPHABET)
    name = ""
    index += 1
    while index > 0:
        index, digit = divmod(index - 1, base)
        name = REFS_ALPHABET[digit] + name
    return name


def encode_text(value: str) -> np.ndarray:
    """UTF-16 code units as a (n, 1) uint16 column."""
    units = np.frombuffer(value.encode("utf-16-le"), dtype="<u2")
    return units.astype(np.uint16).reshape(-1, 1)


def decode_text(units: np.ndarray) -> str:
    return np.asarray(units, dtype="<u2").tobytes().decode("utf-16-le")


class TextBlockRegistry:
    """Write-once staging buffer for text fields."""

    def __init__(self) -> None:
        self._entries: list[TextEntry] = []
        self._flushed = False

    def add(self, parent: h5py.Group, key: str, value: str) -> None:
        if self._flushed:
            raise RuntimeError("Text entries already flushed. Register all entries before flush().")
        self._entries.append(TextEntry(parent, key, value))

    def flush(self, h5file: h5py.File) -> None:
        """Write every queued entry. May be called once."""
        if self._flushed:
            raise RuntimeError("Text entries already flushed.")

        refs = h5file.require_group(REFS_GROUP)
        for index, entry in enumerate(self._entries):
            _write_cell_string(refs, refs_name(index), entry)

        logger.debug("Wrote %d text entries to %s", len(self._entries), REFS_GROUP)
        self._flushed = True

    @property
    def entries(self) -> list[TextEntry]:
        return list(self._entries)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def __len__(self) -> int:
        return len(self._entries)


def _write_cell_string(refs: h5py.Group, slot: str, entry: TextEntry) -> None:
    chars = refs.create_dataset(slot, data=encode_text(entry.value))
    chars.attrs[CLASS_ATTR] = np.bytes_(CLASS_CHAR)
    chars.attrs[INT_DECODE_ATTR] = np.int32(CHAR_INT_DECODE)

    cell = entry.parent.create_dataset(entry.key, shape=(1, 1), dtype=h5py.ref_dtype)
    cell[0, 0] = chars.ref
    cell.attrs[CLASS_ATTR] = np.bytes_(CLASS_CELL)


def read_text(h5file: h5py.File, group: h5py.Group, key: str) -> str:
    """Follow a cell string field back to its text."""
    ref = group[key][0, 0]
    return decode_text(h5file[ref][()])
