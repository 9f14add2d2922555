"""The 512 byte MATLAB preamble.

MATLAB recognizes a v7.3 file by this block alone. It occupies the HDF5 user
block, so the HDF5 superblock follows at byte 512.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from mat73writer.storage.format import BANNER_LENGTH, PREAMBLE_MARKER, USERBLOCK_SIZE

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def banner(created: datetime) -> str:
    # day and month names must not follow the locale
    stamp = (
        f"{_DAYS[created.weekday()]} {_MONTHS[created.month - 1]} "
        f"{created:%d %H:%M:%S %Y}"
    )
    return f"MATLAB 7.3 MAT-file, Platform: PCWIN64, Created on: {stamp} HDF5 schema 1.00 ."


def build_preamble(created: datetime | None = None) -> bytes:
    """Banner, space padded, followed by the version/endian marker and zeros."""
    text = banner(created or datetime.now()).encode("ascii").ljust(BANNER_LENGTH, b" ")
    block = text + PREAMBLE_MARKER
    return block.ljust(USERBLOCK_SIZE, b"\x00")


def write_preamble(path: str | Path, created: datetime | None = None) -> None:
    """Overwrite the user block of a closed HDF5 file with the preamble."""
    with open(path, "r+b") as f:
        f.seek(0)
        f.write(build_preamble(created))
