"""Formatting of sample periods and file names."""

from __future__ import annotations

from datetime import datetime, timedelta

from mat73writer.storage.format import FILE_EXTENSION, FILE_NAME_TIME_FORMAT

_QUOTIENTS = (1000, 1000, 1000, 60)
_POSTFIXES = ("ns", "us", "ms", "s", "min")


def to_unit_string(period: timedelta, separator: str = " ") -> str:
    """Render a period in its largest exact unit.

    >>> to_unit_string(timedelta(seconds=1))
    '1 s'
    >>> to_unit_string(timedelta(milliseconds=100), "_")
    '100_ms'
    """
    value = (period // timedelta(microseconds=1)) * 1000

    for quotient, postfix in zip(_QUOTIENTS, _POSTFIXES):
        whole, remainder = divmod(value, quotient)
        if remainder != 0:
            return f"{value}{separator}{postfix}"
        value = whole

    return f"{value}{separator}{_POSTFIXES[-1]}"


def file_name(begin: datetime, sample_period: timedelta) -> str:
    return f"{begin.strftime(FILE_NAME_TIME_FORMAT)}Z_{to_unit_string(sample_period, '_')}{FILE_EXTENSION}"
