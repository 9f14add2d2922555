"""Exceptions raised by the .mat writer.

Every error is fatal to the call that raised it. Nothing is retried and
nothing already written to the file is rolled back.
"""

from __future__ import annotations


class Mat73WriterError(Exception):
    """Base class for all writer errors."""


class ConfigurationError(Mat73WriterError):
    """Target file exists, configuration is invalid or a name cannot be sanitized."""


class CapacityError(Mat73WriterError):
    """The sampling configuration yields a chunk length of zero."""


class BoundsError(Mat73WriterError):
    """A write would fall outside a dataset's fixed extent."""


class CancellationError(Mat73WriterError):
    """The caller asked to abort the current call."""
