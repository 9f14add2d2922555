"""Mat73Writer — one write session per MATLAB v7.3 file.

Usage:
    from mat73writer import Mat73Writer, WriterContext

    writer = Mat73Writer()
    writer.set_context(WriterContext(target_directory="out/"))

    writer.open(begin, file_period, sample_period, catalog_items)
    writer.write(timedelta(0), requests)
    writer.write(timedelta(seconds=1000), more_requests)
    writer.close()

Or as a context manager, which closes the file on exit:

    with Mat73Writer(context) as writer:
        writer.open(begin, file_period, sample_period, catalog_items)
        writer.write(timedelta(0), requests)
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import h5py

from mat73writer.errors import CapacityError, ConfigurationError
from mat73writer.storage.chunking import plan_chunks
from mat73writer.storage.format import USERBLOCK_SIZE
from mat73writer.storage.preamble import write_preamble
from mat73writer.storage.router import WriteRouter
from mat73writer.storage.skeleton import SkeletonBuilder, validate_layout
from mat73writer.utils.periods import file_name
from mat73writer.utils.schema import (
    CatalogItem,
    ChunkPlan,
    WriteRequest,
    WriterContext,
    WriterSettings,
)

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"


class Mat73Writer:
    """Writes host time series into a single .mat file.

    The destination set is fixed at ``open``: every dataset is created and
    sized before the first write. Calls must not overlap; a lock enforces
    this for callers that run them on worker threads.

    Args:
        context: Target directory and request configuration. Can also be
            supplied later via ``set_context``.
    """

    def __init__(self, context: WriterContext | None = None) -> None:
        self._context: WriterContext | None = None
        self._settings = WriterSettings()
        self._state = SessionState.CLOSED
        self._lock = threading.Lock()

        self._file: h5py.File | None = None
        self._router: WriteRouter | None = None
        self._path: Path | None = None
        self._plan: ChunkPlan | None = None
        self._sample_period: timedelta | None = None

        if context is not None:
            self.set_context(context)

    def set_context(self, context: WriterContext) -> None:
        """Set target directory and validate the request configuration."""
        if self._state is not SessionState.CLOSED:
            raise RuntimeError("Cannot change the context of an open writer.")
        self._settings = context.settings
        self._context = context

    def open(
        self,
        begin: datetime,
        file_period: timedelta,
        sample_period: timedelta,
        catalog_items: Sequence[CatalogItem],
    ) -> Path:
        """Create the file and its complete, empty structure.

        Args:
            begin: Timestamp of the first sample in the file.
            file_period: Time span covered by the file.
            sample_period: Time between two samples.
            catalog_items: Every destination that will be written.

        Returns:
            Path of the created file.

        Raises:
            ConfigurationError: if the file already exists or a name cannot be
                derived. Raised before anything is created on disk.
            CapacityError: if no chunk length fits the file length. Raised
                before anything is created on disk.
        """
        with self._lock:
            if self._context is None:
                raise RuntimeError("No context set. Call .set_context() first.")
            if self._state is not SessionState.CLOSED:
                raise RuntimeError("Writer already open. Call .close() first.")
            if sample_period <= timedelta(0):
                raise ConfigurationError(f"Sample period must be positive, got {sample_period}.")

            self._state = SessionState.OPENING
            try:
                self._open(begin, file_period, sample_period, catalog_items)
            except BaseException:
                self._release()
                self._state = SessionState.CLOSED
                raise

            self._state = SessionState.OPEN
            return self._path

    def _open(
        self,
        begin: datetime,
        file_period: timedelta,
        sample_period: timedelta,
        catalog_items: Sequence[CatalogItem],
    ) -> None:
        assert self._context is not None

        total_length = file_period // sample_period
        path = Path(self._context.target_directory) / file_name(begin, sample_period)

        if path.exists():
            raise ConfigurationError(
                f"The file {path} already exists. Extending an already existing "
                "file with additional resources is not supported."
            )

        plan = plan_chunks(total_length, self._settings.max_chunk_length)
        if plan.chunk_length <= 0:
            raise CapacityError(
                f"The sample rate is too low: no chunk length <= {self._settings.max_chunk_length} "
                f"divides the file length of {total_length} samples."
            )

        catalog_items = list(catalog_items)
        validate_layout(catalog_items)

        path.parent.mkdir(parents=True, exist_ok=True)

        # "w-" refuses to truncate a file that appeared since the check above
        h5file = h5py.File(str(path), "w-", userblock_size=USERBLOCK_SIZE)
        try:
            with h5file:
                registry = SkeletonBuilder(h5file, plan, self._settings).build(
                    begin, sample_period, catalog_items
                )
                registry.flush(h5file)
                h5file.flush()

            write_preamble(path)
            self._file = h5py.File(str(path), "r+")
        except BaseException:
            self._release()
            path.unlink(missing_ok=True)
            raise

        self._router = WriteRouter(self._file)
        self._path = path
        self._plan = plan
        self._sample_period = sample_period

        logger.info(
            "Opened %s: %d samples in %d chunks of %d",
            path, plan.total_length, plan.chunk_count, plan.chunk_length,
        )

    def write(
        self,
        file_offset: timedelta,
        requests: Sequence[WriteRequest],
        progress: Callable[[float], None] | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        """Write a batch of requests at ``file_offset`` from the file begin.

        Args:
            file_offset: Time offset of the first sample of every request.
            requests: Batch to write, one request per catalog item.
            progress: Called once per catalog with the fraction processed.
            cancel: Set it to abort between catalogs or items.

        Raises:
            BoundsError: if a request does not fit its dataset.
            CancellationError: if ``cancel`` was set. Already written
                catalogs are not rolled back.
        """
        with self._lock:
            if self._state is not SessionState.OPEN:
                raise RuntimeError("Writer not opened. Call .open() first.")
            assert self._router is not None and self._sample_period is not None

            offset = file_offset // self._sample_period
            self._router.route(offset, requests, progress, cancel)

    def close(self) -> None:
        """Flush and release the file. Does nothing if not open."""
        with self._lock:
            if self._state is not SessionState.OPEN:
                return

            self._state = SessionState.CLOSING
            try:
                if self._file is not None:
                    self._file.flush()
            finally:
                self._release()
                self._state = SessionState.CLOSED

            logger.info("Closed %s", self._path)

    def _release(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._router = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def path(self) -> Path | None:
        """Path of the current or last opened file."""
        return self._path

    @property
    def plan(self) -> ChunkPlan | None:
        return self._plan

    @property
    def settings(self) -> WriterSettings:
        return self._settings

    # Context manager support
    def __enter__(self) -> Mat73Writer:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Mat73Writer(path={str(self._path) if self._path else None!r}, state={self._state.value})"
