"""Routes write requests to their destination datasets."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence

import h5py

from mat73writer.errors import BoundsError, CancellationError, ConfigurationError
from mat73writer.storage.naming import dataset_name, physical_catalog_id
from mat73writer.utils.schema import WriteRequest

logger = logging.getLogger(__name__)


class WriteRouter:
    """Places each request's samples at an absolute offset in its dataset.

    Requests are processed per catalog, in the order catalogs first appear
    in the batch. Every slice is written synchronously as one hyperslab.
    """

    def __init__(self, h5file: h5py.File) -> None:
        self._file = h5file

    def route(
        self,
        offset: int,
        requests: Sequence[WriteRequest],
        progress: Callable[[float], None] | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        """Write all requests at sample ``offset``.

        Args:
            offset: Absolute sample index of the first value of every request.
            requests: Batch to write.
            progress: Called once per catalog with (catalogs done / requests).
            cancel: Checked between catalogs and between items.

        Raises:
            BoundsError: if a slice does not fit its dataset.
            CancellationError: if ``cancel`` is set. Earlier catalogs stay written.
        """
        groups: dict[str, list[WriteRequest]] = {}
        for request in requests:
            groups.setdefault(request.catalog_item.catalog.id, []).append(request)

        processed = 0
        for catalog_id, group in groups.items():
            _check_cancel(cancel)
            physical_id = physical_catalog_id(catalog_id)

            for request in group:
                _check_cancel(cancel)
                self.write_one(physical_id, offset, request)

            processed += 1
            if progress is not None:
                progress(processed / len(requests))

    def write_one(self, physical_id: str, offset: int, request: WriteRequest) -> None:
        ds = self.resolve(physical_id, request)
        length = len(request.data)

        if offset < 0 or offset + length > ds.shape[0]:
            raise BoundsError(
                f"Cannot write {length} samples at offset {offset} to {ds.name} "
                f"with a fixed length of {ds.shape[0]}."
            )

        if length == 0:
            return

        ds[offset:offset + length] = request.data
        logger.debug("Wrote %d samples to %s at %d", length, ds.name, offset)

    def resolve(self, physical_id: str, request: WriteRequest) -> h5py.Dataset:
        item = request.catalog_item
        path = f"/{physical_id}/{item.resource.id}/{dataset_name(item)}"
        if path not in self._file:
            raise ConfigurationError(f"No dataset for {path}. Only items passed to open() can be written.")
        return self._file[path]


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise CancellationError("The write operation was cancelled.")
