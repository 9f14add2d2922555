"""mat73writer — stream host time series into MATLAB v7.3 .mat files.

One writer session produces one file. All destinations are created and sized
when the file is opened; batches are then written at their time offsets.

Quick start:
    from datetime import datetime, timedelta, timezone
    from mat73writer import Catalog, Mat73Writer, WriteRequest, WriterContext

    catalog = Catalog(id="/A/B/C", resources=[...])
    items = catalog.catalog_items()

    with Mat73Writer(WriterContext(target_directory="out/")) as writer:
        writer.open(
            datetime(2020, 1, 1, tzinfo=timezone.utc),
            file_period=timedelta(days=1),
            sample_period=timedelta(seconds=1),
            catalog_items=items,
        )
        writer.write(timedelta(0), [WriteRequest(item, data) for item, data in ...])

    # Read back
    from mat73writer import MatReader
    with MatReader("out/2020-01-01T00-00-00Z_1_s.mat") as r:
        print(r.catalog_ids)
"""

__version__ = "0.1.0"

from mat73writer.errors import (
    BoundsError,
    CancellationError,
    CapacityError,
    ConfigurationError,
    Mat73WriterError,
)
from mat73writer.storage.reader import MatReader
from mat73writer.utils.schema import (
    Catalog,
    CatalogItem,
    Representation,
    Resource,
    WriteRequest,
    WriterContext,
    WriterSettings,
)
from mat73writer.writer import Mat73Writer, SessionState

__all__ = [
    "BoundsError",
    "CancellationError",
    "CapacityError",
    "Catalog",
    "CatalogItem",
    "ConfigurationError",
    "Mat73Writer",
    "Mat73WriterError",
    "MatReader",
    "Representation",
    "Resource",
    "SessionState",
    "WriteRequest",
    "WriterContext",
    "WriterSettings",
    "__version__",
]
