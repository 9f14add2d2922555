"""mat73writer Example: One Day of Weather Station Data

Writes a day of 1 s samples for two weather stations into a single
MATLAB v7.3 file, in hourly batches, then reads one series back.

Run:
    python examples/weather_station.py

Output:
    - Creates out/2020-01-01T00-00-00Z_1_s.mat
    - Prints the chunk plan and the daily mean temperature per station
"""

from datetime import datetime, timedelta, timezone

import numpy as np

from mat73writer import (
    Catalog,
    Mat73Writer,
    MatReader,
    Representation,
    Resource,
    WriteRequest,
    WriterContext,
)


def make_catalog(station: str) -> Catalog:
    return Catalog(
        id=f"/WEATHER/{station}",
        properties={"station": station, "elevation_m": 312},
        resources=[
            Resource(id="temperature", representations=[Representation(id="1_s")]),
            Resource(id="wind_speed", representations=[Representation(id="1_s")]),
        ],
    )


def main() -> None:
    begin = datetime(2020, 1, 1, tzinfo=timezone.utc)
    sample_period = timedelta(seconds=1)
    batch = timedelta(hours=1)
    rng = np.random.default_rng(0)

    catalogs = [make_catalog("NORTH"), make_catalog("SOUTH")]
    items = [item for catalog in catalogs for item in catalog.catalog_items()]

    with Mat73Writer(WriterContext(target_directory="out")) as writer:
        path = writer.open(begin, timedelta(days=1), sample_period, items)
        print(f"Chunk plan: {writer.plan}")

        samples = batch // sample_period
        for hour in range(24):
            requests = []
            for item in items:
                base = 5.0 if item.resource.id == "temperature" else 3.0
                requests.append(WriteRequest(item, base + rng.normal(0, 0.5, samples)))

            writer.write(hour * batch, requests, progress=lambda p: None)

    print(f"Wrote {path}")

    with MatReader(path) as r:
        for catalog_id in r.catalog_ids:
            temperature = r.read_dataset(catalog_id, "temperature", "dataset_1_s")
            print(f"{catalog_id}: mean temperature {temperature.mean():.2f} °C")


if __name__ == "__main__":
    main()
