"""Builds the complete group/dataset hierarchy of a .mat file.

Everything is created before the first sample arrives: struct groups for the
file, each catalog and each resource, and one pre-sized, chunked float64
dataset per catalog item. Text fields are queued on a TextBlockRegistry which
the caller flushes once the hierarchy exists.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

import h5py
import numpy as np

from mat73writer.errors import CapacityError, ConfigurationError
from mat73writer.storage.format import (
    CLASS_ATTR,
    CLASS_DOUBLE,
    CLASS_STRUCT,
    DATE_TIME_FORMAT,
    PROPERTIES_NAME,
)
from mat73writer.storage.naming import dataset_name, physical_catalog_id
from mat73writer.storage.text import TextBlockRegistry
from mat73writer.utils.periods import to_unit_string
from mat73writer.utils.schema import CatalogItem, ChunkPlan, WriterSettings

logger = logging.getLogger(__name__)


class SkeletonBuilder:
    """Creates the struct hierarchy and empty datasets for one session.

    Args:
        h5file: File opened for writing.
        plan: Chunk plan shared by every dataset.
        settings: Storage settings (compression, fill value).
    """

    def __init__(self, h5file: h5py.File, plan: ChunkPlan, settings: WriterSettings) -> None:
        self._file = h5file
        self._plan = plan
        self._settings = settings

    def build(
        self,
        begin: datetime,
        sample_period: timedelta,
        catalog_items: Iterable[CatalogItem],
    ) -> TextBlockRegistry:
        """Create all groups and datasets.

        Returns:
            Registry holding the text fields still to be written.

        Raises:
            CapacityError: if the chunk plan has zero length.
            ConfigurationError: if a name cannot be derived or clashes.
        """
        if self._plan.chunk_length <= 0:
            raise CapacityError("The sample rate is too low.")

        catalog_items = list(catalog_items)
        validate_layout(catalog_items)

        registry = TextBlockRegistry()

        file_properties = get_or_create_struct(self._file, PROPERTIES_NAME)
        registry.add(file_properties, "date_time", begin.strftime(DATE_TIME_FORMAT))
        registry.add(file_properties, "sample_period", to_unit_string(sample_period))

        for catalog_id, items in _group_by_catalog(catalog_items).items():
            catalog = items[0].catalog
            catalog_struct = get_or_create_struct(self._file, physical_catalog_id(catalog_id))

            if catalog.properties is not None:
                registry.add(catalog_struct, PROPERTIES_NAME, json.dumps(catalog.properties, indent=2))

            for item in items:
                resource_struct = get_or_create_struct(catalog_struct, item.resource.id)
                self._create_dataset(resource_struct, dataset_name(item))

        return registry

    def _create_dataset(self, parent: h5py.Group, name: str) -> h5py.Dataset:
        if name in parent:
            return parent[name]

        settings = self._settings
        ds = parent.create_dataset(
            name,
            shape=(self._plan.total_length,),
            dtype=np.float64,
            chunks=(self._plan.chunk_length,),
            compression=settings.compression,
            compression_opts=settings.compression_opts if settings.compression == "gzip" else None,
            shuffle=settings.shuffle,
            fillvalue=settings.fill_value,
        )
        ds.attrs[CLASS_ATTR] = np.bytes_(CLASS_DOUBLE)

        logger.debug("Created %s with %d chunks of %d", ds.name, self._plan.chunk_count, self._plan.chunk_length)
        return ds


def get_or_create_struct(parent: h5py.Group, name: str) -> h5py.Group:
    """Open the struct group ``name`` or create it."""
    if name in parent:
        return parent[name]

    group = parent.create_group(name)
    group.attrs[CLASS_ATTR] = np.bytes_(CLASS_STRUCT)
    return group


def validate_layout(catalog_items: Iterable[CatalogItem]) -> None:
    """Derive every physical name without touching a file.

    Raises:
        ConfigurationError: if a parameter cannot be sanitized, or a resource
            named ``properties`` collides with the catalog's properties field.
    """
    for catalog_id, items in _group_by_catalog(catalog_items).items():
        physical_id = physical_catalog_id(catalog_id)
        has_properties = items[0].catalog.properties is not None

        for item in items:
            if has_properties and item.resource.id == PROPERTIES_NAME:
                raise ConfigurationError(
                    f"Resource '{PROPERTIES_NAME}' of catalog {catalog_id} ({physical_id}) "
                    "clashes with the catalog's properties field."
                )
            dataset_name(item)


def _group_by_catalog(catalog_items: Iterable[CatalogItem]) -> dict[str, list[CatalogItem]]:
    groups: dict[str, list[CatalogItem]] = {}
    for item in catalog_items:
        groups.setdefault(item.catalog.id, []).append(item)
    return groups
