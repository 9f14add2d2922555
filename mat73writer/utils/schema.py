"""Pydantic models for the host data model and writer configuration."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NamedTuple

import numpy as np
from pydantic import BaseModel, Field, ValidationError, field_validator

from mat73writer.errors import ConfigurationError
from mat73writer.storage.format import (
    COMPRESSION,
    COMPRESSION_OPTS,
    MAX_CHUNK_LENGTH,
    SHUFFLE,
)

_RESOURCE_ID = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_REPRESENTATION_ID = re.compile(r"^[A-Za-z0-9_]+$")


class Representation(BaseModel):
    """One encoding or sampling variant of a resource, e.g. ``1_s_mean``."""

    id: str

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        if not _REPRESENTATION_ID.match(v):
            raise ValueError(f"Invalid representation id '{v}'")
        return v


class Resource(BaseModel):
    """A named channel inside a catalog.

    ``properties`` is accepted from the host but not stored in the file; only
    catalog properties are written.
    """

    id: str
    properties: dict[str, Any] | None = None
    representations: list[Representation] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        if not _RESOURCE_ID.match(v):
            raise ValueError(f"Invalid resource id '{v}'")
        return v


class Catalog(BaseModel):
    """A logical namespace path such as ``/A/B/C``."""

    id: str
    properties: dict[str, Any] | None = None
    resources: list[Resource] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        if not v.startswith("/") or len(v.strip("/")) == 0:
            raise ValueError(f"Catalog id must be an absolute path, got '{v}'")
        return v

    def catalog_items(self) -> list[CatalogItem]:
        """All (resource, representation) combinations of this catalog."""
        return [
            CatalogItem(catalog=self, resource=resource, representation=representation)
            for resource in self.resources
            for representation in resource.representations
        ]


class CatalogItem(BaseModel):
    """Identifies one destination dataset.

    ``parameters`` is the representation's parameter map bound for this item.
    Its order is significant: it determines the dataset name suffix.
    """

    catalog: Catalog
    resource: Resource
    representation: Representation
    parameters: dict[str, str] | None = None


@dataclass
class WriteRequest:
    """One contiguous batch of samples for a catalog item."""

    catalog_item: CatalogItem
    data: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.data, dtype=np.float64)
        if arr.ndim != 1:
            raise ValueError(f"Write request data must be 1-D, got shape {arr.shape}")
        self.data = arr


class ChunkPlan(NamedTuple):
    chunk_length: int
    chunk_count: int

    @property
    def total_length(self) -> int:
        return self.chunk_length * self.chunk_count


class WriterSettings(BaseModel):
    """Tunable storage settings, read from the host's request configuration."""

    max_chunk_length: int = Field(default=MAX_CHUNK_LENGTH, gt=0)
    compression: str | None = COMPRESSION
    compression_opts: int | None = Field(default=COMPRESSION_OPTS, ge=0, le=9)
    shuffle: bool = SHUFFLE
    fill_value: float = math.nan

    @field_validator("compression")
    @classmethod
    def check_compression(cls, v: str | None) -> str | None:
        if v is not None and v not in ("gzip", "lzf"):
            raise ValueError(f"Unsupported compression '{v}'")
        return v

    @classmethod
    def from_request_configuration(cls, config: dict[str, Any] | None) -> WriterSettings:
        try:
            return cls.model_validate(config or {})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid request configuration: {e}") from e


class WriterContext(BaseModel):
    """Where to write, and how. Supplied by the host before ``open``."""

    target_directory: Path
    request_configuration: dict[str, Any] = Field(default_factory=dict)

    @property
    def settings(self) -> WriterSettings:
        return WriterSettings.from_request_configuration(self.request_configuration)
