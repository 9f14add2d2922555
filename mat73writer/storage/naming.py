"""Physical names of catalog groups and datasets."""

from __future__ import annotations

import re

from mat73writer.errors import ConfigurationError
from mat73writer.storage.format import DATASET_PREFIX
from mat73writer.utils.schema import CatalogItem

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_INVALID_START_CHARS = re.compile(r"^_+")
_VALID_VALUE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_]*$")
_VALID_KEY = re.compile(r"^[A-Za-z0-9_]+$")


def physical_catalog_id(catalog_id: str) -> str:
    """``/A/B/C`` -> ``A_B_C``"""
    return catalog_id.lstrip("/").replace("/", "_")


def sanitize_value(value: str) -> str:
    """Reduce a parameter value to a legal identifier fragment.

    Raises:
        ConfigurationError: if nothing legal is left.
    """
    sanitized = _INVALID_CHARS.sub("", value)
    sanitized = _INVALID_START_CHARS.sub("", sanitized)

    if not _VALID_VALUE.match(sanitized):
        raise ConfigurationError(f"Unable to derive a valid variable name from parameter value '{value}'.")

    return sanitized


def parameter_suffix(parameters: dict[str, str] | None) -> str:
    """Dataset name suffix ``_k1_v1_k2_v2...`` in map order.

    No partial suffix is ever returned: one bad key or value fails the call.
    """
    if not parameters:
        return ""

    parts = []
    for key, value in parameters.items():
        if not _VALID_KEY.match(key):
            raise ConfigurationError(f"Invalid parameter name '{key}'.")
        parts.append(f"{key}_{sanitize_value(value)}")

    return "_" + "_".join(parts)


def dataset_name(item: CatalogItem) -> str:
    return f"{DATASET_PREFIX}{item.representation.id}{parameter_suffix(item.parameters)}"
