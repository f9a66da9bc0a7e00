"""Userscript metadata properties and header serialization."""

from __future__ import annotations

from .block import UserscriptMetadata
from .header import (
    METADATA_END,
    METADATA_START,
    MetadataBlockBuilder,
    alphabetical,
    comparator_from_order,
    serialize_metadata_block,
)
from .property import PropertyHost, PropertyStore
from .run_at import RunAt

__all__ = [
    "METADATA_END",
    "METADATA_START",
    "MetadataBlockBuilder",
    "PropertyHost",
    "PropertyStore",
    "RunAt",
    "UserscriptMetadata",
    "alphabetical",
    "comparator_from_order",
    "serialize_metadata_block",
]
