"""Record type schema registry.

Table schemas are built once per record type, either eagerly through the
``register_record`` decorator or lazily on first use.
"""

from __future__ import annotations

from typing import Dict, List, TypeVar

from .core import TableSchema
from .describe import build_table_schema

T = TypeVar("T", bound=type)

_RECORD_REGISTRY: Dict[type, TableSchema] = {}


def register_record(cls: T) -> T:
    """Class decorator that describes a record type up front.

    Column type errors surface at import time instead of on first use.
    Registering the same class twice is a no-op.
    """
    get_table_schema(cls)
    return cls


def get_table_schema(cls: type) -> TableSchema:
    """Retrieve the schema for a record type, building it if needed."""
    schema = _RECORD_REGISTRY.get(cls)
    if schema is None:
        schema = build_table_schema(cls)
        _RECORD_REGISTRY[cls] = schema
    return schema


def list_tables() -> List[str]:
    """List table names of all described record types."""
    return sorted({schema.table_name for schema in _RECORD_REGISTRY.values()})


def unregister_record(cls: type) -> None:
    """Drop a record type from the registry."""
    _RECORD_REGISTRY.pop(cls, None)


__all__ = [
    "register_record",
    "get_table_schema",
    "list_tables",
    "unregister_record",
]
