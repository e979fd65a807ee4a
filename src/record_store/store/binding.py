"""Binding of result rows back into records.

Result columns are matched to record attributes through the same column
annotation the introspector reads. Columns the record does not declare are
ignored. Frozen records (frozen dataclasses, pydantic models with
``frozen=True``) are never mutated; a copy carrying the row values is
returned instead.
"""

import dataclasses
from typing import Any, Dict, Mapping

from pydantic import BaseModel

from record_store.schema.core import ColumnDef, ColumnType, TableSchema
from record_store.schema.describe import zero_instance


def _coerce(col: ColumnDef, value: Any) -> Any:
    # SQLite stores BOOLEAN as 0/1
    if value is not None and col.column_type is ColumnType.BOOLEAN:
        return bool(value)
    return value


def row_values(schema: TableSchema, row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a result row to ``{attribute: value}``."""
    return {
        col.attribute: _coerce(col, row[col.name])
        for col in schema.columns
        if col.name in row
    }


def is_frozen(instance: Any) -> bool:
    """True when attributes of ``instance`` cannot be assigned."""
    if isinstance(instance, BaseModel):
        return bool(type(instance).model_config.get("frozen"))
    if dataclasses.is_dataclass(instance):
        return type(instance).__dataclass_params__.frozen
    return False


def fill_record(instance: Any, schema: TableSchema, row: Mapping[str, Any]) -> Any:
    """Assign row values onto a record.

    Returns ``instance`` itself, or a populated copy when it is frozen.
    """
    values = row_values(schema, row)
    if is_frozen(instance):
        if isinstance(instance, BaseModel):
            return instance.model_copy(update=values)
        return dataclasses.replace(instance, **values)

    for attribute, value in values.items():
        setattr(instance, attribute, value)
    return instance


def new_record(cls: type, schema: TableSchema, row: Mapping[str, Any]) -> Any:
    """Build a fresh record from a result row."""
    return fill_record(zero_instance(cls), schema, row)
