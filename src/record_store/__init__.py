"""
record-store - map annotated records onto SQLite tables.

Records are dataclasses or pydantic models whose fields carry a column
annotation. The store generates CREATE TABLE, INSERT, UPDATE, SELECT and
DELETE statements for them and binds values positionally.
"""

from record_store.exceptions import (
    AmbiguousUpsertTargetError,
    MissingKeyColumnError,
    QueryError,
    RecordNotFoundError,
    RecordStoreError,
    UnsupportedColumnTypeError,
    UnsupportedTypeError,
)
from record_store.schema import (
    ColumnAttr,
    column,
    decompose,
    model_column,
    register_record,
)
from record_store.store import IN_MEMORY, RecordStore

__version__ = "0.1.0"

__all__ = [
    "IN_MEMORY",
    "RecordStore",
    "ColumnAttr",
    "column",
    "model_column",
    "register_record",
    "decompose",
    "RecordStoreError",
    "UnsupportedTypeError",
    "UnsupportedColumnTypeError",
    "MissingKeyColumnError",
    "AmbiguousUpsertTargetError",
    "QueryError",
    "RecordNotFoundError",
]
