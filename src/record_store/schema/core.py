"""Core schema types for record-to-table mapping.

Type-level descriptions (``ColumnDef``, ``TableSchema``) are built once per
record type; value-level ``FieldDescriptor`` lists are built on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any, List, Optional, Tuple


class ColumnType(Enum):
    """Supported SQLite column types."""

    BOOLEAN = "BOOLEAN"
    REAL = "REAL"
    INTEGER = "INTEGER"
    TEXT = "TEXT"


class ColumnAttr(Flag):
    """Column attributes recognised in the ``attr`` annotation."""

    NONE = 0
    PRIMARY_KEY = auto()
    UNIQUE = auto()
    INDEX = auto()

    @classmethod
    def parse(cls, text: Optional[str]) -> "ColumnAttr":
        """Convert a free-form attribute string into flags.

        Tokens are matched by substring, so ``"INTEGER PRIMARY KEY"`` and
        ``"PRIMARY KEY"`` both yield ``PRIMARY_KEY``.

        Examples:
            >>> ColumnAttr.parse("PRIMARY KEY")
            <ColumnAttr.PRIMARY_KEY: 1>
            >>> ColumnAttr.parse("") is ColumnAttr.NONE
            True
        """
        attrs = cls.NONE
        if not text:
            return attrs
        upper = text.upper()
        for token, flag in _ATTR_TOKENS:
            if token in upper:
                attrs |= flag
        return attrs


_ATTR_TOKENS: Tuple[Tuple[str, ColumnAttr], ...] = (
    ("PRIMARY KEY", ColumnAttr.PRIMARY_KEY),
    ("UNIQUE", ColumnAttr.UNIQUE),
    ("INDEX", ColumnAttr.INDEX),
)


@dataclass(frozen=True)
class ColumnDef:
    """Definition of a single persisted field of a record type."""

    name: str
    attribute: str
    declared_type: Any
    column_type: ColumnType
    attrs: ColumnAttr = ColumnAttr.NONE

    @property
    def is_primary_key(self) -> bool:
        return bool(self.attrs & ColumnAttr.PRIMARY_KEY)

    @property
    def is_key(self) -> bool:
        return bool(self.attrs & (ColumnAttr.PRIMARY_KEY | ColumnAttr.UNIQUE))

    @property
    def is_indexed(self) -> bool:
        return bool(self.attrs & ColumnAttr.INDEX)


@dataclass(frozen=True)
class TableSchema:
    """Complete table description for a record type."""

    record_type: type
    table_name: str
    columns: Tuple[ColumnDef, ...] = field(default_factory=tuple)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def primary_key(self) -> Optional[ColumnDef]:
        """First column flagged PRIMARY KEY, if any."""
        return next((c for c in self.columns if c.is_primary_key), None)

    @property
    def key_column(self) -> Optional[ColumnDef]:
        """Column an update is pinned to: the last PRIMARY KEY or UNIQUE one."""
        key = None
        for col in self.columns:
            if col.is_key:
                key = col
        return key

    @property
    def indexed_columns(self) -> List[ColumnDef]:
        return [col for col in self.columns if col.is_indexed]

    def column_for(self, name: str) -> Optional[ColumnDef]:
        return next((c for c in self.columns if c.name == name), None)


@dataclass
class FieldDescriptor:
    """Metadata and current value of one persisted field."""

    key: str
    value: Any
    declared_type: Any
    attrs: ColumnAttr = ColumnAttr.NONE
    column_type: ColumnType = ColumnType.TEXT

    @property
    def is_primary_key(self) -> bool:
        return bool(self.attrs & ColumnAttr.PRIMARY_KEY)

    @property
    def is_key(self) -> bool:
        return bool(self.attrs & (ColumnAttr.PRIMARY_KEY | ColumnAttr.UNIQUE))

    @property
    def is_indexed(self) -> bool:
        return bool(self.attrs & ColumnAttr.INDEX)


__all__ = [
    "ColumnType",
    "ColumnAttr",
    "ColumnDef",
    "TableSchema",
    "FieldDescriptor",
]
