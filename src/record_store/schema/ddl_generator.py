"""DDL SQL generation for record tables.

Produces the idempotent CREATE TABLE statement for a record and the
companion CREATE INDEX statements for columns flagged INDEX.
"""

from __future__ import annotations

from typing import List, Sequence

from .core import ColumnAttr, FieldDescriptor

# Only these flags are column constraints; INDEX becomes a separate statement
_CONSTRAINT_TOKENS = (
    (ColumnAttr.PRIMARY_KEY, "PRIMARY KEY"),
    (ColumnAttr.UNIQUE, "UNIQUE"),
)


def _column_constraints(attrs: ColumnAttr) -> str:
    return " ".join(token for flag, token in _CONSTRAINT_TOKENS if attrs & flag)


def _column_definition(field: FieldDescriptor) -> str:
    """Render ``<col> <type>[ <constraints>]``."""
    definition = f"{field.key} {field.column_type.value}"
    constraints = _column_constraints(field.attrs)
    if constraints:
        definition = f"{definition} {constraints}"
    return definition


def generate_create_table_ddl(table: str, fields: Sequence[FieldDescriptor]) -> str:
    """Generate the CREATE TABLE IF NOT EXISTS statement.

    Examples:
        >>> generate_create_table_ddl("teststruct", fields)
        'CREATE TABLE IF NOT EXISTS teststruct (db_a INTEGER PRIMARY KEY, db_b TEXT);'
    """
    cols = ", ".join(_column_definition(f) for f in fields)
    return f"CREATE TABLE IF NOT EXISTS {table} ({cols});"


def index_name(table: str, column: str) -> str:
    return f"{table}_{column}_idx"


def generate_indexes_ddl(table: str, fields: Sequence[FieldDescriptor]) -> List[str]:
    """Generate CREATE INDEX statements in column order."""
    sqls: List[str] = []
    for field in fields:
        if not field.is_indexed:
            continue
        sqls.append(
            f"CREATE INDEX IF NOT EXISTS {index_name(table, field.key)} "
            f"ON {table} ({field.key});"
        )
    return sqls


__all__ = [
    "generate_create_table_ddl",
    "generate_indexes_ddl",
    "index_name",
]
