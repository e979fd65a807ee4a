"""
SQL DML statement builders.

Turns a table name and its field descriptors into statement text plus the
ordered bind values that go with it.
"""

from typing import Any, List, Optional, Protocol, Sequence, Tuple

from record_store.exceptions import MissingKeyColumnError
from record_store.schema.core import FieldDescriptor

from ..core.parameters import build_positional_params, render_literal
from ..dialects.sqlite import SQLiteDialect

Statement = Tuple[str, List[Any]]


class Dialect(Protocol):
    """Protocol for SQL dialects."""

    name: str

    def build_insert(self, table: str, columns: List[str], placeholders: List[str]) -> str: ...
    def build_update(
        self, table: str, set_columns: List[str], key_column: str, key_literal: str, where: str = ""
    ) -> str: ...
    def build_select(self, table: str, columns: List[str], where: str = "") -> str: ...
    def build_count(self, table: str, where: str = "") -> str: ...
    def build_delete(self, table: str, where: str = "") -> str: ...


class StatementBuilder:
    """
    High-level builder for record statements.

    Example:
        >>> builder = StatementBuilder()
        >>> sql, params = builder.insert("teststruct", fields)
        >>> print(sql)
        INSERT INTO teststruct (db_b) VALUES (?);
        >>> params
        ['b']
    """

    def __init__(self, dialect: Optional[Dialect] = None):
        self.dialect = dialect or SQLiteDialect()

    def insert(self, table: str, fields: Sequence[FieldDescriptor]) -> Statement:
        """
        Build an INSERT for every non primary key column.

        Primary key columns are left to the database to generate.

        Returns:
            Tuple of (sql_string, parameters) with parameters in column order
        """
        columns: List[str] = []
        params: List[Any] = []
        for field in fields:
            if field.is_primary_key:
                continue
            columns.append(field.key)
            params.append(field.value)
        sql = self.dialect.build_insert(table, columns, build_positional_params(columns))
        return sql, params

    def update(
        self,
        table: str,
        fields: Sequence[FieldDescriptor],
        where: str = "",
        args: Sequence[Any] = (),
    ) -> Statement:
        """
        Build an UPDATE pinned to the record's key value.

        The key is the last field flagged PRIMARY KEY or UNIQUE; all other
        fields are assigned. Caller arguments follow the SET values.

        Raises:
            MissingKeyColumnError: If no field is flagged PRIMARY KEY or UNIQUE
        """
        key: Optional[FieldDescriptor] = None
        set_columns: List[str] = []
        params: List[Any] = []
        for field in fields:
            if field.is_key:
                key = field
            else:
                set_columns.append(field.key)
                params.append(field.value)
        if key is None:
            raise MissingKeyColumnError(table)

        sql = self.dialect.build_update(
            table, set_columns, key.key, render_literal(key.value), where
        )
        params.extend(args)
        return sql, params

    def select(self, table: str, fields: Sequence[FieldDescriptor], where: str = "") -> str:
        """Build a SELECT over all field columns in declared order."""
        return self.dialect.build_select(table, [f.key for f in fields], where)

    def count(self, table: str, where: str = "") -> str:
        return self.dialect.build_count(table, where)

    def delete(self, table: str, where: str = "") -> str:
        return self.dialect.build_delete(table, where)


_default_builder = StatementBuilder()


def build_insert_statement(table: str, fields: Sequence[FieldDescriptor]) -> Statement:
    return _default_builder.insert(table, fields)


def build_update_statement(
    table: str,
    fields: Sequence[FieldDescriptor],
    where: str = "",
    args: Sequence[Any] = (),
) -> Statement:
    return _default_builder.update(table, fields, where, args)


def build_select_statement(table: str, fields: Sequence[FieldDescriptor], where: str = "") -> str:
    return _default_builder.select(table, fields, where)


def build_count_statement(table: str, where: str = "") -> str:
    return _default_builder.count(table, where)


def build_delete_statement(table: str, where: str = "") -> str:
    return _default_builder.delete(table, where)
