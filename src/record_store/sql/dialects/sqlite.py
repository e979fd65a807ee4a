"""
SQLite SQL dialect implementation.

Renders DML statement text. Identifiers are emitted as given and WHERE
fragments are concatenated verbatim; callers keep variable parts behind
``?`` placeholders.
"""

from typing import List

from ..core.parameters import PLACEHOLDER


class SQLiteDialect:
    """SQLite SQL dialect implementation."""

    name = "sqlite"
    placeholder = PLACEHOLDER

    def where_clause(self, where: str) -> str:
        """Render `` WHERE <fragment>``, or nothing for a blank fragment."""
        if not where or not where.strip():
            return ""
        return f" WHERE {where}"

    def build_insert(
        self,
        table: str,
        columns: List[str],
        placeholders: List[str],
    ) -> str:
        """
        Build a simple INSERT statement.

        Args:
            table: Table name
            columns: List of column names
            placeholders: List of parameter placeholders

        Returns:
            INSERT SQL statement
        """
        cols = ", ".join(columns)
        values = ", ".join(placeholders)
        return f"INSERT INTO {table} ({cols}) VALUES ({values});"

    def build_update(
        self,
        table: str,
        set_columns: List[str],
        key_column: str,
        key_literal: str,
        where: str = "",
    ) -> str:
        """
        Build an UPDATE pinned to one key value.

        Args:
            table: Table name
            set_columns: Columns assigned from positional parameters
            key_column: Column identifying the row
            key_literal: Rendered key value, or ``NULL``
            where: Extra caller fragment, ANDed with the key condition

        Returns:
            UPDATE SQL statement
        """
        assignments = ", ".join(f"{col} = {self.placeholder}" for col in set_columns)
        if key_literal == "NULL":
            condition = f"{key_column} IS NULL"
        else:
            condition = f"{key_column} = {key_literal}"
        if where and where.strip():
            condition = f"{condition} AND ({where})"
        return f"UPDATE {table} SET {assignments} WHERE {condition};"

    def build_select(self, table: str, columns: List[str], where: str = "") -> str:
        """Build a SELECT over an explicit column list."""
        cols = ",".join(columns)
        return f"SELECT {cols} FROM {table}{self.where_clause(where)};"

    def build_count(self, table: str, where: str = "") -> str:
        """Build a row count query."""
        return f"SELECT COUNT(1) FROM {table}{self.where_clause(where)};"

    def build_delete(self, table: str, where: str = "") -> str:
        """Build a DELETE statement."""
        return f"DELETE FROM {table}{self.where_clause(where)};"
