"""
SQL module for record statement generation.

Provides the SQLite dialect, placeholder/literal utilities and the
statement builders used by the record store.
"""

from .core.parameters import build_positional_params, render_literal
from .dialects.sqlite import SQLiteDialect
from .operations.statements import (
    StatementBuilder,
    build_count_statement,
    build_delete_statement,
    build_insert_statement,
    build_select_statement,
    build_update_statement,
)

__all__ = [
    "build_positional_params",
    "render_literal",
    "SQLiteDialect",
    "StatementBuilder",
    "build_insert_statement",
    "build_update_statement",
    "build_select_statement",
    "build_count_statement",
    "build_delete_statement",
]
