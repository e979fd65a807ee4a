"""
SQL parameter and literal utilities.

Statements bind values positionally with qmark placeholders. The one
exception is the key of an UPDATE, which is known at synthesis time and
rendered as a literal.
"""

import math
from typing import Any, List

PLACEHOLDER = "?"


def build_positional_params(columns: List[str]) -> List[str]:
    """
    Build one positional placeholder per column.

    Examples:
        >>> build_positional_params(["db_a", "db_b"])
        ['?', '?']
    """
    return [PLACEHOLDER for _ in columns]


def quote_literal(text: str) -> str:
    """
    Quote a string literal, doubling embedded single quotes.

    Examples:
        >>> quote_literal("foo")
        "'foo'"
        >>> quote_literal("it's")
        "'it''s'"
    """
    escaped = text.replace("'", "''")
    return f"'{escaped}'"


def render_literal(value: Any) -> str:
    """
    Render a Python value as a SQL literal.

    Strings are quoted, numbers are bare, booleans become 1/0 and None
    becomes NULL. Infinite floats use the overflowing literal ``9e999`` and
    NaN becomes NULL. Anything else is quoted through its string form.

    Examples:
        >>> render_literal(1)
        '1'
        >>> render_literal("foo")
        "'foo'"
        >>> render_literal(True)
        '1'
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        # SQLite has no inf/nan literals; it reads 9e999 as infinity and stores NaN as NULL
        if math.isnan(value):
            return "NULL"
        if math.isinf(value):
            return "9e999" if value > 0 else "-9e999"
        return repr(float(value))
    if isinstance(value, str):
        return quote_literal(value)
    return quote_literal(str(value))
