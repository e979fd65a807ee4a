"""Field annotation helpers.

A record field is persisted when its metadata carries a ``"db"`` entry
naming the column. An optional ``"attr"`` entry marks key, uniqueness and
index status, either as ``ColumnAttr`` flags or as a token string such as
``"PRIMARY KEY"``.

Example:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class User:
    ...     id: int = column("id", primary_key=True, default=0)
    ...     email: str = column("email", unique=True, default="")
    ...     nickname: str = ""  # not persisted
"""

import dataclasses
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import Field

from .core import ColumnAttr

DB_KEY = "db"
ATTR_KEY = "attr"
SKIP_NAME = "-"


def _build_attrs(
    attr: Union[ColumnAttr, str, None],
    primary_key: bool,
    unique: bool,
    index: bool,
) -> ColumnAttr:
    attrs = attr if isinstance(attr, ColumnAttr) else ColumnAttr.parse(attr)
    if primary_key:
        attrs |= ColumnAttr.PRIMARY_KEY
    if unique:
        attrs |= ColumnAttr.UNIQUE
    if index:
        attrs |= ColumnAttr.INDEX
    return attrs


def column(
    name: str,
    attr: Union[ColumnAttr, str, None] = None,
    *,
    primary_key: bool = False,
    unique: bool = False,
    index: bool = False,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare a persisted dataclass field.

    Args:
        name: Column name
        attr: Attribute flags or token string
        primary_key: Mark as PRIMARY KEY (excluded from inserts)
        unique: Mark as UNIQUE
        index: Create a companion index
        default: Field default
        default_factory: Field default factory

    Returns:
        A ``dataclasses.field`` carrying the column metadata
    """
    metadata = {DB_KEY: name, ATTR_KEY: _build_attrs(attr, primary_key, unique, index)}
    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata
    )


def model_column(
    name: str,
    attr: Union[ColumnAttr, str, None] = None,
    *,
    primary_key: bool = False,
    unique: bool = False,
    index: bool = False,
    **field_kwargs: Any,
) -> Any:
    """Declare a persisted pydantic model field.

    The column metadata is stored in ``json_schema_extra``; remaining keyword
    arguments are passed to ``pydantic.Field``.
    """
    attrs = _build_attrs(attr, primary_key, unique, index)
    # Flags are not JSON serialisable, store the token form
    extra = {DB_KEY: name, ATTR_KEY: format_attrs(attrs)}
    return Field(json_schema_extra=extra, **field_kwargs)


def format_attrs(attrs: ColumnAttr) -> str:
    """Render flags in token form, e.g. ``"PRIMARY KEY UNIQUE"``."""
    tokens = []
    if attrs & ColumnAttr.PRIMARY_KEY:
        tokens.append("PRIMARY KEY")
    if attrs & ColumnAttr.UNIQUE:
        tokens.append("UNIQUE")
    if attrs & ColumnAttr.INDEX:
        tokens.append("INDEX")
    return " ".join(tokens)


def read_annotation(metadata: Optional[Mapping[str, Any]]) -> Optional[Tuple[str, ColumnAttr]]:
    """Extract ``(column_name, attrs)`` from field metadata.

    Returns None when the field is not persisted.
    """
    if not metadata:
        return None
    name = metadata.get(DB_KEY)
    if not name or name == SKIP_NAME:
        return None
    attr = metadata.get(ATTR_KEY)
    attrs = attr if isinstance(attr, ColumnAttr) else ColumnAttr.parse(attr)
    return str(name), attrs


__all__ = [
    "column",
    "model_column",
    "format_attrs",
    "read_annotation",
]
