"""Record decomposition into table name and field descriptors.

Accepted inputs:
- a record instance: values are read from it
- a record class: values are read from a zero-valued instance
- ``list[Record]``: resolved to the element class, no elements needed
- a non-empty list of records: resolved to the class of the first element

Example:
    >>> table, fields = decompose(TestStruct(a=1, b="b"))
    >>> table
    'teststruct'
    >>> [(f.key, f.value) for f in fields]
    [('db_a', 1), ('db_b', 'b')]
"""

from __future__ import annotations

import typing
from typing import Any, List, Tuple

from record_store.exceptions import UnsupportedTypeError

from .core import FieldDescriptor, TableSchema
from .describe import is_record_type, zero_instance
from .registry import get_table_schema


def resolve_record(value: Any) -> Tuple[type, Any]:
    """Resolve a decomposable value to ``(record_class, instance)``.

    Raises:
        UnsupportedTypeError: If the value does not resolve to a record type
    """
    if typing.get_origin(value) is list:
        args = typing.get_args(value)
        if len(args) != 1:
            raise UnsupportedTypeError("list", "element type is not declared")
        return resolve_record(args[0])

    if isinstance(value, list):
        if not value:
            raise UnsupportedTypeError(
                "list", "cannot infer element type of an empty list"
            )
        return resolve_record(type(value[0]))

    if isinstance(value, type):
        if not is_record_type(value):
            raise UnsupportedTypeError(value.__name__)
        return value, zero_instance(value)

    if is_record_type(type(value)):
        return type(value), value

    raise UnsupportedTypeError(type(value).__name__)


def describe(value: Any) -> TableSchema:
    """Table schema of whatever record type ``value`` resolves to."""
    cls, _ = resolve_record(value)
    return get_table_schema(cls)


def decompose(value: Any) -> Tuple[str, List[FieldDescriptor]]:
    """Decompose a record into its table name and field descriptors.

    Descriptors follow declared field order and capture the values held at
    call time.

    Raises:
        UnsupportedTypeError: If the value does not resolve to a record type
    """
    cls, instance = resolve_record(value)
    schema = get_table_schema(cls)
    fields = [
        FieldDescriptor(
            key=col.name,
            value=getattr(instance, col.attribute),
            declared_type=col.declared_type,
            attrs=col.attrs,
            column_type=col.column_type,
        )
        for col in schema.columns
    ]
    return schema.table_name, fields


__all__ = [
    "resolve_record",
    "describe",
    "decompose",
]
