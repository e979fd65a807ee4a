"""Type-level description of record types.

Walks the declared fields of a dataclass or pydantic model, keeps those
carrying a column annotation, and maps their declared types onto SQLite
column types.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import types
import typing
from typing import Any, Iterator, Optional, Tuple

from pydantic import BaseModel

from record_store.exceptions import UnsupportedColumnTypeError, UnsupportedTypeError

from .core import ColumnDef, ColumnType, TableSchema
from .fields import read_annotation

_NONE_TYPE = type(None)


def is_record_type(obj: Any) -> bool:
    """True for dataclass classes and pydantic model classes."""
    if not isinstance(obj, type):
        return False
    return dataclasses.is_dataclass(obj) or issubclass(obj, BaseModel)


def _optional_inner(declared_type: Any) -> Optional[Any]:
    """Return ``X`` for ``Optional[X]`` / ``X | None``, otherwise None."""
    origin = typing.get_origin(declared_type)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(declared_type) if a is not _NONE_TYPE]
        if len(args) == 1 and len(typing.get_args(declared_type)) == 2:
            return args[0]
    return None


def resolve_declared_type(declared_type: Any) -> Any:
    """Resolve optional wrappers down to the underlying type."""
    inner = _optional_inner(declared_type)
    while inner is not None:
        declared_type = inner
        inner = _optional_inner(declared_type)
    return declared_type


def column_type_for(field_name: str, declared_type: Any) -> ColumnType:
    """Map a declared field type to its column type.

    ``bool`` is checked before ``int`` since it subclasses it.

    Raises:
        UnsupportedColumnTypeError: For types outside the mapping
    """
    base = resolve_declared_type(declared_type)
    if isinstance(base, type):
        if issubclass(base, bool):
            return ColumnType.BOOLEAN
        if issubclass(base, float):
            return ColumnType.REAL
        if issubclass(base, int):
            return ColumnType.INTEGER
        if issubclass(base, str):
            return ColumnType.TEXT
    raise UnsupportedColumnTypeError(field_name, declared_type)


def _dataclass_hints(cls: type) -> dict:
    """Resolved annotations of a dataclass.

    ``typing.get_type_hints`` fails for the whole class when any one
    annotation cannot be resolved, e.g. a helper field typed with a name
    imported under ``TYPE_CHECKING``. Annotations are then resolved one by
    one; those that still fail stay strings and are only rejected if the
    field is persisted.
    """
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        pass

    hints: dict = {}
    localns = dict(vars(cls))
    for klass in reversed(cls.__mro__):
        module = sys.modules.get(klass.__module__)
        globalns = vars(module) if module is not None else {}
        for name, annotation in inspect.get_annotations(klass).items():
            hints[name] = _resolve_annotation(annotation, globalns, localns)
    return hints


def _resolve_annotation(annotation: Any, globalns: dict, localns: dict) -> Any:
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)
    except (NameError, AttributeError, SyntaxError, TypeError):
        return annotation


def iter_annotated_fields(cls: type) -> Iterator[Tuple[str, Any, Any]]:
    """Yield ``(attribute, declared_type, metadata)`` in declared order."""
    if dataclasses.is_dataclass(cls):
        hints = _dataclass_hints(cls)
        for f in dataclasses.fields(cls):
            yield f.name, hints.get(f.name, f.type), f.metadata
    elif issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else None
            yield name, info.annotation, extra
    else:
        raise UnsupportedTypeError(cls.__name__, "not a dataclass or pydantic model")


def build_table_schema(cls: type) -> TableSchema:
    """Describe a record type as a table.

    Fields without a column annotation are skipped silently.

    Raises:
        UnsupportedTypeError: If ``cls`` is not a record type
        UnsupportedColumnTypeError: If a persisted field has no column type
    """
    if not is_record_type(cls):
        kind = cls.__name__ if isinstance(cls, type) else type(cls).__name__
        raise UnsupportedTypeError(kind)

    columns = []
    for attribute, declared_type, metadata in iter_annotated_fields(cls):
        annotation = read_annotation(metadata)
        if annotation is None:
            continue
        name, attrs = annotation
        columns.append(
            ColumnDef(
                name=name,
                attribute=attribute,
                declared_type=declared_type,
                column_type=column_type_for(attribute, declared_type),
                attrs=attrs,
            )
        )
    return TableSchema(
        record_type=cls, table_name=cls.__name__.lower(), columns=tuple(columns)
    )


def zero_value(declared_type: Any) -> Any:
    """Zero value of a declared type: ``False``, ``0``, ``0.0``, ``""`` or None."""
    if _optional_inner(declared_type) is not None:
        return None
    if declared_type in (bool, int, float, str):
        return declared_type()
    return None


def zero_instance(cls: type) -> Any:
    """Build an instance without caller data.

    Declared defaults are honoured; required fields get their zero value.
    """
    if dataclasses.is_dataclass(cls):
        hints = _dataclass_hints(cls)
        kwargs = {
            f.name: zero_value(hints.get(f.name, f.type))
            for f in dataclasses.fields(cls)
            if f.init
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        }
        return cls(**kwargs)
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        kwargs = {
            name: zero_value(info.annotation)
            for name, info in cls.model_fields.items()
            if info.is_required()
        }
        return cls.model_construct(**kwargs)
    raise UnsupportedTypeError(getattr(cls, "__name__", type(cls).__name__))


__all__ = [
    "is_record_type",
    "resolve_declared_type",
    "column_type_for",
    "iter_annotated_fields",
    "build_table_schema",
    "zero_value",
    "zero_instance",
]
