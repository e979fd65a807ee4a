"""
Exception hierarchy for the record store.

This module defines the errors raised while decomposing record types,
synthesizing statements and executing them against the database. Engine
errors that are not listed here pass through unchanged.
"""

from typing import Any, Optional, Sequence


class RecordStoreError(Exception):
    """Base exception for all record store errors."""

    pass


class UnsupportedTypeError(RecordStoreError):
    """
    Raised when a value cannot be decomposed into a table.

    Args:
        kind: Name of the underlying type that was rejected
        reason: Optional extra detail
    """

    def __init__(self, kind: str, reason: Optional[str] = None):
        self.kind = kind
        message = f"type {kind} not supported"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedColumnTypeError(RecordStoreError):
    """Raised when a persisted field has no column type mapping."""

    def __init__(self, field_name: str, declared_type: Any):
        self.field_name = field_name
        self.declared_type = declared_type
        type_name = getattr(declared_type, "__name__", repr(declared_type))
        super().__init__(
            f"field '{field_name}' has unsupported column type {type_name}"
        )


class MissingKeyColumnError(RecordStoreError):
    """Raised when an update is requested for a record without a key column."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(
            f"table '{table}' has no PRIMARY KEY or UNIQUE column to update by"
        )


def _context_message(
    message: str,
    table: Optional[str],
    where: Optional[str],
    args: Optional[Sequence[Any]],
) -> str:
    context_parts = []
    if table:
        context_parts.append(f"table='{table}'")
    if where:
        context_parts.append(f"where='{where}'")
    if args:
        context_parts.append(f"args={list(args)!r}")

    if context_parts:
        return f"{message} ({', '.join(context_parts)})"
    return message


class AmbiguousUpsertTargetError(RecordStoreError):
    """
    Raised when an upsert predicate matches more than one row.

    Args:
        table: Target table
        where: Caller WHERE fragment
        count: Number of rows the fragment matched
    """

    def __init__(self, table: str, where: str, count: int):
        self.table = table
        self.where = where
        self.count = count
        super().__init__(
            _context_message(
                f"upsert err: {count} existing records", table, where, None
            )
        )


class QueryError(RecordStoreError):
    """
    Raised when the database rejects a statement issued by the store.

    The original engine error is chained as ``__cause__``.

    Args:
        message: Error description
        table: Table the statement targeted (optional)
        where: Caller WHERE fragment (optional)
        args: Bind arguments supplied with the fragment (optional)
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        where: Optional[str] = None,
        args: Optional[Sequence[Any]] = None,
    ):
        self.table = table
        self.where = where
        self.bind_args = tuple(args or ())
        super().__init__(_context_message(message, table, where, args))


class RecordNotFoundError(QueryError):
    """Raised when a single-row read matches no row."""

    def __init__(
        self,
        table: str,
        where: Optional[str] = None,
        args: Optional[Sequence[Any]] = None,
    ):
        super().__init__(f"get {table} not found", table, where, args)
