"""
Record store package.

This package provides the RecordStore class, the CRUD surface over a single
SQLite database, guarded by a reader/writer lock.
"""

from .core import IN_MEMORY, RecordStore
from .locks import ReadWriteLock
from .models import ExecResult

__all__ = [
    "IN_MEMORY",
    "RecordStore",
    "ReadWriteLock",
    "ExecResult",
]
