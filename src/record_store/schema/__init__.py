"""Record type schema description and introspection.

Modules:
- core.py: Type definitions (ColumnType, ColumnAttr, ColumnDef, TableSchema, FieldDescriptor)
- fields.py: Column annotation helpers
- describe.py: Type-level field walking and column type mapping
- registry.py: Per-type schema cache
- introspector.py: Record decomposition
- ddl_generator.py: CREATE TABLE / CREATE INDEX generation
"""

from .core import ColumnAttr, ColumnDef, ColumnType, FieldDescriptor, TableSchema
from .ddl_generator import generate_create_table_ddl, generate_indexes_ddl
from .describe import column_type_for, zero_instance
from .fields import column, model_column
from .introspector import decompose, describe, resolve_record
from .registry import get_table_schema, list_tables, register_record

__all__ = [
    "ColumnType",
    "ColumnAttr",
    "ColumnDef",
    "TableSchema",
    "FieldDescriptor",
    "column",
    "model_column",
    "column_type_for",
    "zero_instance",
    "register_record",
    "get_table_schema",
    "list_tables",
    "decompose",
    "describe",
    "resolve_record",
    "generate_create_table_ddl",
    "generate_indexes_ddl",
]
