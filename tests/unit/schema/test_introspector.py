"""
Unit tests for record decomposition and type-level schema description.
"""

from typing import List, Optional

import pytest

from record_store.exceptions import UnsupportedColumnTypeError, UnsupportedTypeError
from record_store.schema import ColumnAttr, ColumnType, decompose, get_table_schema
from record_store.schema.describe import column_type_for, zero_instance, zero_value
from record_store.schema.introspector import resolve_record

from tests.deferred_records import PersistedUnresolved, WithHelper
from tests.records import (
    Account,
    Blob,
    Empty,
    IndexedStruct,
    KeyValue,
    Measurement,
    Sensor,
    TestStruct,
)

pytestmark = pytest.mark.unit


class TestDecompose:
    """Tests for decompose()."""

    def test_instance_values_in_declared_order(self):
        """Descriptors follow field declaration order and carry current values."""
        table, fields = decompose(TestStruct(a=1, b="b"))

        assert table == "teststruct"
        assert [f.key for f in fields] == ["db_a", "db_b"]
        assert [f.value for f in fields] == [1, "b"]
        assert [f.declared_type for f in fields] == [int, str]

    def test_attributes_become_flags(self):
        """The 'PRIMARY KEY' annotation string is parsed into flags."""
        _, fields = decompose(TestStruct())

        assert fields[0].attrs == ColumnAttr.PRIMARY_KEY
        assert fields[0].is_primary_key
        assert fields[1].attrs == ColumnAttr.NONE

    def test_class_uses_zero_values(self):
        """A record class decomposes through a zero-valued instance."""
        table, fields = decompose(Measurement)

        assert table == "measurement"
        assert [(f.key, f.value) for f in fields] == [
            ("label", ""),
            ("n", 0),
            ("ratio", None),
        ]

    def test_list_alias_resolves_element_type(self):
        """list[Record] resolves to the element type without any elements."""
        table, fields = decompose(List[KeyValue])

        assert table == "keyvalue"
        assert [f.key for f in fields] == ["_key", "value", "updated_at"]

    def test_builtin_list_alias(self):
        """PEP 585 list aliases resolve the same way."""
        table, _ = decompose(list[KeyValue])
        assert table == "keyvalue"

    def test_non_empty_list_uses_first_element_type(self):
        """A list of records resolves to its element type, not its values."""
        table, fields = decompose([KeyValue(key="foo", value="bar")])

        assert table == "keyvalue"
        assert fields[0].value == ""

    def test_unannotated_fields_are_skipped(self):
        """Fields without a column name, or named '-', are left out."""
        _, fields = decompose(Sensor(note="x", hidden="y"))

        assert [f.key for f in fields] == ["id", "name", "reading", "active"]

    def test_no_persisted_fields(self):
        """A record with no annotated fields yields an empty descriptor list."""
        table, fields = decompose(Empty())

        assert table == "empty"
        assert fields == []

    def test_pydantic_model(self):
        """Pydantic models are described through json_schema_extra."""
        table, fields = decompose(Account(id=3, owner="ann", balance=1.5))

        assert table == "account"
        assert [(f.key, f.value) for f in fields] == [
            ("id", 3),
            ("owner", "ann"),
            ("balance", 1.5),
        ]
        assert fields[0].is_primary_key
        assert fields[1].attrs == ColumnAttr.UNIQUE

    def test_repeated_calls_are_stable(self):
        """Equal inputs decompose identically; distinct instances differ only in values."""
        first = decompose(TestStruct(a=1, b="b"))
        second = decompose(TestStruct(a=1, b="b"))
        other = decompose(TestStruct(a=2, b="c"))

        assert first == second
        assert [(f.key, f.declared_type, f.attrs) for f in first[1]] == [
            (f.key, f.declared_type, f.attrs) for f in other[1]
        ]
        assert [f.value for f in other[1]] == [2, "c"]

    def test_values_are_captured_at_call_time(self):
        """Mutating the record afterwards does not change built descriptors."""
        record = TestStruct(a=1, b="b")
        _, fields = decompose(record)
        record.b = "changed"

        assert fields[1].value == "b"

    @pytest.mark.parametrize(
        "value, kind",
        [
            (42, "int"),
            ("teststruct", "str"),
            ({"db_a": 1}, "dict"),
            (object(), "object"),
            (int, "int"),
        ],
    )
    def test_unsupported_roots(self, value, kind):
        """Values that are not records raise UnsupportedTypeError naming the kind."""
        with pytest.raises(UnsupportedTypeError) as exc_info:
            decompose(value)

        assert exc_info.value.kind == kind
        assert kind in str(exc_info.value)

    def test_empty_list_is_rejected(self):
        """An empty list gives no element type to resolve."""
        with pytest.raises(UnsupportedTypeError, match="empty list"):
            decompose([])

    def test_plain_class_is_rejected(self):
        """Classes that are neither dataclasses nor pydantic models are rejected."""

        class NotARecord:
            a = 1

        with pytest.raises(UnsupportedTypeError):
            decompose(NotARecord())


class TestResolveRecord:
    """Tests for resolve_record()."""

    def test_instance_is_returned_as_is(self):
        record = TestStruct(a=5)
        cls, instance = resolve_record(record)

        assert cls is TestStruct
        assert instance is record

    def test_class_gets_fresh_instance(self):
        cls, instance = resolve_record(TestStruct)

        assert cls is TestStruct
        assert instance == TestStruct(a=0, b="")


class TestTableSchema:
    """Tests for the cached type-level schema."""

    def test_schema_is_built_once(self):
        """The same schema object is returned for every lookup."""
        assert get_table_schema(TestStruct) is get_table_schema(TestStruct)

    def test_key_column_is_last_key_flag(self):
        """Update key resolution takes the last PRIMARY KEY or UNIQUE column."""
        schema = get_table_schema(Sensor)

        assert schema.primary_key.name == "id"
        assert schema.key_column.name == "name"

    def test_indexed_columns(self):
        schema = get_table_schema(IndexedStruct)
        assert [c.name for c in schema.indexed_columns] == ["value2"]

    def test_unsupported_column_type_fails_closed(self):
        """A persisted field with no column type mapping is rejected."""
        with pytest.raises(UnsupportedColumnTypeError) as exc_info:
            get_table_schema(Blob)

        assert exc_info.value.field_name == "data"
        assert "bytes" in str(exc_info.value)

    def test_unresolvable_helper_field_ignored(self):
        """An unpersisted field typed under TYPE_CHECKING does not hide the others."""
        schema = get_table_schema(WithHelper)

        assert [(c.name, c.column_type) for c in schema.columns] == [
            ("a", ColumnType.INTEGER),
            ("b", ColumnType.TEXT),
        ]
        assert decompose(WithHelper(a=1, b="x"))[0] == "withhelper"

    def test_unresolvable_persisted_field_rejected(self):
        with pytest.raises(UnsupportedColumnTypeError) as exc_info:
            get_table_schema(PersistedUnresolved)

        assert exc_info.value.field_name == "amount"


class TestColumnTypeFor:
    """Tests for the declared type to column type mapping."""

    @pytest.mark.parametrize(
        "declared, expected",
        [
            (bool, ColumnType.BOOLEAN),
            (float, ColumnType.REAL),
            (int, ColumnType.INTEGER),
            (str, ColumnType.TEXT),
            (Optional[int], ColumnType.INTEGER),
            (Optional[bool], ColumnType.BOOLEAN),
            (float | None, ColumnType.REAL),
        ],
    )
    def test_supported(self, declared, expected):
        assert column_type_for("f", declared) is expected

    @pytest.mark.parametrize("declared", [bytes, list, dict, Optional[bytes]])
    def test_unsupported(self, declared):
        with pytest.raises(UnsupportedColumnTypeError):
            column_type_for("f", declared)


class TestZeroValues:
    """Tests for zero value construction."""

    @pytest.mark.parametrize(
        "declared, expected",
        [(bool, False), (int, 0), (float, 0.0), (str, ""), (Optional[int], None), (bytes, None)],
    )
    def test_zero_value(self, declared, expected):
        assert zero_value(declared) == expected

    def test_zero_instance_keeps_defaults(self):
        assert zero_instance(KeyValue) == KeyValue()

    def test_zero_instance_for_pydantic(self):
        account = zero_instance(Account)

        assert account.id == 0
        assert account.owner == ""
