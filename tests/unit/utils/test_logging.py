"""Unit tests for the structured logging framework.

Tests cover:
- get_logger returns a structlog logger with its name preserved
- JSON output carries timestamp, level, logger and event
- Sensitive fields are redacted
- Context binding
"""

import json
import logging
from datetime import date
from pathlib import Path

import pytest

from record_store.utils.logging import (
    bind_context,
    get_logger,
    is_sensitive_key,
    log_file_path,
    sanitization_processor,
    sanitize_for_logging,
)


@pytest.mark.unit
def test_get_logger_supports_binding() -> None:
    logger = get_logger("record_store.store.core")

    assert hasattr(logger, "bind")
    assert hasattr(logger, "info")
    assert hasattr(logger, "error")


@pytest.mark.unit
def test_logger_name_in_output(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    logger = get_logger("record_store.schema")
    logger.info("record_store.opened", database=":memory:")

    assert caplog.records
    log_data = json.loads(caplog.records[-1].message)
    assert log_data["logger"] == "record_store.schema"
    assert log_data["database"] == ":memory:"


@pytest.mark.unit
def test_event_rendered_as_json(caplog: pytest.LogCaptureFixture) -> None:
    """JSON output contains timestamp, level, logger and event."""
    caplog.set_level(logging.INFO)

    get_logger("structure_test").info("record_store.table.created", table="teststruct")

    log_data = json.loads(caplog.records[-1].message)
    assert log_data["event"] == "record_store.table.created"
    assert log_data["level"] == "info"
    assert log_data["table"] == "teststruct"
    assert "timestamp" in log_data


@pytest.mark.unit
@pytest.mark.parametrize(
    "key",
    ["password", "db_password", "access_token", "client_secret", "DATABASE_URL", "database_url"],
)
def test_sanitize_for_logging_redacts(key: str) -> None:
    sanitized = sanitize_for_logging({key: "sensitive", "user": "admin"})

    assert sanitized[key] == "[REDACTED]"
    assert sanitized["user"] == "admin"


@pytest.mark.unit
def test_nested_values_redacted() -> None:
    data = {"user": "admin", "auth": {"password": "secret123", "token": "abc123"}}
    sanitized = sanitize_for_logging(data)

    assert sanitized["user"] == "admin"
    assert sanitized["auth"]["password"] == "[REDACTED]"
    assert sanitized["auth"]["token"] == "[REDACTED]"


@pytest.mark.unit
def test_sanitize_does_not_mutate_input() -> None:
    data = {"password": "secret123"}
    sanitize_for_logging(data)

    assert data["password"] == "secret123"


@pytest.mark.unit
def test_sanitization_processor() -> None:
    event = sanitization_processor(
        logging.getLogger("x"), "info", {"event": "e", "database_url": "sqlite:///a.db"}
    )

    assert event == {"event": "e", "database_url": "[REDACTED]"}


@pytest.mark.unit
def test_sensitive_field_redacted_in_output(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    get_logger("redaction_test").info("connect", password="hunter2")

    log_data = json.loads(caplog.records[-1].message)
    assert log_data["password"] == "[REDACTED]"


@pytest.mark.unit
def test_bound_context_on_every_event(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    logger = bind_context(table="keyvalue", operation="upsert")
    logger.info("record_store.upsert.inserted", row_id=1)
    logger.debug("record_store.upsert.updated")

    assert len(caplog.records) >= 2
    for record in caplog.records[-2:]:
        log_data = json.loads(record.message)
        assert log_data.get("table") == "keyvalue"
        assert log_data.get("operation") == "upsert"


@pytest.mark.unit
@pytest.mark.parametrize("key", ["table", "row_count", "database", "where"])
def test_store_event_fields_not_sensitive(key: str) -> None:
    assert not is_sensitive_key(key)


@pytest.mark.unit
def test_log_file_path_is_daily() -> None:
    path = log_file_path(Path("logs"), date(2024, 1, 31))

    assert path == Path("logs") / "record-store-20240131.log"
