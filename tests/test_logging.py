"""
Structured logging tests.
"""

import logging

import pytest

from docstore.util.logging import StructuredLogger, sanitize_payload


@pytest.fixture
def structured(caplog):
    structured = StructuredLogger("docstore.test")
    caplog.set_level(logging.DEBUG, logger="docstore.test")
    return structured


def test_log_operation_format(structured, caplog):
    structured.log_operation("collection.insert", "success", {"collection": "people"})

    assert "Operation: collection.insert, Status: success, Details: {'collection': 'people'}" in caplog.text


def test_failure_statuses_log_as_errors(structured, caplog):
    structured.log_provisioning("people", "failed", {"error": "permission denied"})

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "collection.provision" in record.getMessage()


def test_empty_update_logs_warning(structured, caplog):
    structured.log_collection_operation("update", "people", "empty", {"id": 4})

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert "'id': 4" in record.getMessage()


def test_read_recovery_is_debug(structured, caplog):
    structured.log_read_recovery("all", "ghosts")

    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert "ghosts" in record.getMessage()


def test_statements_logged_only_when_enabled(structured, caplog, monkeypatch):
    monkeypatch.setenv("DOCSTORE_LOG_STATEMENTS", "false")
    structured.log_statement("select 1", [])
    assert "Statement:" not in caplog.text

    monkeypatch.setenv("DOCSTORE_LOG_STATEMENTS", "true")
    structured.log_statement("select   id\n from \"people\"", [7])
    assert 'Statement: select id from "people", Params: [7]' in caplog.text


def test_sanitize_payload_truncates_and_redacts():
    payload = {"body": "x" * 150, "password": "hunter2", "nested": [{"token": "abc"}]}

    sanitized = sanitize_payload(payload)

    assert sanitized["body"] == "x" * 100 + "..."
    assert sanitized["password"] == "[REDACTED]"
    assert sanitized["nested"] == [{"token": "[REDACTED]"}]
