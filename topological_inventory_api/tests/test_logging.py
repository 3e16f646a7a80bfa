from __future__ import annotations

import logging

import pytest

from src.core.logging import (
    LoggingContextFilter,
    configure_logging,
    request_id_var,
    tenant_var,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def make_record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


def test_filter_uses_placeholders_outside_requests():
    record = make_record()
    assert LoggingContextFilter().filter(record)
    assert (record.request_id, record.tenant) == ("-", "-")


def test_filter_tags_records_with_request_context():
    request_token = request_id_var.set("req-1")
    tenant_token = tenant_var.set("0000001")
    try:
        record = make_record()
        LoggingContextFilter().filter(record)
    finally:
        request_id_var.reset(request_token)
        tenant_var.reset(tenant_token)
    assert (record.request_id, record.tenant) == ("req-1", "0000001")


def test_configure_logging_replaces_handlers(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    configure_logging()
    configure_logging()
    root = restore_root_logger
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert logging.getLogger("aiokafka").level == logging.WARNING


def test_unknown_level_name_falls_back_to_info(restore_root_logger):
    configure_logging("chatty")
    assert restore_root_logger.level == logging.INFO
