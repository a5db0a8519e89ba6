"""
Name: Logging and Metrics Tests

Responsibilities:
  - JSON log lines carry the request/job context and redact secrets
  - Text log lines end with the audit context tags
  - Prometheus counters are exposed on the metrics payload
"""

import json
import logging

import pytest

from catalog.context import set_request_context
from catalog.crosscutting.logger import AuditTextFormatter, JSONFormatter
from catalog.crosscutting.metrics import (
    get_metrics_response,
    record_audit_captured,
    record_integration_event,
    record_worker_processed,
)

pytestmark = pytest.mark.unit


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="catalog",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context_and_extra():
    set_request_context(request_id="job-1", origin="WORKER")

    line = JSONFormatter().format(_record("Audit job started", plate_id="p-1"))
    payload = json.loads(line)

    assert payload["message"] == "Audit job started"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "job-1"
    assert payload["origin"] == "WORKER"
    assert payload["plate_id"] == "p-1"


def test_json_formatter_redacts_secrets():
    line = JSONFormatter().format(
        _record("Connecting", redis_url="redis://:pw@host", config={"password": "x"})
    )
    payload = json.loads(line)

    assert payload["redis_url"] == "***REDACTED***"
    assert payload["config"] == {"password": "***REDACTED***"}


def test_json_formatter_serializes_exceptions():
    try:
        raise ValueError("bad payload")
    except ValueError:
        import sys

        record = _record("Failed")
        record.exc_info = sys.exc_info()

    payload = json.loads(JSONFormatter().format(record))

    assert payload["exception"]["type"] == "ValueError"
    assert payload["exception"]["message"] == "bad payload"


def test_text_formatter_appends_audit_tags():
    line = AuditTextFormatter().format(
        _record("Audit event captured", transaction_id="t-1", plate_id="p-1", items=2)
    )

    assert line == "INFO catalog Audit event captured [transaction_id=t-1 plate_id=p-1]"


def test_text_formatter_without_audit_context():
    assert AuditTextFormatter().format(_record("Worker ready")) == "INFO catalog Worker ready"


def test_metrics_payload_exposes_audit_counters():
    record_audit_captured("PlateSold")
    record_worker_processed("PERSISTED")

    body, content_type = get_metrics_response()
    text = body.decode("utf-8")

    assert content_type.startswith("text/plain")
    assert 'catalog_audit_items_captured_total{action="PlateSold"}' in text
    assert 'catalog_audit_worker_processed_total{status="PERSISTED"}' in text


def test_integration_event_counter_is_exposed():
    record_integration_event("PlateSold", "ENQUEUED")

    body, _ = get_metrics_response()

    assert (
        'catalog_integration_events_total{event_type="PlateSold",outcome="ENQUEUED"}'
        in body.decode("utf-8")
    )
