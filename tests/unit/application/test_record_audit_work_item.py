"""
Name: Record Audit Work Item Use Case Tests

Responsibilities:
  - One event with N change rows per work item
  - Redelivery of the same item is a no-op
  - Persistence failures are logged and re-raised (the broker retries)
  - Remaining job time becomes a statement timeout
"""

from datetime import datetime, timezone
from unittest.mock import Mock, patch
from uuid import uuid4

import pytest

from catalog.application.usecases.audit import RecordAuditWorkItemUseCase
from catalog.domain.audit import AuditAction, AuditWorkItem, FieldChange
from catalog.domain.repositories import AuditLogRepository

pytestmark = pytest.mark.unit


def _item(changes=None) -> AuditWorkItem:
    return AuditWorkItem(
        plate_id=uuid4(),
        user_id=uuid4(),
        timestamp_utc=datetime(2026, 1, 17, 10, 30, tzinfo=timezone.utc),
        status=AuditAction.PLATE_SOLD,
        changes=changes
        or (
            FieldChange("Status", "Reserved", "Sold"),
            FieldChange("SoldDate", None, "2026-01-17T10:30:00+00:00"),
            FieldChange("SoldPrice", None, "120.00"),
        ),
    )


def test_records_one_event_with_all_changes(audit_log_repository):
    item = _item()

    result = RecordAuditWorkItemUseCase(audit_log_repository).execute(item)

    assert result.inserted is True
    assert result.changes == 3
    [event] = audit_log_repository.list_events(plate_id=item.plate_id)
    assert event.id == result.event_id
    assert event.status is AuditAction.PLATE_SOLD
    assert event.timestamp == item.timestamp_utc
    assert [c.field_name for c in event.changes] == ["Status", "SoldDate", "SoldPrice"]
    assert len({c.id for c in event.changes}) == 3


def test_redelivery_is_ignored(audit_log_repository):
    item = _item()
    use_case = RecordAuditWorkItemUseCase(audit_log_repository)

    first = use_case.execute(item)
    second = use_case.execute(AuditWorkItem.from_payload(item.to_payload()))

    assert first.inserted is True
    assert second.inserted is False
    assert audit_log_repository.count() == 1


def test_failure_is_logged_and_reraised():
    repository = Mock(spec=AuditLogRepository)
    repository.record_event.side_effect = ConnectionError("db down")

    with patch(
        "catalog.application.usecases.audit.record_audit_work_item.logger"
    ) as mock_logger:
        with pytest.raises(ConnectionError):
            RecordAuditWorkItemUseCase(repository).execute(_item())

    mock_logger.exception.assert_called_once()
    assert mock_logger.exception.call_args.args[0] == "Failed to persist audit event"


@pytest.mark.parametrize(
    "timeout_seconds,expected_ms",
    [(None, None), (2.5, 2500), (0.0001, 1)],
)
def test_timeout_becomes_statement_timeout(timeout_seconds, expected_ms):
    repository = Mock(spec=AuditLogRepository)
    repository.record_event.return_value = True

    RecordAuditWorkItemUseCase(repository).execute(
        _item(), timeout_seconds=timeout_seconds
    )

    assert repository.record_event.call_args.kwargs == {
        "statement_timeout_ms": expected_ms
    }


def test_long_values_are_truncated(audit_log_repository):
    item = _item(changes=(FieldChange("Registration", "x" * 2000, None),))

    RecordAuditWorkItemUseCase(audit_log_repository).execute(item)

    [event] = audit_log_repository.list_events()
    assert len(event.changes[0].old_value) == 1024
    assert event.changes[0].new_value is None
