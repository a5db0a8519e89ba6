"""
Name: Audit Model Tests

Responsibilities:
  - Validate the AuditWorkItem wire contract (payload, validation, dedupe key)
  - Validate the mapping to the durable AuditLogEvent
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from catalog.domain.audit import (
    FIELD_NAME_MAX_LENGTH,
    VALUE_MAX_LENGTH,
    AuditAction,
    AuditLogEvent,
    AuditWorkItem,
    FieldChange,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 17, 10, 0, tzinfo=timezone.utc)


def _item(**overrides) -> AuditWorkItem:
    values = dict(
        plate_id=uuid4(),
        user_id=uuid4(),
        timestamp_utc=NOW,
        status=AuditAction.PLATE_RESERVED,
        changes=(
            FieldChange("Status", "ForSale", "Reserved"),
            FieldChange("ReservedDate", None, NOW.isoformat()),
        ),
    )
    values.update(overrides)
    return AuditWorkItem(**values)


def test_work_item_requires_changes():
    with pytest.raises(ValueError, match="at least one change"):
        _item(changes=())


def test_naive_timestamp_is_treated_as_utc():
    item = _item(timestamp_utc=datetime(2026, 1, 17, 10, 0))

    assert item.timestamp_utc.tzinfo is timezone.utc


def test_payload_is_json_safe_and_rebuilds_the_item():
    item = _item()

    payload = item.to_payload()

    assert payload["plate_id"] == str(item.plate_id)
    assert payload["status"] == "PlateReserved"
    assert payload["changes"][1] == {
        "field_name": "ReservedDate",
        "old_value": None,
        "new_value": NOW.isoformat(),
    }
    assert AuditWorkItem.from_payload(payload) == item


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("plate_id"),
        lambda p: p.update(user_id="not-a-uuid"),
        lambda p: p.update(status="PlateArchived"),
        lambda p: p.update(timestamp_utc="yesterday"),
        lambda p: p.update(changes=[]),
        lambda p: p.update(changes=[{"old_value": "x"}]),
    ],
)
def test_malformed_payload_raises_value_error(mutate):
    payload = _item().to_payload()
    mutate(payload)

    with pytest.raises(ValueError):
        AuditWorkItem.from_payload(payload)


def test_dedupe_key_is_deterministic():
    item = _item()
    same = AuditWorkItem.from_payload(item.to_payload())

    assert item.dedupe_key == same.dedupe_key
    assert len(item.dedupe_key) == 64


def test_dedupe_key_changes_with_change_set():
    item = _item()
    other = _item(
        plate_id=item.plate_id,
        user_id=item.user_id,
        changes=(FieldChange("Status", "ForSale", "Reserved"),),
    )

    assert item.dedupe_key != other.dedupe_key


def test_event_from_work_item_gets_fresh_ids_and_keeps_values():
    item = _item()

    first = AuditLogEvent.from_work_item(item)
    second = AuditLogEvent.from_work_item(item)

    assert first.id != second.id
    assert first.changes[0].id != second.changes[0].id
    assert first.plate_id == item.plate_id
    assert first.user_id == item.user_id
    assert first.timestamp == item.timestamp_utc
    assert first.status is AuditAction.PLATE_RESERVED
    assert first.dedupe_key == item.dedupe_key
    assert [(c.field_name, c.old_value, c.new_value) for c in first.changes] == [
        ("Status", "ForSale", "Reserved"),
        ("ReservedDate", None, NOW.isoformat()),
    ]


def test_event_truncates_values_to_column_limits():
    item = _item(
        changes=(FieldChange("F" * 200, "o" * 2000, "n" * 2000),),
    )

    change = AuditLogEvent.from_work_item(item).changes[0]

    assert len(change.field_name) == FIELD_NAME_MAX_LENGTH
    assert len(change.old_value) == VALUE_MAX_LENGTH
    assert len(change.new_value) == VALUE_MAX_LENGTH
