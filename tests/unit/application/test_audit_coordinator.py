"""
Name: Audit Capture/Flush Coordinator Tests

Responsibilities:
  - capture (pre-commit) builds one work item per plate with deltas
  - flush (post-commit) publishes in the background, after the commit
  - Capture and publish failures never break the business write
  - The buffer is transaction scoped and never keeps the unit of work alive
"""

import gc
import weakref
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest

from catalog.application.auditing.coordinator import PlateAuditCoordinator
from catalog.domain.audit import AuditAction, FieldChange
from catalog.domain.entities import PlateStatus
from catalog.infrastructure.repositories.in_memory import (
    InMemoryPlateStore,
    InMemoryUnitOfWork,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 17, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def coordinator(mock_publisher, mock_current_user, immediate_executor):
    return PlateAuditCoordinator(
        publisher=mock_publisher,
        current_user=mock_current_user,
        executor=immediate_executor,
        clock=lambda: NOW,
    )


def _uow(store, coordinator):
    return InMemoryUnitOfWork(store, interceptors=[coordinator])


def test_reserve_publishes_one_work_item(
    plate_factory, coordinator, mock_publisher, mock_current_user
):
    user_id = uuid4()
    mock_current_user.get_user_id_or_default.return_value = user_id
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with _uow(store, coordinator) as uow:
        uow.plates.get(plate.id).reserve(now=NOW)
        uow.commit()

    mock_publisher.publish.assert_called_once()
    item = mock_publisher.publish.call_args.args[0]
    assert item.plate_id == plate.id
    assert item.user_id == user_id
    assert item.timestamp_utc == NOW
    assert item.status is AuditAction.PLATE_RESERVED
    assert item.changes == (
        FieldChange("Status", "ForSale", "Reserved"),
        FieldChange("ReservedDate", None, NOW.isoformat()),
    )


def test_one_item_per_modified_plate(plate_factory, coordinator, mock_publisher):
    reserved = plate_factory.create(status=PlateStatus.RESERVED)
    for_sale = plate_factory.create()
    store = InMemoryPlateStore([reserved, for_sale])

    with _uow(store, coordinator) as uow:
        uow.plates.get(reserved.id).unreserve()
        uow.plates.get(for_sale.id).purchase_price = Decimal("150.00")
        uow.commit()

    actions = {
        call.args[0].plate_id: call.args[0].status
        for call in mock_publisher.publish.call_args_list
    }
    assert actions == {
        reserved.id: AuditAction.PLATE_UNRESERVED,
        for_sale.id: AuditAction.PLATE_UPDATED,
    }


def test_modified_plate_without_deltas_publishes_nothing(
    plate_factory, coordinator, mock_publisher
):
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with _uow(store, coordinator) as uow:
        uow.plates.update(uow.plates.get(plate.id))
        uow.commit()

    mock_publisher.publish.assert_not_called()


def test_added_plate_is_not_audited(plate_factory, coordinator, mock_publisher):
    store = InMemoryPlateStore()

    with _uow(store, coordinator) as uow:
        uow.plates.add(plate_factory.create())
        uow.commit()

    mock_publisher.publish.assert_not_called()


def test_rollback_publishes_nothing_and_drops_buffer(
    plate_factory, coordinator, mock_publisher
):
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with _uow(store, coordinator) as uow:
        uow.plates.get(plate.id).reserve(now=NOW)
        coordinator.capture(uow)
        assert coordinator.pending_count(uow.id) == 1

    assert coordinator.pending_count(uow.id) == 0
    mock_publisher.publish.assert_not_called()


def test_failed_commit_publishes_nothing(plate_factory, coordinator, mock_publisher):
    class FailingStore(InMemoryPlateStore):
        def save_all(self, plates):
            raise RuntimeError("disk full")

    plate = plate_factory.create()
    store = FailingStore([plate])

    with pytest.raises(RuntimeError, match="disk full"):
        with _uow(store, coordinator) as uow:
            uow.plates.get(plate.id).reserve(now=NOW)
            uow.commit()

    assert coordinator.pending_count(uow.id) == 0
    mock_publisher.publish.assert_not_called()


def test_identity_failure_still_commits_and_logs(
    plate_factory, coordinator, mock_publisher, mock_current_user
):
    mock_current_user.get_user_id_or_default.side_effect = RuntimeError("no identity")
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with patch("catalog.application.auditing.coordinator.logger") as mock_logger:
        with _uow(store, coordinator) as uow:
            uow.plates.get(plate.id).reserve(now=NOW)
            uow.commit()

    assert store.load(plate.id).status is PlateStatus.RESERVED
    mock_publisher.publish.assert_not_called()
    mock_logger.exception.assert_called_once()
    assert mock_logger.exception.call_args.args[0] == "Failed to capture audit changes"


def test_publish_failure_is_logged_and_swallowed(
    plate_factory, coordinator, mock_publisher
):
    mock_publisher.publish.side_effect = ConnectionError("broker down")
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with patch("catalog.application.auditing.coordinator.logger") as mock_logger:
        with _uow(store, coordinator) as uow:
            uow.plates.get(plate.id).reserve(now=NOW)
            uow.commit()

    assert store.load(plate.id).status is PlateStatus.RESERVED
    mock_logger.exception.assert_called_once()
    assert mock_logger.exception.call_args.args[0] == "Failed to publish audit event"


def test_executor_rejection_is_logged_and_swallowed(
    plate_factory, mock_publisher, mock_current_user
):
    class ClosedExecutor:
        def submit(self, fn, *args, **kwargs):
            raise RuntimeError("cannot schedule new futures after shutdown")

    coordinator = PlateAuditCoordinator(
        publisher=mock_publisher,
        current_user=mock_current_user,
        executor=ClosedExecutor(),
        clock=lambda: NOW,
    )
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with patch("catalog.application.auditing.coordinator.logger") as mock_logger:
        with _uow(store, coordinator) as uow:
            uow.plates.get(plate.id).reserve(now=NOW)
            uow.commit()

    assert store.load(plate.id).status is PlateStatus.RESERVED
    mock_logger.exception.assert_called_once()


def test_flush_does_not_wait_for_publish(
    plate_factory, mock_publisher, mock_current_user, deferred_executor
):
    coordinator = PlateAuditCoordinator(
        publisher=mock_publisher,
        current_user=mock_current_user,
        executor=deferred_executor,
        clock=lambda: NOW,
    )
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with _uow(store, coordinator) as uow:
        uow.plates.get(plate.id).reserve(now=NOW)
        uow.commit()

    assert store.load(plate.id).status is PlateStatus.RESERVED
    mock_publisher.publish.assert_not_called()

    deferred_executor.run_all()

    mock_publisher.publish.assert_called_once()


def test_flush_without_buffer_is_noop(coordinator, mock_publisher, immediate_executor):
    store = InMemoryPlateStore()

    with _uow(store, coordinator) as uow:
        coordinator.flush(uow)

    assert immediate_executor.submitted == 0
    mock_publisher.publish.assert_not_called()


def test_buffer_does_not_keep_unit_of_work_alive(plate_factory, coordinator):
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    uow = _uow(store, coordinator)
    with uow:
        uow.plates.get(plate.id).reserve(now=NOW)
        uow.commit()
    ref = weakref.ref(uow)
    del uow
    gc.collect()

    assert ref() is None
    assert coordinator._pending == {}


def test_captured_values_are_fixed_before_commit(
    plate_factory, mock_publisher, mock_current_user, deferred_executor
):
    coordinator = PlateAuditCoordinator(
        publisher=mock_publisher,
        current_user=mock_current_user,
        executor=deferred_executor,
        clock=lambda: NOW,
    )
    plate = plate_factory.create()
    store = InMemoryPlateStore([plate])

    with _uow(store, coordinator) as uow:
        loaded = uow.plates.get(plate.id)
        loaded.purchase_price = Decimal("150.00")
        uow.commit()
        loaded.purchase_price = Decimal("999.00")

    deferred_executor.run_all()

    item = mock_publisher.publish.call_args.args[0]
    assert item.changes[0] == FieldChange("PurchasePrice", "100.00", "150.00")
