"""
Name: Audit Pipeline Tests (in-memory end to end)

Responsibilities:
  - Business write -> capture -> publish -> consumer -> audit log
  - The wire payload survives the trip through the queue encoding
  - Container wiring in the test environment
"""

from datetime import datetime, timezone
from decimal import Decimal
from functools import partial
from uuid import uuid4

import pytest

from catalog import container
from catalog.application.auditing.coordinator import PlateAuditCoordinator
from catalog.application.usecases import (
    CreatePlateInput,
    CreatePlateUseCase,
    RecordAuditWorkItemUseCase,
    ReservePlateUseCase,
    SellPlateUseCase,
    UpdatePlatePriceUseCase,
)
from catalog.context import set_request_context
from catalog.domain.audit import AuditAction, AuditWorkItem
from catalog.identity.current_user import CurrentUserService
from catalog.infrastructure.queue import InMemoryAuditPublisher
from catalog.infrastructure.repositories.in_memory import (
    InMemoryAuditLogRepository,
    InMemoryPlateStore,
    InMemoryUnitOfWork,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 17, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def pipeline(immediate_executor):
    store = InMemoryPlateStore()
    audit_log = InMemoryAuditLogRepository()
    consumer = RecordAuditWorkItemUseCase(audit_log)

    def deliver(item: AuditWorkItem) -> None:
        consumer.execute(AuditWorkItem.from_payload(item.to_payload()))

    publisher = InMemoryAuditPublisher(deliver=deliver)
    coordinator = PlateAuditCoordinator(
        publisher=publisher,
        current_user=CurrentUserService(),
        executor=immediate_executor,
        clock=lambda: NOW,
    )
    uow_factory = partial(InMemoryUnitOfWork, store, interceptors=[coordinator])
    return uow_factory, audit_log, publisher


def test_plate_lifecycle_is_fully_audited(pipeline):
    uow_factory, audit_log, _ = pipeline
    user_id = uuid4()
    set_request_context(acting_user_id=str(user_id))

    plate = CreatePlateUseCase(uow_factory).execute(
        CreatePlateInput(
            registration="AB12 CDE",
            letters="AB",
            numbers=12,
            purchase_price=Decimal("100.00"),
        )
    ).plate
    UpdatePlatePriceUseCase(uow_factory).execute(plate.id, Decimal("300.00"))
    ReservePlateUseCase(uow_factory, clock=lambda: NOW).execute(plate.id)
    SellPlateUseCase(uow_factory, clock=lambda: NOW).execute(plate.id, "DISCOUNT")

    events = audit_log.list_events(plate_id=plate.id)
    by_action = {e.status: e for e in events}

    assert set(by_action) == {
        AuditAction.PLATE_UPDATED,
        AuditAction.PLATE_RESERVED,
        AuditAction.PLATE_SOLD,
    }
    assert all(e.user_id == user_id for e in events)
    assert [c.field_name for c in by_action[AuditAction.PLATE_RESERVED].changes] == [
        "Status",
        "ReservedDate",
    ]
    sold = {
        c.field_name: (c.old_value, c.new_value)
        for c in by_action[AuditAction.PLATE_SOLD].changes
    }
    assert sold == {
        "Status": ("Reserved", "Sold"),
        "SoldDate": (None, NOW.isoformat()),
        "SoldPrice": (None, "335.00"),
        "PromoCodeUsed": (None, "DISCOUNT"),
    }


def test_rejected_write_leaves_no_audit_trail(pipeline):
    uow_factory, audit_log, publisher = pipeline
    plate = CreatePlateUseCase(uow_factory).execute(
        CreatePlateInput(
            registration="XY99 ZZZ",
            letters="XY",
            numbers=99,
            purchase_price=Decimal("500.00"),
        )
    ).plate
    ReservePlateUseCase(uow_factory, clock=lambda: NOW).execute(plate.id)

    result = SellPlateUseCase(uow_factory).execute(plate.id, "PERCENTOFF")

    assert result.error is not None
    assert [e.status for e in audit_log.list_events(plate_id=plate.id)] == [
        AuditAction.PLATE_RESERVED
    ]
    assert len(publisher.published) == 1


def test_container_wires_in_memory_adapters_in_test_env():
    container.get_audit_publisher.cache_clear()
    container.get_audit_log_repository.cache_clear()
    container.get_audit_coordinator.cache_clear()

    try:
        assert isinstance(container.get_audit_publisher(), InMemoryAuditPublisher)
        assert isinstance(
            container.get_audit_log_repository(), InMemoryAuditLogRepository
        )

        uow = container.get_unit_of_work_factory()()
        assert isinstance(uow, InMemoryUnitOfWork)
    finally:
        container.shutdown()
        container.get_audit_publisher.cache_clear()
        container.get_audit_log_repository.cache_clear()
