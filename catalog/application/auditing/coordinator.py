"""
===============================================================================
CRC CARD — application/auditing/coordinator.py
===============================================================================

Class:
    PlateAuditCoordinator (UnitOfWorkInterceptor)

Responsibilities:
    - capture (pre-commit): diff de cada plate modificada, descarta deltas
      vacíos, clasifica, arma el AuditWorkItem y lo bufferea por transacción.
    - flush (post-commit): saca el buffer y entrega cada item al publisher en
      background, sin esperar al broker.
    - Buffer estrictamente por transacción: se crea al empezar la transacción
      y se borra en el flush o al terminar la transacción.
    - La auditoría nunca hace fallar ni bloquea la escritura de negocio.

Collaborators:
    - application.unit_of_work.UnitOfWork / UnitOfWorkInterceptor
    - application.auditing.field_diff.diff_plate
    - application.auditing.classifier.classify
    - domain.services.AuditPublisher (borde con el bus de mensajes)
    - domain.services.CurrentUserProvider (identidad del caller)
    - concurrent.futures.Executor (publish en background)
    - crosscutting.logger / crosscutting.metrics

Failure policy:
    - Falla de captura: se loguea y se absorbe; esa transacción queda sin items.
    - Falla de publish: se loguea y se absorbe; ese item se pierde (sin retry,
      sin spooling). Un crash entre commit y publish también lo pierde.
===============================================================================
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from ...crosscutting.logger import logger
from ...crosscutting.metrics import (
    record_audit_capture_failed,
    record_audit_captured,
    record_audit_publish_failed,
    record_audit_published,
)
from ...domain.audit import AuditWorkItem
from ...domain.services import AuditPublisher, CurrentUserProvider
from ..unit_of_work import UnitOfWork, UnitOfWorkInterceptor
from .classifier import classify
from .field_diff import diff_plate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlateAuditCoordinator(UnitOfWorkInterceptor):
    """Captura deltas de plates antes del commit y los publica después."""

    def __init__(
        self,
        *,
        publisher: AuditPublisher,
        current_user: CurrentUserProvider,
        executor: Executor,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._publisher = publisher
        self._current_user = current_user
        self._executor = executor
        self._clock = clock

        # transaction id -> items pendientes. Indexado por id, nunca por el objeto uow.
        self._pending: dict[UUID, list[AuditWorkItem]] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Hooks del interceptor
    # -------------------------------------------------------------------------

    def transaction_started(self, uow: UnitOfWork) -> None:
        with self._lock:
            self._pending[uow.id] = []

    def saving_changes(self, uow: UnitOfWork) -> None:
        self.capture(uow)

    def saved_changes(self, uow: UnitOfWork) -> None:
        self.flush(uow)

    def transaction_ended(self, uow: UnitOfWork) -> None:
        with self._lock:
            leftover = self._pending.pop(uow.id, None)
        if leftover:
            logger.info(
                "Discarding audit items of a transaction that did not commit",
                extra={"transaction_id": str(uow.id), "items": len(leftover)},
            )

    # -------------------------------------------------------------------------
    # Fases
    # -------------------------------------------------------------------------

    def capture(self, uow: UnitOfWork) -> None:
        try:
            entries = uow.modified_entries()
            if not entries:
                return

            user_id = self._current_user.get_user_id_or_default()
            now = self._clock()

            items: list[AuditWorkItem] = []
            for entry in entries:
                deltas = diff_plate(entry.original, entry.current())
                if not deltas:
                    continue

                items.append(
                    AuditWorkItem(
                        plate_id=entry.entity.id,
                        user_id=user_id,
                        timestamp_utc=now,
                        status=classify(deltas),
                        changes=tuple(d.to_change() for d in deltas),
                    )
                )

            if not items:
                return

            with self._lock:
                self._pending.setdefault(uow.id, []).extend(items)

            for item in items:
                record_audit_captured(item.status.value)

        except Exception:
            record_audit_capture_failed()
            logger.exception(
                "Failed to capture audit changes",
                extra={"transaction_id": str(uow.id)},
            )

    def flush(self, uow: UnitOfWork) -> None:
        with self._lock:
            items = self._pending.pop(uow.id, None)

        if not items:
            return

        for item in items:
            try:
                self._executor.submit(self._publish, item)
            except Exception:
                # Executor apagado o saturado: mismo resultado que un publish fallido.
                record_audit_publish_failed()
                logger.exception(
                    "Failed to publish audit event",
                    extra={"plate_id": str(item.plate_id)},
                )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _publish(self, item: AuditWorkItem) -> None:
        try:
            self._publisher.publish(item)
        except Exception:
            record_audit_publish_failed()
            logger.exception(
                "Failed to publish audit event",
                extra={"plate_id": str(item.plate_id), "action": item.status.value},
            )
            return
        record_audit_published()

    def pending_count(self, transaction_id: UUID) -> int:
        """Items buffereados de una transacción (0 si no hay)."""
        with self._lock:
            return len(self._pending.get(transaction_id, ()))
