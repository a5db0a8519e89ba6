"""
===============================================================================
USE CASE: Record Audit Work Item (audit consumer)
===============================================================================

Business Goal:
    Convertir un AuditWorkItem publicado en un AuditLogEvent durable, con una
    fila de cambio por cada delta capturado.

Why:
    - La captura es best-effort y nunca toca el audit store; este es el único
      camino de escritura hacia él, y corre fuera de la transacción de negocio
      (con su propio scope de persistencia).
    - El broker re-entrega ante fallas, así que una falla acá debe propagarse.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    RecordAuditWorkItemUseCase

Responsibilities:
    - Mapear AuditWorkItem -> AuditLogEvent (ids nuevos de evento y cambios).
    - Persistirlo en una transacción vía AuditLogRepository.
    - Propagar el tiempo restante del job como statement timeout.
    - Loguear y re-lanzar si falla la persistencia.

Collaborators:
    - domain.audit.AuditWorkItem / AuditLogEvent
    - domain.repositories.AuditLogRepository
    - crosscutting.logger

Idempotency:
    - El evento lleva la dedupe key del work item; el store ignora un segundo
      insert con la misma key y reporta inserted=False.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.audit import AuditLogEvent, AuditWorkItem
from ....domain.repositories import AuditLogRepository


@dataclass(frozen=True)
class RecordAuditResult:
    event_id: UUID
    inserted: bool
    changes: int


class RecordAuditWorkItemUseCase:
    def __init__(self, repository: AuditLogRepository) -> None:
        self._repository = repository

    def execute(
        self, item: AuditWorkItem, *, timeout_seconds: float | None = None
    ) -> RecordAuditResult:
        event = AuditLogEvent.from_work_item(item)

        statement_timeout_ms = None
        if timeout_seconds is not None:
            statement_timeout_ms = max(1, int(timeout_seconds * 1000))

        try:
            inserted = self._repository.record_event(
                event, statement_timeout_ms=statement_timeout_ms
            )
        except Exception:
            logger.exception(
                "Failed to persist audit event",
                extra={
                    "plate_id": str(item.plate_id),
                    "action": item.status.value,
                    "changes": len(item.changes),
                },
            )
            raise

        if inserted:
            logger.info(
                "Audit event persisted",
                extra={
                    "event_id": str(event.id),
                    "plate_id": str(item.plate_id),
                    "action": item.status.value,
                    "changes": len(event.changes),
                },
            )
        else:
            logger.info(
                "Audit event already recorded; redelivery ignored",
                extra={"plate_id": str(item.plate_id), "dedupe_key": event.dedupe_key},
            )

        return RecordAuditResult(
            event_id=event.id, inserted=inserted, changes=len(event.changes)
        )
