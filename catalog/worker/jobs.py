"""
===============================================================================
CRC CARD — worker/jobs.py (RQ jobs: consumidores de auditoría y eventos)
===============================================================================

Responsibilities:
  - Definir los entrypoints RQ de los audit work items y de los integration
    events publicados por el write path.
  - Validar el payload fail-fast (un payload malformado nunca se reintenta).
  - Construir el caso de uso consumidor desde el container.
  - Propagar el tiempo restante del job a la llamada de persistencia.
  - Re-emitir cada integration event en el canal pub/sub de su tipo.
  - Logs/métricas con contexto consistente; siempre limpiar el contexto.

Patterns:
  - Command (Job): función plana ejecutada por el worker.
  - Composition Root (local): arma el caso de uso con las deps registradas.

Collaborators:
  - application.usecases.audit.RecordAuditWorkItemUseCase
  - container.get_audit_log_repository / get_redis_client
  - crosscutting.metrics
  - context (set_request_context, clear_context)

Failure policy:
  - Falla de persistencia o de publish en Redis: se loguea, status FAILED y
    se re-lanza para que RQ reintente (Retry(max=N) fijado al encolar) y al
    final lo mueva al failed job registry.
===============================================================================
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Any, Mapping

from rq import get_current_job

from ..application.usecases.audit import RecordAuditWorkItemUseCase
from ..container import get_audit_log_repository, get_redis_client
from ..context import clear_context, set_request_context
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import (
    observe_worker_duration,
    record_integration_event,
    record_worker_processed,
)
from ..domain.audit import AuditWorkItem
from ..domain.events import integration_event_from_payload


def _build_use_case() -> RecordAuditWorkItemUseCase:
    return RecordAuditWorkItemUseCase(get_audit_log_repository())


def _remaining_timeout(job: Any) -> float | None:
    """Segundos que quedan antes de que RQ mate el job (None si no se sabe)."""
    timeout = getattr(job, "timeout", None)
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        return None

    started_at = getattr(job, "started_at", None)
    if not isinstance(started_at, datetime):
        return float(timeout)
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)

    elapsed = (datetime.now(timezone.utc) - started_at).total_seconds()
    return max(float(timeout) - elapsed, 0.001)


def record_audit_work_item_job(payload: Mapping[str, Any]) -> None:
    """
    RQ job: persiste un audit work item.

    Contract:
      - payload es AuditWorkItem.to_payload() (dict JSON-safe).
      - Si el job lanza, RQ aplica la política de retry fijada al encolar.
    """
    job = get_current_job()
    job_id = getattr(job, "id", None)

    set_request_context(
        request_id=job_id or "",
        origin="WORKER",
        handler="rq.record_audit_work_item_job",
    )

    start = time.perf_counter()
    status = "UNKNOWN"
    plate_id = None

    try:
        try:
            item = AuditWorkItem.from_payload(payload)
        except ValueError as exc:
            status = "INVALID"
            logger.error(
                "Invalid audit job: malformed payload",
                extra={"job_id": job_id, "error": str(exc)},
            )
            return

        plate_id = str(item.plate_id)
        logger.info(
            "Audit job started",
            extra={
                "job_id": job_id,
                "plate_id": plate_id,
                "action": item.status.value,
                "changes": len(item.changes),
            },
        )

        result = _build_use_case().execute(
            item, timeout_seconds=_remaining_timeout(job)
        )
        status = "PERSISTED" if result.inserted else "DUPLICATE"

    except Exception as exc:
        status = "FAILED"
        logger.exception(
            "Audit job failed",
            extra={"job_id": job_id, "plate_id": plate_id, "error": str(exc)},
        )
        raise

    finally:
        duration = time.perf_counter() - start
        record_worker_processed(status)
        observe_worker_duration(duration)

        logger.info(
            "Audit job finished",
            extra={
                "job_id": job_id,
                "plate_id": plate_id,
                "status": status,
                "duration_seconds": round(duration, 3),
            },
        )
        clear_context()


def publish_integration_event_job(payload: Mapping[str, Any]) -> None:
    """
    RQ job: re-emite un integration event en Redis pub/sub.

    Canal: f"{integration_events_channel_prefix}.{event_type}"; el mensaje es
    el mismo payload serializado a JSON. Usa la conexión del job (la del
    worker) y cae al cliente del container fuera de un worker.
    """
    job = get_current_job()
    job_id = getattr(job, "id", None)

    set_request_context(
        request_id=job_id or "",
        origin="WORKER",
        handler="rq.publish_integration_event_job",
    )

    try:
        try:
            event = integration_event_from_payload(payload)
        except ValueError as exc:
            record_integration_event(str(payload.get("event_type", "")), "INVALID")
            logger.error(
                "Invalid integration event job: malformed payload",
                extra={"job_id": job_id, "error": str(exc)},
            )
            return

        connection = getattr(job, "connection", None) or get_redis_client()
        if connection is None:
            raise RuntimeError("No Redis connection to relay integration events")

        channel = f"{get_settings().integration_events_channel_prefix}.{event.event_type}"
        try:
            receivers = connection.publish(channel, json.dumps(event.to_payload()))
        except Exception:
            record_integration_event(event.event_type, "FAILED")
            logger.exception(
                "Integration event relay failed",
                extra={"job_id": job_id, "plate_id": str(event.plate_id), "channel": channel},
            )
            raise

        record_integration_event(event.event_type, "RELAYED")
        logger.info(
            "Integration event relayed",
            extra={
                "job_id": job_id,
                "plate_id": str(event.plate_id),
                "event_type": event.event_type,
                "event_id": str(event.id),
                "channel": channel,
                "receivers": receivers,
            },
        )
    finally:
        clear_context()


__all__ = ["record_audit_work_item_job", "publish_integration_event_job"]
