"""
===============================================================================
FILE: infrastructure/queue/rq_queue.py
===============================================================================

CRC CARD (Class)
-------------------------------------------------------------------------------
Class:
    RQAuditPublisher / RQIntegrationEventPublisher (Adapters)

Responsibilities:
    - Implementar los puertos `AuditPublisher` e `IntegrationEventPublisher`
      con RQ: cada uno encola su job consumidor con un payload JSON-safe.
    - Validar configuración (nombre de cola + job path importable) fail-fast.
    - Mantener rq/redis fuera de domain y application.

Collaborators:
    - domain.services.AuditPublisher / IntegrationEventPublisher
    - job_paths (colas y jobs)
    - import_utils.is_importable_dotted_path
    - errors.QueueConfigurationError / QueueEnqueueError
    - crosscutting.logger

Delivery:
    - Fire-and-forget para el caller; el coordinator corre publish() en un
      executor y descarta el job id.
    - rq.Retry(max=N) re-ejecuta el job consumidor si falla (at-least-once).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...crosscutting.logger import logger
from ...domain.audit import AuditWorkItem
from ...domain.events import IntegrationEvent
from .errors import QueueConfigurationError, QueueEnqueueError
from .import_utils import is_importable_dotted_path
from .job_paths import (
    AUDIT_QUEUE_NAME,
    INTEGRATION_EVENTS_QUEUE_NAME,
    PUBLISH_INTEGRATION_EVENT_JOB_PATH,
    RECORD_AUDIT_WORK_ITEM_JOB_PATH,
)


@dataclass(frozen=True)
class RQQueueConfig:
    """Configuración del adaptador RQ.

    queue_name:
        Nombre de la cola en Redis (vacío = cola por defecto del publisher).
    retry_max_attempts:
        Re-ejecuciones automáticas si el job falla (0 las desactiva).
    job_timeout_seconds:
        Tiempo máximo de un job en el worker.
    result_ttl_seconds:
        Vida del resultado del job en Redis.
    """

    queue_name: str = AUDIT_QUEUE_NAME
    retry_max_attempts: int = 5
    job_timeout_seconds: int = 60
    result_ttl_seconds: int = 0


class _RQPublisher:
    """Base: cola + retry + enqueue con manejo de errores uniforme."""

    job_path: str
    default_queue_name: str

    def __init__(self, *, redis: Any, config: RQQueueConfig) -> None:
        self._redis = redis
        self._config = _validate_config(config, self.default_queue_name)

        if not is_importable_dotted_path(self.job_path):
            raise QueueConfigurationError(
                f"Job path is not importable by RQ: {self.job_path}. "
                "Check `infrastructure/queue/job_paths.py` and `worker/jobs.py`."
            )

        self._rq = _lazy_import_rq()
        self._queue = self._rq.Queue(name=self._config.queue_name, connection=redis)

        self._retry = None
        if self._config.retry_max_attempts > 0:
            self._retry = self._rq.Retry(max=self._config.retry_max_attempts)

        logger.info(
            "RQ publisher initialized",
            extra={
                "queue": self._config.queue_name,
                "job_path": self.job_path,
                "retry_max_attempts": self._config.retry_max_attempts,
            },
        )

    def _enqueue(self, payload: dict, *, description: str, what: str) -> str:
        try:
            job = self._queue.enqueue(
                self.job_path,
                args=(payload,),
                retry=self._retry,
                job_timeout=self._config.job_timeout_seconds,
                result_ttl=self._config.result_ttl_seconds,
                description=description,
            )
        except Exception as exc:
            raise QueueEnqueueError(
                f"Could not enqueue {what}", original_error=exc
            ) from exc
        return str(getattr(job, "id", "") or "")


class RQAuditPublisher(_RQPublisher):
    """Adaptador RQ para audit work items."""

    job_path = RECORD_AUDIT_WORK_ITEM_JOB_PATH
    default_queue_name = AUDIT_QUEUE_NAME

    def publish(self, item: AuditWorkItem) -> None:
        job_id = self._enqueue(
            item.to_payload(),
            description=f"record_audit:{item.plate_id}:{item.status.value}",
            what="audit work item",
        )
        logger.info(
            "Audit work item enqueued",
            extra={
                "plate_id": str(item.plate_id),
                "action": item.status.value,
                "job_id": job_id,
                "queue": self._config.queue_name,
            },
        )


class RQIntegrationEventPublisher(_RQPublisher):
    """Adaptador RQ para integration events; el worker los re-emite en Redis."""

    job_path = PUBLISH_INTEGRATION_EVENT_JOB_PATH
    default_queue_name = INTEGRATION_EVENTS_QUEUE_NAME

    def publish(self, event: IntegrationEvent) -> None:
        job_id = self._enqueue(
            event.to_payload(),
            description=f"integration_event:{event.event_type}:{event.plate_id}",
            what="integration event",
        )
        logger.info(
            "Integration event enqueued",
            extra={
                "plate_id": str(event.plate_id),
                "event_type": event.event_type,
                "event_id": str(event.id),
                "job_id": job_id,
            },
        )


def _validate_config(config: RQQueueConfig, default_queue_name: str) -> RQQueueConfig:
    queue_name = (config.queue_name or "").strip() or default_queue_name
    retry_max_attempts = int(config.retry_max_attempts)
    job_timeout_seconds = int(config.job_timeout_seconds)
    result_ttl_seconds = int(config.result_ttl_seconds)

    if retry_max_attempts < 0:
        raise QueueConfigurationError("retry_max_attempts cannot be negative")
    if job_timeout_seconds <= 0:
        raise QueueConfigurationError("job_timeout_seconds must be > 0")
    if result_ttl_seconds < 0:
        raise QueueConfigurationError("result_ttl_seconds cannot be negative")

    return RQQueueConfig(
        queue_name=queue_name,
        retry_max_attempts=retry_max_attempts,
        job_timeout_seconds=job_timeout_seconds,
        result_ttl_seconds=result_ttl_seconds,
    )


def _lazy_import_rq():
    """Importa rq recién al usarlo; importar este módulo no lo requiere."""
    try:
        import rq  # type: ignore

        _ = rq.Queue
        _ = rq.Retry
        return rq
    except Exception as exc:
        raise QueueConfigurationError(
            "RQ is not available. Install 'rq' to publish to the queue."
        ) from exc
