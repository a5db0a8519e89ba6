"""
===============================================================================
SUBSYSTEM: Infrastructure / Queue
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Name:
    Errores tipados de la cola

Responsibilities:
    - Excepciones explícitas para los adaptadores de publicación.
    - Manejo consistente (logs / métricas) sin excepciones genéricas.

Collaborators:
    - rq_queue.RQAuditPublisher / RQIntegrationEventPublisher
    - application.auditing.coordinator (loguea y descarta publish fallidos)
    - container (QueueConfigurationError -> fallback in-memory)
===============================================================================
"""

from __future__ import annotations


class QueueError(Exception):
    """Error base del subsistema de colas."""

    code: str = "QUEUE_ERROR"


class QueueConfigurationError(QueueError):
    """La cola está mal configurada (p. ej. job path no importable)."""

    code = "QUEUE_CONFIGURATION_ERROR"


class QueueEnqueueError(QueueError):
    """Falló el encolado de un job."""

    code = "QUEUE_ENQUEUE_ERROR"

    def __init__(
        self, message: str, *, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error
