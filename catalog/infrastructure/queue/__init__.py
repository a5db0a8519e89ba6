"""
===============================================================================
SUBSYSTEM: Infrastructure / Queue
===============================================================================

CRC CARD (Package)
-------------------------------------------------------------------------------
Name:
    infrastructure.queue

Responsibilities:
    - Exportar los publishers (auditoría e integration events) que usa DI,
      junto con su configuración.
===============================================================================
"""

from .errors import QueueConfigurationError, QueueEnqueueError, QueueError
from .in_memory import InMemoryAuditPublisher, InMemoryIntegrationEventPublisher
from .rq_queue import RQAuditPublisher, RQIntegrationEventPublisher, RQQueueConfig

__all__ = [
    "InMemoryAuditPublisher",
    "InMemoryIntegrationEventPublisher",
    "RQAuditPublisher",
    "RQIntegrationEventPublisher",
    "RQQueueConfig",
    "QueueError",
    "QueueConfigurationError",
    "QueueEnqueueError",
]
