"""
===============================================================================
SUBSYSTEM: Infrastructure / Queue
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Name:
    Nombres de colas y job paths

Responsibilities:
    - Centralizar nombres de cola y job paths importables (sin magic strings).

Collaborators:
    - rq_queue.RQAuditPublisher / RQIntegrationEventPublisher
    - worker.jobs (ejecutados por el worker)

Notes:
    - Los paths deben ser importables por el worker RQ; se validan al construir
      el publisher.
===============================================================================
"""

from __future__ import annotations

AUDIT_QUEUE_NAME: str = "audit"
INTEGRATION_EVENTS_QUEUE_NAME: str = "integration-events"

# Deben coincidir con la ubicación real de los jobs.
RECORD_AUDIT_WORK_ITEM_JOB_PATH: str = "catalog.worker.jobs.record_audit_work_item_job"
PUBLISH_INTEGRATION_EVENT_JOB_PATH: str = (
    "catalog.worker.jobs.publish_integration_event_job"
)
