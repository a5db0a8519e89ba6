"""
===============================================================================
FILE: crosscutting/metrics.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Name:
    Métricas (Prometheus) del pipeline de auditoría e integration events

Responsibilities:
    - Definir las métricas de captura/publicación/persistencia.
    - Ofrecer funciones chicas y estables para registrar eventos y duraciones.
    - Mantener baja cardinalidad (SIN plate ids, SIN user ids).
    - Exponer el payload para un scrape de /metrics.

Collaborators:
    - application/auditing/coordinator: captured / published / failures.
    - application/usecases/plates: integration events publicados / fallidos.
    - worker/jobs: procesados por status y duración del job.

Design:
    - Registry privado: tests e imports múltiples nunca colisionan.
===============================================================================
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ------------------------
# Captura / publicación (write path)
# ------------------------
_audit_items_captured_total = Counter(
    "catalog_audit_items_captured_total",
    "Audit work items captured before commit",
    ["action"],
    registry=_registry,
)

_audit_capture_failures_total = Counter(
    "catalog_audit_capture_failures_total",
    "Captures aborted by an exception (audit trail degraded)",
    registry=_registry,
)

_audit_items_published_total = Counter(
    "catalog_audit_items_published_total",
    "Audit work items handed to the broker",
    registry=_registry,
)

_audit_publish_failures_total = Counter(
    "catalog_audit_publish_failures_total",
    "Audit work items dropped because publishing failed",
    registry=_registry,
)

_integration_events_total = Counter(
    "catalog_integration_events_total",
    "Integration events by type and outcome",
    ["event_type", "outcome"],
    registry=_registry,
)

# ------------------------
# Worker (consumidor)
# ------------------------
_worker_processed_total = Counter(
    "catalog_audit_worker_processed_total",
    "Audit jobs handled by the worker",
    ["status"],
    registry=_registry,
)

_worker_duration = Histogram(
    "catalog_audit_worker_duration_seconds",
    "Duration of one audit job (seconds)",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)


def record_audit_captured(action: str) -> None:
    """Cuenta un work item capturado, por acción."""
    _audit_items_captured_total.labels(action=action).inc()


def record_audit_capture_failed(count: int = 1) -> None:
    _audit_capture_failures_total.inc(count)


def record_audit_published(count: int = 1) -> None:
    _audit_items_published_total.inc(count)


def record_audit_publish_failed(count: int = 1) -> None:
    """Cuenta un work item perdido por fallo de publicación."""
    _audit_publish_failures_total.inc(count)


def record_integration_event(event_type: str, outcome: str) -> None:
    """outcome: ENQUEUED / FAILED en el write path, RELAYED / INVALID en el worker."""
    _integration_events_total.labels(event_type=event_type, outcome=outcome).inc()


def record_worker_processed(status: str) -> None:
    """Cuenta jobs de auditoría por status final (PERSISTED/DUPLICATE/INVALID/FAILED)."""
    _worker_processed_total.labels(status=status).inc()


def observe_worker_duration(duration_seconds: float) -> None:
    _worker_duration.observe(duration_seconds)


def get_metrics_response() -> tuple[bytes, str]:
    """Payload + content type para un endpoint /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
