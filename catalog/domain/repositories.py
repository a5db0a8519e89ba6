"""
===============================================================================
CRC CARD — domain/repositories.py
===============================================================================

Module:
    Puertos de repositorio (Protocols)

Responsibilities:
    - Definir los contratos de persistencia de los que depende la aplicación.
    - Mantener el dominio libre de detalles de psycopg / SQL.

Collaborators:
    - infrastructure/repositories/in_memory: implementaciones de test/dev.
    - infrastructure/repositories/postgres: implementaciones de producción.
    - application.usecases: consumen estos puertos.

Rules:
    - SOLO interfaces.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from .audit import AuditLogEvent
from .entities import Plate


class PlateRepository(Protocol):
    """Las plates cargadas vía una unit of work quedan trackeadas para detectar cambios."""

    def get(self, plate_id: UUID) -> Plate | None:
        """Carga y trackea una plate; None si no existe."""
        ...

    def add(self, plate: Plate) -> None:
        """Trackea una plate nueva; se inserta al commit."""
        ...

    def update(self, plate: Plate) -> None:
        """Fuerza una plate trackeada al estado modificado."""
        ...


class AuditLogRepository(Protocol):
    """Audit store append-only."""

    def record_event(
        self, event: AuditLogEvent, *, statement_timeout_ms: int | None = None
    ) -> bool:
        """
        Persiste un evento con sus cambios en una transacción.

        Devuelve False si ya existe un evento con la misma dedupe key.
        """
        ...
