"""
===============================================================================
CRC CARD — domain/services.py
===============================================================================

Module:
    Puertos hacia servicios externos (Protocols)

Responsibilities:
    - Definir el borde con el bus de mensajes para los audit work items.
    - Definir el borde para los integration events (reserva / liberación / venta).
    - Definir la consulta de identidad del caller que usa la captura de auditoría.

Collaborators:
    - infrastructure/queue: implementaciones RQ e in-memory de los publishers.
    - identity/current_user: implementación de CurrentUserProvider.
    - application.auditing.coordinator y usecases/plates: consumen los puertos.

Rules:
    - SOLO interfaces: sin implementación.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from .audit import AuditWorkItem
from .events import IntegrationEvent


class AuditPublisher(Protocol):
    """Envío best-effort de un work item a un broker durable."""

    def publish(self, item: AuditWorkItem) -> None:
        """Lanza excepción si falla; no devuelve acuse de entrega."""
        ...


class IntegrationEventPublisher(Protocol):
    """Anuncia un hecho de negocio ya confirmado a otros servicios."""

    def publish(self, event: IntegrationEvent) -> None:
        """Lanza excepción si falla; el caller decide si la tolera."""
        ...


class CurrentUserProvider(Protocol):
    """Identidad ambiente del caller."""

    def get_user_id_or_default(self) -> UUID:
        """Id del usuario actuante, o el UUID nulo si no hay. Puede lanzar."""
        ...
