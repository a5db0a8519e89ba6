"""
===============================================================================
CRC CARD — domain/events.py
===============================================================================

Module:
    Integration events (reserva / liberación / venta de una plate)

Responsibilities:
    - Definir los hechos de negocio que el catálogo anuncia a otros servicios
      después de un commit exitoso: PlateReserved, PlateUnreserved, PlateSold.
    - Definir su contrato de transporte (to_payload / integration_event_from_payload):
      JSON-safe, importes como string, fechas en ISO 8601.

Collaborators:
    - application.usecases.plates: construye y publica los eventos.
    - domain.services.IntegrationEventPublisher: puerto de salida.
    - worker.jobs.publish_integration_event_job: decodifica y reenvía.

Notes:
    - No es el audit log: un evento describe un hecho de negocio completo,
      no los deltas campo a campo.
    - Cada evento lleva id propio y created_at (UTC) del momento en que se
      construye, no del commit.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, ClassVar, Mapping
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class IntegrationEvent:
    """Base: identidad + timestamp de creación."""

    event_type: ClassVar[str] = "IntegrationEvent"

    plate_id: UUID
    registration: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "event_type": self.event_type,
            "id": str(self.id),
            "created_at": self.created_at.isoformat(),
            "plate_id": str(self.plate_id),
            "registration": self.registration,
        }
        payload.update(self._body())
        return payload

    def _body(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True, kw_only=True)
class PlateReservedIntegrationEvent(IntegrationEvent):
    event_type: ClassVar[str] = "PlateReserved"

    sale_price: Decimal
    reserved_date: datetime

    def _body(self) -> dict[str, Any]:
        return {
            "sale_price": str(self.sale_price),
            "reserved_date": self.reserved_date.isoformat(),
        }


@dataclass(frozen=True, kw_only=True)
class PlateUnreservedIntegrationEvent(IntegrationEvent):
    event_type: ClassVar[str] = "PlateUnreserved"


@dataclass(frozen=True, kw_only=True)
class PlateSoldIntegrationEvent(IntegrationEvent):
    event_type: ClassVar[str] = "PlateSold"

    purchase_price: Decimal
    sale_price: Decimal
    sold_price: Decimal
    promo_code: str | None
    profit_margin: Decimal
    sold_date: datetime

    def _body(self) -> dict[str, Any]:
        return {
            "purchase_price": str(self.purchase_price),
            "sale_price": str(self.sale_price),
            "sold_price": str(self.sold_price),
            "promo_code": self.promo_code,
            "profit_margin": str(self.profit_margin),
            "sold_date": self.sold_date.isoformat(),
        }


_EVENT_TYPES: dict[str, type[IntegrationEvent]] = {
    cls.event_type: cls
    for cls in (
        PlateReservedIntegrationEvent,
        PlateUnreservedIntegrationEvent,
        PlateSoldIntegrationEvent,
    )
}


def integration_event_from_payload(payload: Mapping[str, Any]) -> IntegrationEvent:
    """
    Reconstruye un evento desde su payload encolado.

    Raises:
        ValueError: tipo desconocido o campos faltantes/mal formados.
    """
    try:
        cls = _EVENT_TYPES[payload["event_type"]]
        common = dict(
            id=UUID(str(payload["id"])),
            created_at=datetime.fromisoformat(str(payload["created_at"])),
            plate_id=UUID(str(payload["plate_id"])),
            registration=str(payload["registration"]),
        )
        if cls is PlateReservedIntegrationEvent:
            return cls(
                **common,
                sale_price=Decimal(str(payload["sale_price"])),
                reserved_date=datetime.fromisoformat(str(payload["reserved_date"])),
            )
        if cls is PlateSoldIntegrationEvent:
            promo_code = payload.get("promo_code")
            return cls(
                **common,
                purchase_price=Decimal(str(payload["purchase_price"])),
                sale_price=Decimal(str(payload["sale_price"])),
                sold_price=Decimal(str(payload["sold_price"])),
                promo_code=None if promo_code is None else str(promo_code),
                profit_margin=Decimal(str(payload["profit_margin"])),
                sold_date=datetime.fromisoformat(str(payload["sold_date"])),
            )
        return cls(**common)
    except (KeyError, TypeError, ArithmeticError) as exc:
        raise ValueError(f"Malformed integration event payload: {exc}") from exc
