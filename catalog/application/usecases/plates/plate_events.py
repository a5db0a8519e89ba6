"""
===============================================================================
PLATE INTEGRATION EVENTS (post-commit)
===============================================================================

Responsibilities:
    - Construir el integration event de cada transición a partir de la plate
      ya confirmada.
    - Publicarlo después del commit sin que un fallo del broker cambie el
      resultado del caso de uso (la transición ya es durable).

Collaborators:
    - domain.events
    - domain.services.IntegrationEventPublisher
    - crosscutting.logger / crosscutting.metrics
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_integration_event
from ....domain.entities import Plate
from ....domain.events import (
    IntegrationEvent,
    PlateReservedIntegrationEvent,
    PlateSoldIntegrationEvent,
    PlateUnreservedIntegrationEvent,
)
from ....domain.services import IntegrationEventPublisher


def plate_reserved(plate: Plate) -> PlateReservedIntegrationEvent:
    return PlateReservedIntegrationEvent(
        plate_id=plate.id,
        registration=plate.registration or "",
        sale_price=plate.calculate_sale_price(),
        reserved_date=plate.reserved_date,
    )


def plate_unreserved(plate: Plate) -> PlateUnreservedIntegrationEvent:
    return PlateUnreservedIntegrationEvent(
        plate_id=plate.id,
        registration=plate.registration or "",
    )


def plate_sold(plate: Plate) -> PlateSoldIntegrationEvent:
    return PlateSoldIntegrationEvent(
        plate_id=plate.id,
        registration=plate.registration or "",
        purchase_price=plate.purchase_price,
        sale_price=plate.calculate_sale_price(),
        sold_price=plate.sold_price,
        promo_code=plate.promo_code_used,
        profit_margin=plate.calculate_profit_margin(),
        sold_date=plate.sold_date,
    )


def publish_after_commit(
    publisher: IntegrationEventPublisher | None, event: IntegrationEvent
) -> None:
    """Best-effort: loguea y cuenta el fallo, nunca lo propaga."""
    if publisher is None:
        return
    try:
        publisher.publish(event)
    except Exception:
        record_integration_event(event.event_type, "FAILED")
        logger.exception(
            "Failed to publish integration event",
            extra={
                "plate_id": str(event.plate_id),
                "event_type": event.event_type,
                "event_id": str(event.id),
            },
        )
        return
    record_integration_event(event.event_type, "ENQUEUED")
