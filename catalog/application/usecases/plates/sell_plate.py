"""
===============================================================================
USE CASE: Sell Plate
===============================================================================

Business Goal:
    Cerrar la venta de una plate reservada, opcionalmente con promo code.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    SellPlateUseCase

Responsibilities:
    - Calcular el precio final: calculate_sale_price() + reglas de promo.
    - Delegar en Plate.sell(), que exige Reserved y el piso del 90%.
    - Commit; el interceptor de auditoría registra un item PlateSold.
    - Después del commit, publicar PlateSold.

Collaborators:
    - application.pricing.apply_promo_code / normalize_promo_code
    - application.unit_of_work.UnitOfWorkFactory
    - domain.services.IntegrationEventPublisher (opcional)
    - plate_results / plate_events

Error Mapping:
    - NOT_FOUND: la plate no existe
    - INVALID_PROMO_CODE: código desconocido
    - INVALID_STATE_TRANSITION: la plate no está Reserved
    - PRICE_BELOW_MINIMUM: la promo deja el precio bajo el piso
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.errors import DomainError
from ....domain.services import IntegrationEventPublisher
from ...pricing import apply_promo_code, normalize_promo_code
from ...unit_of_work import UnitOfWorkFactory
from .plate_events import plate_sold, publish_after_commit
from .plate_results import PlateResult, from_domain_error, not_found_error


class SellPlateUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] | None = None,
        events: IntegrationEventPublisher | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._events = events

    def execute(self, plate_id: UUID, promo_code: str | None = None) -> PlateResult:
        with self._uow_factory() as uow:
            plate = uow.plates.get(plate_id)
            if plate is None:
                return PlateResult(error=not_found_error())

            sale_price = plate.calculate_sale_price()
            try:
                final_price = apply_promo_code(sale_price, promo_code)
                plate.sell(
                    final_price,
                    normalize_promo_code(promo_code),
                    now=self._clock() if self._clock else None,
                )
            except DomainError as exc:
                return PlateResult(error=from_domain_error(exc))

            uow.plates.update(plate)
            uow.commit()

        logger.info(
            "Plate sold",
            extra={
                "plate_id": str(plate.id),
                "registration": plate.registration,
                "sale_price": str(sale_price),
                "final_price": str(final_price),
                "promo_code": plate.promo_code_used or "None",
            },
        )
        publish_after_commit(self._events, plate_sold(plate))
        return PlateResult(plate=plate)
