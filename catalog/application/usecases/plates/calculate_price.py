"""
===============================================================================
USE CASE: Calculate Price
===============================================================================

Class:
    CalculatePriceUseCase

Responsibilities:
    - Cotizar el precio de venta de una plate con un promo code dado.
    - Solo lectura: no se confirma ni se audita nada.

Notes:
    - El piso del 90% no se valida acá; una cotización puede ser un precio que
      SellPlateUseCase después rechace.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.errors import DomainError
from ...pricing import apply_promo_code
from ...unit_of_work import UnitOfWorkFactory
from .plate_results import PriceQuoteResult, from_domain_error, not_found_error


class CalculatePriceUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, plate_id: UUID, promo_code: str | None = None) -> PriceQuoteResult:
        with self._uow_factory() as uow:
            plate = uow.plates.get(plate_id)

        if plate is None:
            return PriceQuoteResult(error=not_found_error())

        try:
            price = apply_promo_code(plate.calculate_sale_price(), promo_code)
        except DomainError as exc:
            return PriceQuoteResult(error=from_domain_error(exc))

        return PriceQuoteResult(price=price)
