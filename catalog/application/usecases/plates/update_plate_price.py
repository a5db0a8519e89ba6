"""
===============================================================================
USE CASE: Update Plate Price
===============================================================================

Business Goal:
    Corregir el precio de compra de una plate; el sale price guardado lo sigue.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    UpdatePlatePriceUseCase

Responsibilities:
    - Validar el nuevo precio de compra y redondearlo a centavos.
    - Cargar la plate, setear purchase_price, recalcular sale_price, marcarla
      como modificada.
    - Commit; el interceptor de auditoría registra un item PlateUpdated.

Collaborators:
    - application.unit_of_work.UnitOfWorkFactory
    - domain.entities.to_money
    - plate_results.PlateResult / not_found_error

Notes:
    - Repetir el mismo precio confirma una entidad modificada sin deltas; no
      produce item de auditoría. Como el valor se redondea antes de compararse,
      "100" y "100.00" cuentan como el mismo precio.
===============================================================================
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import to_money
from ...unit_of_work import UnitOfWorkFactory
from .plate_results import PlateError, PlateErrorCode, PlateResult, not_found_error


class UpdatePlatePriceUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, plate_id: UUID, purchase_price: Decimal) -> PlateResult:
        if purchase_price < 0:
            return PlateResult(
                error=PlateError(
                    code=PlateErrorCode.VALIDATION_ERROR,
                    message="Purchase price cannot be negative.",
                )
            )
        purchase_price = to_money(purchase_price)

        with self._uow_factory() as uow:
            plate = uow.plates.get(plate_id)
            if plate is None:
                return PlateResult(error=not_found_error())

            plate.purchase_price = purchase_price
            plate.sale_price = plate.calculate_sale_price()
            uow.plates.update(plate)
            uow.commit()

        logger.info(
            "Plate price updated",
            extra={"plate_id": str(plate_id), "purchase_price": str(purchase_price)},
        )
        return PlateResult(plate=plate)
