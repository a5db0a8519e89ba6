"""
===============================================================================
USE CASE: Create Plate
===============================================================================

Business Goal:
    Dar de alta una matrícula en stock, con el markup estándar.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    CreatePlateUseCase

Responsibilities:
    - Validar el input (precio de compra no negativo).
    - Redondear el precio de compra a centavos antes de que llegue a la entidad.
    - Derivar el sale_price guardado a partir del precio de compra.
    - Agregar la plate en su propia unit of work.

Collaborators:
    - application.unit_of_work.UnitOfWorkFactory
    - domain.entities.Plate / to_money
    - plate_results.PlateResult / PlateError

Notes:
    - Una plate nueva entra a la unit of work como ADDED y no produce item de
      auditoría: solo se auditan modificaciones de plates existentes.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

from ....crosscutting.logger import logger
from ....domain.entities import Plate, to_money
from ...unit_of_work import UnitOfWorkFactory
from .plate_results import PlateError, PlateErrorCode, PlateResult


@dataclass(frozen=True)
class CreatePlateInput:
    registration: str | None
    letters: str | None
    numbers: int
    purchase_price: Decimal
    plate_id: UUID | None = None


class CreatePlateUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, input_data: CreatePlateInput) -> PlateResult:
        if input_data.purchase_price < 0:
            return PlateResult(
                error=PlateError(
                    code=PlateErrorCode.VALIDATION_ERROR,
                    message="Purchase price cannot be negative.",
                )
            )

        plate = Plate(
            id=input_data.plate_id or uuid4(),
            registration=_clean(input_data.registration),
            letters=_clean(input_data.letters),
            numbers=input_data.numbers,
            purchase_price=to_money(input_data.purchase_price),
        )
        plate.sale_price = plate.calculate_sale_price()

        with self._uow_factory() as uow:
            uow.plates.add(plate)
            uow.commit()

        logger.info(
            "Plate created",
            extra={"plate_id": str(plate.id), "registration": plate.registration},
        )
        return PlateResult(plate=plate)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
