"""
===============================================================================
USE CASE: Get Plate
===============================================================================

Class:
    GetPlateUseCase

Responsibilities:
    - Cargar una plate.
    - Recalcular sale_price en la lectura si el valor guardado falta o quedó
      viejo, SIN persistirlo (la unit of work nunca se confirma).

Collaborators:
    - application.unit_of_work.UnitOfWorkFactory
    - domain.entities.Plate.refresh_sale_price
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ...unit_of_work import UnitOfWorkFactory
from .plate_results import PlateResult, not_found_error


class GetPlateUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, plate_id: UUID) -> PlateResult:
        with self._uow_factory() as uow:
            plate = uow.plates.get(plate_id)

        if plate is None:
            return PlateResult(error=not_found_error())

        plate.refresh_sale_price()
        return PlateResult(plate=plate)
