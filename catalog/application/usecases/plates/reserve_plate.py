"""
===============================================================================
USE CASE: Reserve Plate
===============================================================================

Business Goal:
    Apartar una plate para un comprador: ForSale -> Reserved.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    ReservePlateUseCase

Responsibilities:
    - Cargar la plate dentro de una unit of work.
    - Delegar la transición a Plate.reserve() (la entidad es dueña de las reglas).
    - Mapear rechazos del dominio a errores de PlateResult; en ese caso no se
      confirma nada.
    - Después del commit, publicar PlateReserved.

Collaborators:
    - application.unit_of_work.UnitOfWorkFactory
    - domain.services.IntegrationEventPublisher (opcional)
    - plate_results / plate_events

Flow:
    1) get plate -> NOT_FOUND si no existe
    2) plate.reserve() -> INVALID_STATE_TRANSITION si no está ForSale
    3) update + commit (la captura de auditoría corre dentro del commit)
    4) publish PlateReserved (best-effort)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.errors import DomainError
from ....domain.services import IntegrationEventPublisher
from ...unit_of_work import UnitOfWorkFactory
from .plate_events import plate_reserved, publish_after_commit
from .plate_results import PlateResult, from_domain_error, not_found_error


class ReservePlateUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] | None = None,
        events: IntegrationEventPublisher | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._events = events

    def execute(self, plate_id: UUID) -> PlateResult:
        with self._uow_factory() as uow:
            plate = uow.plates.get(plate_id)
            if plate is None:
                return PlateResult(error=not_found_error())

            try:
                plate.reserve(now=self._clock() if self._clock else None)
            except DomainError as exc:
                return PlateResult(error=from_domain_error(exc))

            uow.plates.update(plate)
            uow.commit()

        logger.info(
            "Plate reserved",
            extra={"plate_id": str(plate.id), "registration": plate.registration},
        )
        publish_after_commit(self._events, plate_reserved(plate))
        return PlateResult(plate=plate)
