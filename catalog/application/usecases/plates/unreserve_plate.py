"""
===============================================================================
USE CASE: Unreserve Plate
===============================================================================

Class:
    UnreservePlateUseCase

Responsibilities:
    - Liberar una reserva: Reserved -> ForSale (se limpia reserved_date).
    - Mapear rechazos del dominio a errores de PlateResult.
    - Después del commit, publicar PlateUnreserved.

Collaborators:
    - application.unit_of_work.UnitOfWorkFactory
    - domain.services.IntegrationEventPublisher (opcional)
    - plate_results / plate_events
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.errors import DomainError
from ....domain.services import IntegrationEventPublisher
from ...unit_of_work import UnitOfWorkFactory
from .plate_events import plate_unreserved, publish_after_commit
from .plate_results import PlateResult, from_domain_error, not_found_error


class UnreservePlateUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        events: IntegrationEventPublisher | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._events = events

    def execute(self, plate_id: UUID) -> PlateResult:
        with self._uow_factory() as uow:
            plate = uow.plates.get(plate_id)
            if plate is None:
                return PlateResult(error=not_found_error())

            try:
                plate.unreserve()
            except DomainError as exc:
                return PlateResult(error=from_domain_error(exc))

            uow.plates.update(plate)
            uow.commit()

        logger.info(
            "Plate unreserved",
            extra={"plate_id": str(plate.id), "registration": plate.registration},
        )
        publish_after_commit(self._events, plate_unreserved(plate))
        return PlateResult(plate=plate)
