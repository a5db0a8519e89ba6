# =============================================================================
# FILE: infrastructure/repositories/in_memory/plate_store.py
# =============================================================================
"""
Storage de plates + unit of work in-memory, para tests y desarrollo.

NO PARA PRODUCCIÓN: los datos se pierden al reiniciar.

Semántica compartida con el backend Postgres:
  - cada unit of work trabaja sobre sus propias copias de las plates;
  - las escrituras se ven desde otras units of work recién al commit;
  - salir del bloque sin commit descarta lo stageado.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from ....application.unit_of_work import (
    TrackedEntry,
    UnitOfWork,
    UnitOfWorkInterceptor,
)
from ....domain.entities import Plate


class InMemoryPlateStore:
    """Dict thread-safe de plates confirmadas."""

    def __init__(self, plates: Iterable[Plate] = ()) -> None:
        self._plates: Dict[UUID, Plate] = {p.id: replace(p) for p in plates}
        self._lock = threading.Lock()

    def load(self, plate_id: UUID) -> Optional[Plate]:
        with self._lock:
            plate = self._plates.get(plate_id)
            return replace(plate) if plate is not None else None

    def save_all(self, plates: Iterable[Plate]) -> None:
        with self._lock:
            for plate in plates:
                self._plates[plate.id] = replace(plate)

    # -------------------------------------------------------------------------
    # Helpers de testing
    # -------------------------------------------------------------------------
    def all(self) -> List[Plate]:
        with self._lock:
            return [replace(p) for p in self._plates.values()]

    def clear(self) -> None:
        with self._lock:
            self._plates.clear()


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(
        self,
        store: InMemoryPlateStore,
        interceptors: Sequence[UnitOfWorkInterceptor] = (),
    ) -> None:
        super().__init__(interceptors)
        self._store = store
        self._staged: List[Plate] = []

    def _load_plate(self, plate_id: UUID) -> Optional[Plate]:
        return self._store.load(plate_id)

    def _persist(
        self, *, added: Iterable[TrackedEntry], modified: Iterable[TrackedEntry]
    ) -> None:
        self._staged = [e.entity for e in added] + [e.entity for e in modified]

    def _commit(self) -> None:
        self._store.save_all(self._staged)
        self._staged = []

    def _rollback(self) -> None:
        self._staged = []
