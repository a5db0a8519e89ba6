"""
===============================================================================
CRC CARD — application/unit_of_work.py
===============================================================================

Module:
    Unit of Work + change tracking + hooks de intercepción

Responsibilities:
    - Delimitar una escritura de negocio atómica (la "transacción").
    - Trackear plates cargadas/agregadas con su snapshot original para poder
      calcular el conjunto de entidades modificadas al commit.
    - Exponer el ciclo de vida del commit a los interceptores:
        transaction_started -> saving_changes (pre-commit)
        -> saved_changes (post-commit) -> transaction_ended
    - Rollback si el bloque termina sin commit.

Collaborators:
    - application.auditing.field_diff.PlateSnapshot: snapshot de una plate.
    - application.auditing.coordinator: el interceptor de auditoría.
    - infrastructure/repositories/{in_memory,postgres}: backends concretos.

Patterns:
    - Unit of Work + Identity Map (ChangeTracker).
    - Template Method: commit() es fijo; los backends implementan _persist/_commit.
    - Interceptor: hooks registrados al construir, llamados en orden.

Notes:
    - Una unit of work es de un solo uso y de un solo thread.
    - Los interceptores reciben la unit of work pero no deben retenerla más
      allá del hook; el estado por transacción se indexa por uow.id.
===============================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, Sequence
from uuid import UUID, uuid4

from ..domain.entities import Plate
from ..domain.repositories import PlateRepository
from .auditing.field_diff import PlateSnapshot


class EntityState(str, Enum):
    """Estado de una entidad trackeada dentro de una unit of work."""

    ADDED = "ADDED"
    UNCHANGED = "UNCHANGED"
    MODIFIED = "MODIFIED"


@dataclass
class TrackedEntry:
    """Una plate más el snapshot que tenía al entrar a la unit of work."""

    entity: Plate
    original: PlateSnapshot
    state: EntityState

    def current(self) -> PlateSnapshot:
        return PlateSnapshot.of(self.entity)


class ChangeTracker:
    """Identity map por plate id."""

    def __init__(self) -> None:
        self._entries: dict[UUID, TrackedEntry] = {}

    def attach(self, plate: Plate) -> Plate:
        """Trackea una plate cargada del storage; devuelve la instancia trackeada."""
        existing = self._entries.get(plate.id)
        if existing is not None:
            return existing.entity
        self._entries[plate.id] = TrackedEntry(
            entity=plate,
            original=PlateSnapshot.of(plate),
            state=EntityState.UNCHANGED,
        )
        return plate

    def add(self, plate: Plate) -> None:
        if plate.id in self._entries:
            raise ValueError(f"Plate {plate.id} is already tracked")
        self._entries[plate.id] = TrackedEntry(
            entity=plate,
            original=PlateSnapshot.of(plate),
            state=EntityState.ADDED,
        )

    def get(self, plate_id: UUID) -> Plate | None:
        entry = self._entries.get(plate_id)
        return entry.entity if entry is not None else None

    def mark_modified(self, plate: Plate) -> None:
        entry = self._entries.get(plate.id)
        if entry is None:
            raise ValueError(f"Plate {plate.id} is not tracked")
        if entry.state is EntityState.UNCHANGED:
            entry.state = EntityState.MODIFIED

    def detect_changes(self) -> None:
        """Pasa a MODIFIED las entradas UNCHANGED cuyo snapshot ya no coincide."""
        for entry in self._entries.values():
            if entry.state is EntityState.UNCHANGED and entry.current() != entry.original:
                entry.state = EntityState.MODIFIED

    def entries(self, state: EntityState | None = None) -> list[TrackedEntry]:
        if state is None:
            return list(self._entries.values())
        return [e for e in self._entries.values() if e.state is state]

    def accept_changes(self) -> None:
        """Tras un commit exitoso los valores actuales pasan a ser los originales."""
        for entry in self._entries.values():
            entry.original = entry.current()
            entry.state = EntityState.UNCHANGED

    def __iter__(self) -> Iterator[TrackedEntry]:
        return iter(self.entries())


class UnitOfWorkInterceptor:
    """Hooks alrededor del ciclo de vida de la unit of work. Default: no-op."""

    def transaction_started(self, uow: "UnitOfWork") -> None:
        return None

    def saving_changes(self, uow: "UnitOfWork") -> None:
        return None

    def saved_changes(self, uow: "UnitOfWork") -> None:
        return None

    def transaction_ended(self, uow: "UnitOfWork") -> None:
        return None


class TrackedPlateRepository:
    """PlateRepository atado a una unit of work: las cargas pasan por el tracker."""

    def __init__(
        self, tracker: ChangeTracker, load: Callable[[UUID], Plate | None]
    ) -> None:
        self._tracker = tracker
        self._load = load

    def get(self, plate_id: UUID) -> Plate | None:
        tracked = self._tracker.get(plate_id)
        if tracked is not None:
            return tracked
        plate = self._load(plate_id)
        if plate is None:
            return None
        return self._tracker.attach(plate)

    def add(self, plate: Plate) -> None:
        self._tracker.add(plate)

    def update(self, plate: Plate) -> None:
        self._tracker.mark_modified(plate)


class UnitOfWork(ABC):
    """
    Una transacción de escritura.

    Usage:
        with uow_factory() as uow:
            plate = uow.plates.get(plate_id)
            plate.reserve()
            uow.commit()
    """

    plates: PlateRepository

    def __init__(self, interceptors: Sequence[UnitOfWorkInterceptor] = ()) -> None:
        self.id: UUID = uuid4()
        self.tracker = ChangeTracker()
        self.plates = TrackedPlateRepository(self.tracker, self._load_plate)
        self._interceptors: tuple[UnitOfWorkInterceptor, ...] = tuple(interceptors)
        self._committed = False

    # -------------------------------------------------------------------------
    # Context manager
    # -------------------------------------------------------------------------

    def __enter__(self) -> "UnitOfWork":
        self._begin()
        for interceptor in self._interceptors:
            interceptor.transaction_started(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if not self._committed:
                self.rollback()
        finally:
            try:
                self._close()
            finally:
                for interceptor in self._interceptors:
                    interceptor.transaction_ended(self)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def modified_entries(self) -> list[TrackedEntry]:
        """Entidades en estado MODIFIED; corre la detección de cambios antes."""
        self.tracker.detect_changes()
        return self.tracker.entries(EntityState.MODIFIED)

    def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Unit of work already committed")

        self.tracker.detect_changes()

        for interceptor in self._interceptors:
            interceptor.saving_changes(self)

        self._persist(
            added=self.tracker.entries(EntityState.ADDED),
            modified=self.modified_entries(),
        )
        self._commit()
        self._committed = True

        for interceptor in self._interceptors:
            interceptor.saved_changes(self)

        self.tracker.accept_changes()

    def rollback(self) -> None:
        self._rollback()

    @property
    def committed(self) -> bool:
        return self._committed

    # -------------------------------------------------------------------------
    # Hooks del backend
    # -------------------------------------------------------------------------

    def _begin(self) -> None:
        return None

    def _close(self) -> None:
        return None

    @abstractmethod
    def _load_plate(self, plate_id: UUID) -> Plate | None: ...

    @abstractmethod
    def _persist(
        self, *, added: Iterable[TrackedEntry], modified: Iterable[TrackedEntry]
    ) -> None: ...

    @abstractmethod
    def _commit(self) -> None: ...

    @abstractmethod
    def _rollback(self) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
