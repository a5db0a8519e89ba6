"""
============================================================
CRC CARD — infrastructure/repositories/postgres/unit_of_work.py
============================================================
Class: PostgresUnitOfWork

Responsibilities:
  - Retener una conexión del pool durante toda la transacción de negocio.
  - Cargar plates (las trackea la UnitOfWork base para detectar cambios).
  - Escribir plates ADDED con INSERT y MODIFIED con UPDATE.
  - Commit / rollback de la conexión; devolverla al pool al salir.

Collaborators:
  - application.unit_of_work.UnitOfWork (template)
  - psycopg_pool.ConnectionPool (getconn/putconn)
  - crosscutting.exceptions.DatabaseError (contrato de error de infraestructura)
  - crosscutting.logger

Constraints / Notes:
  - Las queries siempre van parametrizadas.
  - Los interceptores corren alrededor de _persist/_commit; la captura de
    auditoría ocurre antes de mandar cualquier SQL del commit.
============================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Sequence
from uuid import UUID

from psycopg_pool import ConnectionPool

from ....application.unit_of_work import (
    TrackedEntry,
    UnitOfWork,
    UnitOfWorkInterceptor,
)
from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import Plate, PlateStatus

_SELECT_PLATE = """
    SELECT id, registration, letters, numbers, purchase_price, sale_price,
           status, reserved_date, sold_date, sold_price, promo_code_used
    FROM plates
    WHERE id = %s
"""

_INSERT_PLATE = """
    INSERT INTO plates (
        id, registration, letters, numbers, purchase_price, sale_price,
        status, reserved_date, sold_date, sold_price, promo_code_used
    )
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
"""

_UPDATE_PLATE = """
    UPDATE plates
    SET registration = %s,
        letters = %s,
        numbers = %s,
        purchase_price = %s,
        sale_price = %s,
        status = %s,
        reserved_date = %s,
        sold_date = %s,
        sold_price = %s,
        promo_code_used = %s
    WHERE id = %s
"""


class PostgresUnitOfWork(UnitOfWork):
    def __init__(
        self,
        pool: ConnectionPool | None = None,
        interceptors: Sequence[UnitOfWorkInterceptor] = (),
    ) -> None:
        super().__init__(interceptors)
        self._pool = pool
        self._conn = None

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # ------------------------------------------------------------
    # Ciclo de vida de la conexión
    # ------------------------------------------------------------
    def _begin(self) -> None:
        try:
            self._conn = self._get_pool().getconn()
        except Exception as exc:
            logger.exception(
                "PostgresUnitOfWork: Failed to acquire connection",
                extra={"transaction_id": str(self.id)},
            )
            raise DatabaseError(f"Failed to acquire connection: {exc}") from exc

    def _close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        self._get_pool().putconn(conn)

    def _require_conn(self):
        if self._conn is None:
            raise DatabaseError("Unit of work used outside of its `with` block")
        return self._conn

    # ------------------------------------------------------------
    # Hooks del backend
    # ------------------------------------------------------------
    def _load_plate(self, plate_id: UUID) -> Optional[Plate]:
        try:
            row = self._require_conn().execute(_SELECT_PLATE, (plate_id,)).fetchone()
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(
                "PostgresUnitOfWork: Failed to load plate",
                extra={"plate_id": str(plate_id)},
            )
            raise DatabaseError(f"Failed to load plate: {exc}") from exc

        return _row_to_plate(row) if row else None

    def _persist(
        self, *, added: Iterable[TrackedEntry], modified: Iterable[TrackedEntry]
    ) -> None:
        conn = self._require_conn()
        try:
            for entry in added:
                conn.execute(_INSERT_PLATE, _insert_params(entry.entity))
            for entry in modified:
                conn.execute(_UPDATE_PLATE, _update_params(entry.entity))
        except Exception as exc:
            logger.exception(
                "PostgresUnitOfWork: Failed to write plates",
                extra={"transaction_id": str(self.id)},
            )
            raise DatabaseError(f"Failed to write plates: {exc}") from exc

    def _commit(self) -> None:
        try:
            self._require_conn().commit()
        except Exception as exc:
            logger.exception(
                "PostgresUnitOfWork: Commit failed",
                extra={"transaction_id": str(self.id)},
            )
            raise DatabaseError(f"Commit failed: {exc}") from exc

    def _rollback(self) -> None:
        if self._conn is not None:
            self._conn.rollback()


def _row_to_plate(row: tuple) -> Plate:
    (
        plate_id,
        registration,
        letters,
        numbers,
        purchase_price,
        sale_price,
        status,
        reserved_date,
        sold_date,
        sold_price,
        promo_code_used,
    ) = row
    return Plate(
        id=plate_id,
        registration=registration,
        letters=letters,
        numbers=numbers or 0,
        purchase_price=Decimal(purchase_price),
        sale_price=Decimal(sale_price),
        status=PlateStatus(status),
        reserved_date=reserved_date,
        sold_date=sold_date,
        sold_price=Decimal(sold_price) if sold_price is not None else None,
        promo_code_used=promo_code_used,
    )


def _column_values(plate: Plate) -> tuple:
    return (
        plate.registration,
        plate.letters,
        plate.numbers,
        plate.purchase_price,
        plate.sale_price,
        plate.status.value,
        plate.reserved_date,
        plate.sold_date,
        plate.sold_price,
        plate.promo_code_used,
    )


def _insert_params(plate: Plate) -> tuple:
    return (plate.id, *_column_values(plate))


def _update_params(plate: Plate) -> tuple:
    return (*_column_values(plate), plate.id)
