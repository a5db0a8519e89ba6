"""
===============================================================================
CRC CARD — application/auditing/field_diff.py
===============================================================================

Module:
    Motor de diff por campo

Responsibilities:
    - Tomar snapshot de cada columna persistida de una plate (PlateSnapshot).
    - Comparar un snapshot original contra el actual sobre el set fijo de
      campos auditados y devolver deltas tipados (igualdad de valor).
    - Pasar los deltas a FieldChange (strings) en el momento del diff: una
      mutación posterior de la entidad no altera lo capturado.

Collaborators:
    - domain.entities.Plate / PlateStatus
    - domain.audit.FieldChange
    - application.unit_of_work.ChangeTracker (snapshots para detectar cambios)
    - application.auditing.classifier (consume FieldDelta)

Notes:
    - TRACKED_FIELDS es una tabla estática recorrida con un loop simple; su
      orden es el orden de los cambios en el work item.
    - Funciones puras, sin I/O.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional
from uuid import UUID

from ...domain.audit import FieldChange
from ...domain.entities import Plate, PlateStatus


@dataclass(frozen=True)
class PlateSnapshot:
    """Copia inmutable de los valores persistidos de una plate."""

    id: UUID
    registration: Optional[str]
    letters: Optional[str]
    numbers: int
    purchase_price: Decimal
    sale_price: Decimal
    status: PlateStatus
    reserved_date: Optional[datetime]
    sold_date: Optional[datetime]
    sold_price: Optional[Decimal]
    promo_code_used: Optional[str]

    @classmethod
    def of(cls, plate: Plate) -> "PlateSnapshot":
        return cls(
            id=plate.id,
            registration=plate.registration,
            letters=plate.letters,
            numbers=plate.numbers,
            purchase_price=plate.purchase_price,
            sale_price=plate.sale_price,
            status=plate.status,
            reserved_date=plate.reserved_date,
            sold_date=plate.sold_date,
            sold_price=plate.sold_price,
            promo_code_used=plate.promo_code_used,
        )


# Nombres de campo auditados, tal como quedan en audit_log_event_changes.field_name.
STATUS = "Status"
PURCHASE_PRICE = "PurchasePrice"
SALE_PRICE = "SalePrice"
RESERVED_DATE = "ReservedDate"
SOLD_DATE = "SoldDate"
SOLD_PRICE = "SoldPrice"
PROMO_CODE_USED = "PromoCodeUsed"

TRACKED_FIELDS: tuple[tuple[str, Callable[[PlateSnapshot], Any]], ...] = (
    (STATUS, lambda s: s.status),
    (PURCHASE_PRICE, lambda s: s.purchase_price),
    (SALE_PRICE, lambda s: s.sale_price),
    (RESERVED_DATE, lambda s: s.reserved_date),
    (SOLD_DATE, lambda s: s.sold_date),
    (SOLD_PRICE, lambda s: s.sold_price),
    (PROMO_CODE_USED, lambda s: s.promo_code_used),
)


@dataclass(frozen=True)
class FieldDelta:
    """Un campo cambiado con sus valores tipados original y actual."""

    field_name: str
    old: Any
    new: Any

    def to_change(self) -> FieldChange:
        return FieldChange(
            field_name=self.field_name,
            old_value=format_value(self.old),
            new_value=format_value(self.new),
        )


def format_value(value: Any) -> str | None:
    """Forma string guardada en el audit log (None sigue siendo None)."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def diff_plate(original: PlateSnapshot, current: PlateSnapshot) -> list[FieldDelta]:
    """Deltas de cada campo trackeado donde original != actual."""
    deltas: list[FieldDelta] = []
    for field_name, extract in TRACKED_FIELDS:
        old = extract(original)
        new = extract(current)
        if old != new:
            deltas.append(FieldDelta(field_name=field_name, old=old, new=new))
    return deltas
