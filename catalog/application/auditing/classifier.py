"""
===============================================================================
CRC CARD — application/auditing/classifier.py
===============================================================================

Module:
    Clasificador de la acción de auditoría

Responsibilities:
    - Mapear los deltas de una escritura de plate a una única AuditAction.

Rules (orden de prioridad):
    1) Delta de Status -> según el nuevo status tipado:
         Reserved -> PlateReserved
         ForSale  -> PlateUnreserved
         Sold     -> PlateSold
         otro     -> PlateUpdated
    2) Delta de PurchasePrice o SalePrice -> PlateUpdated
    3) si no -> Unknown

    Una transición de status siempre le gana a un cambio de precio en la
    misma escritura.

Collaborators:
    - application.auditing.field_diff.FieldDelta
    - domain.audit.AuditAction
===============================================================================
"""

from __future__ import annotations

from typing import Iterable

from ...domain.audit import AuditAction
from ...domain.entities import PlateStatus
from .field_diff import PURCHASE_PRICE, SALE_PRICE, STATUS, FieldDelta

_STATUS_ACTIONS: dict[PlateStatus, AuditAction] = {
    PlateStatus.RESERVED: AuditAction.PLATE_RESERVED,
    PlateStatus.FOR_SALE: AuditAction.PLATE_UNRESERVED,
    PlateStatus.SOLD: AuditAction.PLATE_SOLD,
}

_PRICE_FIELDS = frozenset({PURCHASE_PRICE, SALE_PRICE})


def classify(deltas: Iterable[FieldDelta]) -> AuditAction:
    deltas = list(deltas)

    status_delta = next((d for d in deltas if d.field_name == STATUS), None)
    if status_delta is not None:
        new_status = status_delta.new
        if isinstance(new_status, PlateStatus):
            return _STATUS_ACTIONS[new_status]
        return AuditAction.PLATE_UPDATED

    if any(d.field_name in _PRICE_FIELDS for d in deltas):
        return AuditAction.PLATE_UPDATED

    return AuditAction.UNKNOWN
