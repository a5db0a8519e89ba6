"""
===============================================================================
CRC CARD — application/usecases/__init__.py
===============================================================================

Responsibilities:
    - Punto único de import de los casos de uso que usan container.py y el
      worker.

Subpackages:
    - plates: escrituras validadas por estado (create/update/reserve/unreserve/
      sell) y lecturas (get/calculate price).
    - audit: el consumidor que persiste los audit work items publicados.
===============================================================================
"""

from .audit import RecordAuditResult, RecordAuditWorkItemUseCase
from .plates import (
    CalculatePriceUseCase,
    CreatePlateInput,
    CreatePlateUseCase,
    GetPlateUseCase,
    PlateError,
    PlateErrorCode,
    PlateResult,
    PriceQuoteResult,
    ReservePlateUseCase,
    SellPlateUseCase,
    UnreservePlateUseCase,
    UpdatePlatePriceUseCase,
)

__all__ = [
    "RecordAuditResult",
    "RecordAuditWorkItemUseCase",
    "CalculatePriceUseCase",
    "CreatePlateInput",
    "CreatePlateUseCase",
    "GetPlateUseCase",
    "PlateError",
    "PlateErrorCode",
    "PlateResult",
    "PriceQuoteResult",
    "ReservePlateUseCase",
    "SellPlateUseCase",
    "UnreservePlateUseCase",
    "UpdatePlatePriceUseCase",
]
