"""
===============================================================================
CRC CARD — application/usecases/plates/__init__.py
===============================================================================

Responsibilities:
    - Exportar los casos de uso de plates y sus modelos de resultado.

Notes:
    - Cada caso de uso de escritura abre exactamente una unit of work; la
      captura de auditoría la engancha el container, no el caso de uso.
    - reserve/unreserve/sell publican su integration event después del commit.
===============================================================================
"""

from .calculate_price import CalculatePriceUseCase
from .create_plate import CreatePlateInput, CreatePlateUseCase
from .get_plate import GetPlateUseCase
from .plate_results import (
    PlateError,
    PlateErrorCode,
    PlateResult,
    PriceQuoteResult,
)
from .reserve_plate import ReservePlateUseCase
from .sell_plate import SellPlateUseCase
from .unreserve_plate import UnreservePlateUseCase
from .update_plate_price import UpdatePlatePriceUseCase

__all__ = [
    "CalculatePriceUseCase",
    "CreatePlateInput",
    "CreatePlateUseCase",
    "GetPlateUseCase",
    "ReservePlateUseCase",
    "SellPlateUseCase",
    "UnreservePlateUseCase",
    "UpdatePlatePriceUseCase",
    "PlateError",
    "PlateErrorCode",
    "PlateResult",
    "PriceQuoteResult",
]
