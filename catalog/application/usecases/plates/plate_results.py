"""
===============================================================================
PLATE USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Dar a todos los casos de uso de plates el mismo contrato de resultado, para
    que los callers (una API, un CLI, tests) mapeen el resultado sin atrapar
    excepciones de dominio.

Why:
    - Los rechazos de reglas de negocio (transición ilegal, piso de precio,
      promo inválida) son resultados esperados, no crashes.
    - Las fallas de infraestructura sí lanzan; no son resultados de negocio.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    plate_results (module)

Responsibilities:
    - PlateErrorCode: categorías estables.
    - PlateError: código + mensaje legible.
    - PlateResult / PriceQuoteResult: payload de éxito o error.
    - from_domain_error(): único punto de mapeo DomainError -> PlateError.

Collaborators:
    - domain.entities.Plate
    - domain.errors.*
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ....domain.entities import Plate
from ....domain.errors import (
    DomainError,
    InvalidPromoCode,
    InvalidStateTransition,
    PriceBelowMinimum,
)


class PlateErrorCode(str, Enum):
    """Categorías de error de los casos de uso de plates."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    PRICE_BELOW_MINIMUM = "PRICE_BELOW_MINIMUM"
    INVALID_PROMO_CODE = "INVALID_PROMO_CODE"


@dataclass(frozen=True)
class PlateError:
    code: PlateErrorCode
    message: str


@dataclass
class PlateResult:
    """
    Contract:
      - error es None => hay plate
      - error seteado => plate es None
    """

    plate: Plate | None = None
    error: PlateError | None = None


@dataclass
class PriceQuoteResult:
    price: Decimal | None = None
    error: PlateError | None = None


_DOMAIN_CODES: dict[type[DomainError], PlateErrorCode] = {
    InvalidStateTransition: PlateErrorCode.INVALID_STATE_TRANSITION,
    PriceBelowMinimum: PlateErrorCode.PRICE_BELOW_MINIMUM,
    InvalidPromoCode: PlateErrorCode.INVALID_PROMO_CODE,
}


def from_domain_error(exc: DomainError) -> PlateError:
    code = _DOMAIN_CODES.get(type(exc), PlateErrorCode.VALIDATION_ERROR)
    return PlateError(code=code, message=str(exc))


def not_found_error() -> PlateError:
    return PlateError(code=PlateErrorCode.NOT_FOUND, message="Plate not found.")
