"""
===============================================================================
CRC CARD — domain/errors.py
===============================================================================

Module:
    Errores de dominio (violaciones de reglas de negocio)

Responsibilities:
    - Nombrar las únicas fallas que ve quien usa la máquina de estados.
    - Llevar los datos que explican el rechazo (estado, precios).

Collaborators:
    - domain.entities.Plate: los lanza desde reserve/unreserve/sell.
    - application.pricing: lanza InvalidPromoCode.
    - application.usecases.plates: los mapea a resultados con PlateErrorCode.

Notes:
    - Son rechazos: nunca se reintentan.
    - Las fallas de infraestructura viven en crosscutting.exceptions.
===============================================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entities import PlateStatus


class DomainError(Exception):
    """Base de las violaciones de reglas de negocio."""

    code: str = "DOMAIN_ERROR"


class InvalidStateTransition(DomainError):
    """La operación pedida no es legal desde el status actual de la plate."""

    code = "INVALID_STATE_TRANSITION"

    def __init__(self, current: "PlateStatus", operation: str) -> None:
        self.current = current
        self.operation = operation
        super().__init__(
            f"Cannot {operation.lower()} plate in {current.value} status."
        )


class PriceBelowMinimum(DomainError):
    """El precio final queda bajo el 90% del precio de venta calculado."""

    code = "PRICE_BELOW_MINIMUM"

    def __init__(self, final_price: Decimal, minimum: Decimal) -> None:
        self.final_price = final_price
        self.minimum = minimum
        super().__init__(
            f"Sale price £{final_price:,.2f} is below the minimum allowed price "
            f"of £{minimum:,.2f} (90% of sale price)."
        )


class InvalidPromoCode(DomainError):
    """Promo code que el catálogo no reconoce."""

    code = "INVALID_PROMO_CODE"

    def __init__(self, promo_code: str) -> None:
        self.promo_code = promo_code
        super().__init__(f"Invalid promo code: {promo_code}")
