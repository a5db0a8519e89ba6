"""
Name: Promo Code Pricing

Responsibilities:
  - Convertir el precio de venta calculado de una plate en el precio final
    según el código promocional

Rules:
  - código vacío / ausente -> precio de venta sin cambios
  - DISCOUNT   -> £25 menos
  - PERCENTOFF -> 15% menos
  - los códigos no distinguen mayúsculas; cualquier otro se rechaza
    (InvalidPromoCode)

Notes:
  - El piso del 90% NO se valida acá; Plate.sell() es dueño de esa regla, así
    que una promo puede dar un precio que la venta igual va a rechazar.
  - El resultado sale redondeado a centavos (to_money).
"""

from __future__ import annotations

from decimal import Decimal

from ..domain.entities import to_money
from ..domain.errors import InvalidPromoCode

FLAT_DISCOUNT = Decimal("25")
PERCENT_OFF_RATIO = Decimal("0.85")


def normalize_promo_code(promo_code: str | None) -> str | None:
    """Código sin espacios, o None si está vacío."""
    if promo_code is None or not promo_code.strip():
        return None
    return promo_code.strip()


def apply_promo_code(sale_price: Decimal, promo_code: str | None) -> Decimal:
    code = normalize_promo_code(promo_code)
    if code is None:
        return to_money(sale_price)

    upper = code.upper()
    if upper == "DISCOUNT":
        return to_money(sale_price - FLAT_DISCOUNT)
    if upper == "PERCENTOFF":
        return to_money(sale_price * PERCENT_OFF_RATIO)

    raise InvalidPromoCode(code)
