"""
===============================================================================
CRC CARD — domain/entities.py
===============================================================================

Module:
    Domain entities (Plate, PlateStatus)

Responsibilities:
    - Definir el objeto de negocio auditado: una matrícula en venta.
    - Ser dueño del ciclo de vida: ForSale -> Reserved -> Sold,
      Reserved -> ForSale.
    - Ser dueño de las reglas de precio atadas a la entidad (markup, piso,
      ganancia) y del redondeo monetario a 2 decimales.

Collaborators:
    - domain.errors: InvalidStateTransition / PriceBelowMinimum.
    - application.auditing.field_diff: toma snapshots de estos campos.
    - domain.repositories.PlateRepository: persiste/carga plates.

Principles:
    - Sin dependencias de DB/Redis.
    - Las transiciones de estado pasan SOLO por métodos; el código de
      aplicación nunca asigna los campos de estado a mano.
    - Todo importe que se guarda sale de to_money() (columnas NUMERIC(18,2)).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from .errors import InvalidStateTransition, PriceBelowMinimum

# Markup del 20% sobre el precio de compra.
SALE_MARKUP = Decimal("1.20")

# Una venta no puede quedar por debajo del 90% del precio de venta calculado.
MINIMUM_SALE_RATIO = Decimal("0.90")

MONEY_QUANTUM = Decimal("0.01")


def _utcnow() -> datetime:
    """Hora actual en UTC (helper interno)."""
    return datetime.now(timezone.utc)


def to_money(value: Decimal) -> Decimal:
    """Redondea un importe a centavos (half-up), igual que lo guarda la DB."""
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


class PlateStatus(str, Enum):
    """Estado del ciclo de vida de una matrícula."""

    FOR_SALE = "ForSale"
    RESERVED = "Reserved"
    SOLD = "Sold"


@dataclass
class Plate:
    """
    Matrícula en stock.

    Invariantes:
      - reserved_date está seteado sii la plate fue reservada en el ciclo actual.
      - sold_price / sold_date / promo_code_used están seteados sii status es SOLD.

    Nota:
      - sale_price se guarda, pero también se deriva de purchase_price;
        ver refresh_sale_price().
    """

    id: UUID
    registration: Optional[str] = None
    letters: Optional[str] = None
    numbers: int = 0
    purchase_price: Decimal = Decimal("0")
    sale_price: Decimal = Decimal("0")

    # Estado de negocio
    status: PlateStatus = PlateStatus.FOR_SALE
    reserved_date: Optional[datetime] = None
    sold_date: Optional[datetime] = None
    sold_price: Optional[Decimal] = None
    promo_code_used: Optional[str] = None

    # -------------------------------------------------------------------------
    # Máquina de estados
    # -------------------------------------------------------------------------

    def reserve(self, *, now: datetime | None = None) -> None:
        """ForSale -> Reserved."""
        if self.status is not PlateStatus.FOR_SALE:
            raise InvalidStateTransition(self.status, "Reserve")

        self.status = PlateStatus.RESERVED
        self.reserved_date = now or _utcnow()

    def unreserve(self) -> None:
        """Reserved -> ForSale; se limpia la fecha de reserva."""
        if self.status is not PlateStatus.RESERVED:
            raise InvalidStateTransition(self.status, "Unreserve")

        self.status = PlateStatus.FOR_SALE
        self.reserved_date = None

    def sell(
        self,
        final_price: Decimal,
        promo_code: str | None = None,
        *,
        now: datetime | None = None,
    ) -> None:
        """
        Reserved -> Sold.

        El precio final no puede quedar por debajo de MINIMUM_SALE_RATIO del
        precio de venta calculado; el valor límite se acepta.
        """
        if self.status is not PlateStatus.RESERVED:
            raise InvalidStateTransition(self.status, "Sell")

        minimum = self.calculate_sale_price() * MINIMUM_SALE_RATIO
        if final_price < minimum:
            raise PriceBelowMinimum(final_price, minimum)

        self.status = PlateStatus.SOLD
        self.sold_price = to_money(final_price)
        self.sold_date = now or _utcnow()
        self.promo_code_used = promo_code

    # -------------------------------------------------------------------------
    # Precios
    # -------------------------------------------------------------------------

    def calculate_sale_price(self) -> Decimal:
        return to_money(self.purchase_price * SALE_MARKUP)

    def calculate_profit(self) -> Decimal:
        if self.sold_price is None:
            return Decimal("0")
        return self.sold_price - self.purchase_price

    def calculate_profit_margin(self) -> Decimal:
        """(vendido - compra) / vendido; 0 si no se vendió o se vendió a 0."""
        if self.sold_price is None or self.sold_price == 0:
            return Decimal("0")
        return (self.sold_price - self.purchase_price) / self.sold_price

    def refresh_sale_price(self) -> bool:
        """
        Recalcula sale_price cuando el valor guardado falta o quedó viejo.

        Devuelve True si el valor cambió. Quien llama decide si el valor
        recalculado se persiste (escrituras) o solo se muestra (lecturas).
        """
        expected = self.calculate_sale_price()
        if self.sale_price == expected:
            return False
        self.sale_price = expected
        return True

    @property
    def is_sold(self) -> bool:
        return self.status is PlateStatus.SOLD
