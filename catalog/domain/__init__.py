"""
===============================================================================
CRC CARD — domain/__init__.py
===============================================================================

Module:
    Exports de la capa de dominio

Responsibilities:
    - Centralizar exports para imports limpios desde application/infrastructure.
    - Mantener estable la superficie del dominio.

Rules:
    - Solo re-exporta contratos y entidades del dominio.
    - Nunca importar infrastructure acá.
===============================================================================
"""

from .audit import (
    NIL_USER_ID,
    AuditAction,
    AuditLogEvent,
    AuditLogEventChange,
    AuditWorkItem,
    FieldChange,
)
from .entities import (
    MINIMUM_SALE_RATIO,
    MONEY_QUANTUM,
    SALE_MARKUP,
    Plate,
    PlateStatus,
    to_money,
)
from .errors import (
    DomainError,
    InvalidPromoCode,
    InvalidStateTransition,
    PriceBelowMinimum,
)
from .events import (
    IntegrationEvent,
    PlateReservedIntegrationEvent,
    PlateSoldIntegrationEvent,
    PlateUnreservedIntegrationEvent,
    integration_event_from_payload,
)
from .repositories import AuditLogRepository, PlateRepository
from .services import AuditPublisher, CurrentUserProvider, IntegrationEventPublisher

__all__ = [
    # Entities
    "Plate",
    "PlateStatus",
    "SALE_MARKUP",
    "MINIMUM_SALE_RATIO",
    "MONEY_QUANTUM",
    "to_money",
    # Audit
    "AuditAction",
    "AuditLogEvent",
    "AuditLogEventChange",
    "AuditWorkItem",
    "FieldChange",
    "NIL_USER_ID",
    # Integration events
    "IntegrationEvent",
    "PlateReservedIntegrationEvent",
    "PlateUnreservedIntegrationEvent",
    "PlateSoldIntegrationEvent",
    "integration_event_from_payload",
    # Errors
    "DomainError",
    "InvalidPromoCode",
    "InvalidStateTransition",
    "PriceBelowMinimum",
    # Ports
    "AuditLogRepository",
    "PlateRepository",
    "AuditPublisher",
    "CurrentUserProvider",
    "IntegrationEventPublisher",
]
