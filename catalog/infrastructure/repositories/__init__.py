"""
============================================================
CRC CARD
============================================================
Package: catalog.infrastructure.repositories

Responsibilities:
- Exportar las units of work y audit stores concretos (Postgres e InMemory)
  desde un único punto de import.

Collaborators:
- Implementaciones Postgres (SQL crudo vía psycopg)
- Implementaciones InMemory (tests / entornos volátiles)
============================================================
"""

# ---------------------------
# Implementaciones in-memory
# Para unit tests rápidos y APP_ENV=test. Nada sobrevive a un reinicio.
# ---------------------------
from .in_memory import (
    InMemoryAuditLogRepository,
    InMemoryPlateStore,
    InMemoryUnitOfWork,
)

# ---------------------------
# Implementaciones Postgres
# ---------------------------
from .postgres import PostgresAuditLogRepository, PostgresUnitOfWork

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryPlateStore",
    "InMemoryUnitOfWork",
    "PostgresAuditLogRepository",
    "PostgresUnitOfWork",
]
