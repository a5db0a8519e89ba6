"""
Implementaciones in-memory de los repositorios.

Para tests y desarrollo local. NO PARA PRODUCCIÓN.
Los datos se pierden al reiniciar el proceso.
"""

from .audit_log import InMemoryAuditLogRepository
from .plate_store import InMemoryPlateStore, InMemoryUnitOfWork

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryPlateStore",
    "InMemoryUnitOfWork",
]
