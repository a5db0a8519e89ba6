"""Implementaciones Postgres (producción)."""

from .audit_log import PostgresAuditLogRepository
from .unit_of_work import PostgresUnitOfWork

__all__ = ["PostgresAuditLogRepository", "PostgresUnitOfWork"]
