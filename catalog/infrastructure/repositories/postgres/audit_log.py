"""
============================================================
CRC CARD — infrastructure/repositories/postgres/audit_log.py
============================================================
Class: PostgresAuditLogRepository

Responsibilities:
  - Persistir un AuditLogEvent y sus filas de cambio en UNA transacción
    (audit_log_events + audit_log_event_changes).
  - Garantizar idempotencia con el dedupe_key único
    (INSERT ... ON CONFLICT DO NOTHING).
  - Aplicar un statement timeout por llamada cuando el caller tiene deadline.

Collaborators:
  - domain.audit.AuditLogEvent
  - psycopg_pool.ConnectionPool
  - crosscutting.exceptions.DatabaseError
  - crosscutting.logger

Constraints / Notes:
  - Append-only: las filas nunca se actualizan.
  - La conexión es independiente de cualquier unit of work de negocio.
============================================================
"""

from __future__ import annotations

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.audit import AuditLogEvent

_INSERT_EVENT = """
    INSERT INTO audit_log_events (id, plate_id, user_id, timestamp, status, dedupe_key)
    VALUES (%s, %s, %s, %s, %s, %s)
    ON CONFLICT (dedupe_key) DO NOTHING
    RETURNING id
"""

_INSERT_CHANGE = """
    INSERT INTO audit_log_event_changes (
        id, audit_log_event_id, field_name, old_value, new_value
    )
    VALUES (%s, %s, %s, %s, %s)
"""


class PostgresAuditLogRepository:
    """Audit store PostgreSQL (audit_log_events / audit_log_event_changes)."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def record_event(
        self, event: AuditLogEvent, *, statement_timeout_ms: int | None = None
    ) -> bool:
        """
        Inserta el evento y sus cambios.

        Returns:
          - True si se escribieron las filas.
          - False si ya existe un evento con la misma dedupe key.
        """
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    if statement_timeout_ms is not None:
                        conn.execute(
                            "SELECT set_config('statement_timeout', %s, true)",
                            (str(int(statement_timeout_ms)),),
                        )

                    row = conn.execute(
                        _INSERT_EVENT,
                        (
                            event.id,
                            event.plate_id,
                            event.user_id,
                            event.timestamp,
                            event.status.value,
                            event.dedupe_key,
                        ),
                    ).fetchone()

                    if row is None:
                        return False

                    with conn.cursor() as cur:
                        cur.executemany(
                            _INSERT_CHANGE,
                            [
                                (
                                    change.id,
                                    event.id,
                                    change.field_name,
                                    change.old_value,
                                    change.new_value,
                                )
                                for change in event.changes
                            ],
                        )
            return True

        except Exception as exc:
            logger.exception(
                "PostgresAuditLogRepository: Failed to record audit event",
                extra={
                    "event_id": str(event.id),
                    "plate_id": str(event.plate_id),
                    "action": event.status.value,
                    "error": str(exc),
                },
            )
            raise DatabaseError(f"Failed to record audit event: {exc}") from exc
