# =============================================================================
# FILE: infrastructure/repositories/in_memory/audit_log.py
# =============================================================================
"""
Audit log in-memory para tests y desarrollo.

NO PARA PRODUCCIÓN: los datos se pierden al reiniciar.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.audit import AuditLogEvent


class InMemoryAuditLogRepository:
    """
    Implementación in-memory de AuditLogRepository.

    La dedupe key cumple el rol del unique constraint de la tabla real.
    """

    def __init__(self) -> None:
        self._events: Dict[str, AuditLogEvent] = {}  # dedupe_key -> event
        self._lock = threading.Lock()

    def record_event(
        self, event: AuditLogEvent, *, statement_timeout_ms: int | None = None
    ) -> bool:
        if not event.changes:
            raise ValueError("An audit event needs at least one change")

        with self._lock:
            if event.dedupe_key in self._events:
                return False
            self._events[event.dedupe_key] = event
            return True

    def list_events(
        self,
        *,
        plate_id: Optional[UUID] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
    ) -> List[AuditLogEvent]:
        """Eventos ordenados por timestamp, más nuevos primero (rango inclusivo)."""
        with self._lock:
            results = list(self._events.values())

        if plate_id is not None:
            results = [e for e in results if e.plate_id == plate_id]
        if start_at is not None:
            results = [e for e in results if e.timestamp >= start_at]
        if end_at is not None:
            results = [e for e in results if e.timestamp <= end_at]

        results.sort(key=lambda e: e.timestamp, reverse=True)
        return results

    # -------------------------------------------------------------------------
    # Helpers de testing
    # -------------------------------------------------------------------------
    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._events)
