"""
===============================================================================
CRC CARD — domain/audit.py
===============================================================================

Module:
    Modelos de auditoría (work item en tránsito + evento durable)

Responsibilities:
    - Definir el set cerrado de acciones de auditoría (AuditAction).
    - Definir el payload entre la captura y el consumidor (AuditWorkItem +
      FieldChange) y su encoding JSON-safe.
    - Definir el registro durable (AuditLogEvent + AuditLogEventChange).
    - Derivar una dedupe key determinística para que un unique constraint
      rechace los items re-entregados.

Collaborators:
    - application.auditing.coordinator: arma el AuditWorkItem.
    - infrastructure.queue: lo serializa con to_payload().
    - worker.jobs: lo reconstruye con from_payload().
    - application.usecases.audit: lo mapea a AuditLogEvent.

Notes:
    - El audit log es append-only: los eventos se crean una vez y nunca se
      actualizan.
    - Los ids de evento/cambio se generan al persistir, no al capturar.
===============================================================================
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping
from uuid import UUID, uuid4

# Límites de columna de audit_log_event_changes.
FIELD_NAME_MAX_LENGTH = 128
VALUE_MAX_LENGTH = 1024

NIL_USER_ID = UUID(int=0)


class AuditAction(str, Enum):
    """Significado semántico de una escritura auditada."""

    UNKNOWN = "Unknown"
    PLATE_UPDATED = "PlateUpdated"
    PLATE_RESERVED = "PlateReserved"
    PLATE_UNRESERVED = "PlateUnreserved"
    PLATE_SOLD = "PlateSold"


@dataclass(frozen=True, slots=True)
class FieldChange:
    """Un delta de campo, ya pasado a string en el diff."""

    field_name: str
    old_value: str | None
    new_value: str | None

    def to_payload(self) -> dict[str, Any]:
        return {
            "field_name": self.field_name,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }


@dataclass(frozen=True, slots=True)
class AuditWorkItem:
    """
    Payload transitorio que produce la captura y procesa el consumidor.

    Contract:
      - changes nunca está vacío (si no, no hay nada que auditar).
      - timestamp_utc es timezone aware (UTC).
    """

    plate_id: UUID
    user_id: UUID
    timestamp_utc: datetime
    status: AuditAction
    changes: tuple[FieldChange, ...]

    def __post_init__(self) -> None:
        if not self.changes:
            raise ValueError("AuditWorkItem requires at least one change")
        if self.timestamp_utc.tzinfo is None:
            object.__setattr__(
                self, "timestamp_utc", self.timestamp_utc.replace(tzinfo=timezone.utc)
            )

    @property
    def dedupe_key(self) -> str:
        """
        Huella determinística del cambio capturado.

        Misma plate + usuario + timestamp + acción + cambios en orden -> misma
        key: una re-entrega del broker cae sobre la fila ya persistida.
        """
        canonical = json.dumps(
            {
                "plate_id": str(self.plate_id),
                "user_id": str(self.user_id),
                "timestamp_utc": self.timestamp_utc.isoformat(),
                "status": self.status.value,
                "changes": [c.to_payload() for c in self.changes],
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    # -------------------------------------------------------------------------
    # Contrato de transporte (JSON-safe: strings, listas, dicts)
    # -------------------------------------------------------------------------

    def to_payload(self) -> dict[str, Any]:
        return {
            "plate_id": str(self.plate_id),
            "user_id": str(self.user_id),
            "timestamp_utc": self.timestamp_utc.isoformat(),
            "status": self.status.value,
            "changes": [c.to_payload() for c in self.changes],
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AuditWorkItem":
        """
        Reconstruye un work item desde su payload encolado.

        Raises:
            ValueError: si falta un campo o está mal formado.
        """
        try:
            changes = tuple(
                FieldChange(
                    field_name=str(c["field_name"]),
                    old_value=_optional_str(c.get("old_value")),
                    new_value=_optional_str(c.get("new_value")),
                )
                for c in payload["changes"]
            )
            return cls(
                plate_id=UUID(str(payload["plate_id"])),
                user_id=UUID(str(payload["user_id"])),
                timestamp_utc=datetime.fromisoformat(str(payload["timestamp_utc"])),
                status=AuditAction(payload["status"]),
                changes=changes,
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed audit payload: {exc}") from exc


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _truncate(value: str | None, limit: int) -> str | None:
    if value is None or len(value) <= limit:
        return value
    return value[:limit]


@dataclass(slots=True)
class AuditLogEventChange:
    """Fila durable: un delta de campo que pertenece a un AuditLogEvent."""

    id: UUID
    field_name: str
    old_value: str | None = None
    new_value: str | None = None


@dataclass(slots=True)
class AuditLogEvent:
    """Registro durable de una escritura capturada sobre una plate."""

    id: UUID
    plate_id: UUID
    user_id: UUID
    timestamp: datetime
    status: AuditAction
    dedupe_key: str
    changes: list[AuditLogEventChange] = field(default_factory=list)

    @classmethod
    def from_work_item(cls, item: AuditWorkItem) -> "AuditLogEvent":
        """Mapea un work item recibido a un evento nuevo con ids frescos."""
        return cls(
            id=uuid4(),
            plate_id=item.plate_id,
            user_id=item.user_id,
            timestamp=item.timestamp_utc,
            status=item.status,
            dedupe_key=item.dedupe_key,
            changes=_map_changes(item.changes),
        )


def _map_changes(changes: Iterable[FieldChange]) -> list[AuditLogEventChange]:
    return [
        AuditLogEventChange(
            id=uuid4(),
            field_name=_truncate(c.field_name, FIELD_NAME_MAX_LENGTH) or "",
            old_value=_truncate(c.old_value, VALUE_MAX_LENGTH),
            new_value=_truncate(c.new_value, VALUE_MAX_LENGTH),
        )
        for c in changes
    ]
