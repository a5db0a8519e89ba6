"""
===============================================================================
MÓDULO: Logger del catálogo (JSON o texto) con contexto de auditoría
===============================================================================

Responsabilidades
-----------------
- Una línea JSON por registro, con el contexto del request/job
  (catalog/context.py) y los extras del call site.
- Destacar el contexto de auditoría (plate_id, action, transaction_id,
  event_type, job_id) también en el formato de texto de desarrollo.
- Ocultar secretos por nombre de clave (incluye dicts anidados).

Colaboradores
-------------
- catalog/context.py (ContextVars)
- crosscutting/config.py (nivel y formato)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

REDACTED = "***REDACTED***"

_SECRET_KEYS = frozenset(
    {"password", "secret", "token", "authorization", "api_key", "database_url", "redis_url"}
)

# Claves que el formato de texto agrega al final del mensaje.
AUDIT_KEYS = ("transaction_id", "plate_id", "action", "event_type", "job_id")

# Atributos propios de LogRecord: todo lo demás vino por `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _redact(key: str, value: Any) -> Any:
    if key.lower() in _SECRET_KEYS:
        return REDACTED
    if isinstance(value, dict):
        return {str(k): _redact(str(k), v) for k, v in value.items()}
    return value


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        k: _redact(k, v) for k, v in vars(record).items() if k not in _RECORD_ATTRS
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **get_context_dict(),
            **_extras(record),
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "stacktrace": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


class AuditTextFormatter(logging.Formatter):
    """`LEVEL logger mensaje [plate_id=... action=...]` para desarrollo local."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        tags = " ".join(
            f"{key}={getattr(record, key)}" for key in AUDIT_KEYS if hasattr(record, key)
        )
        return f"{line} [{tags}]" if tags else line


def setup_logger(name: str = "catalog") -> logging.Logger:
    """Configura el logger una sola vez (re-importar no duplica handlers)."""
    log = logging.getLogger(name)
    if log.handlers:
        return log

    level, use_json = "INFO", True
    try:
        from .config import get_settings

        settings = get_settings()
        level, use_json = settings.log_level, settings.log_json
    except ValidationError:
        # Sin DATABASE_URL (herramientas, alembic offline): defaults.
        pass

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if use_json else AuditTextFormatter())
    log.addHandler(handler)
    log.setLevel(level)
    return log


logger = setup_logger()
