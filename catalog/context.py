"""
===============================================================================
CRC CARD — catalog/context.py (Request / job scoped context)
===============================================================================

Responsibilities:
  - Guardar valores por request/job en ContextVars (seguros para threads y async).
  - Llevar el acting user id para que la captura de auditoría resuelva "quién"
    sin pasarlo por cada llamada.
  - Helpers chicos: set_*(), get_context_dict(), clear_context().

Collaborators:
  - identity.current_user.CurrentUserService: lee acting_user_id_var.
  - crosscutting.logger: enriquece los log records con get_context_dict().
  - worker.jobs: setea el job id por job y limpia el contexto al terminar.

Constraints:
  - Solo strings primitivos (serializables).
  - String vacío significa "no disponible".
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

# Request id o job id de RQ.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Acting user id crudo, tal como llega del host (p. ej. un header X-User-Id).
acting_user_id_var: ContextVar[str] = ContextVar("acting_user_id", default="")

# Origen de la unit of work ("HTTP", "WORKER", "CLI" ...) y su handler.
origin_var: ContextVar[str] = ContextVar("origin", default="")
handler_var: ContextVar[str] = ContextVar("handler", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_USER_ID: Final[str] = "acting_user_id"
_CTX_ORIGIN: Final[str] = "origin"
_CTX_HANDLER: Final[str] = "handler"


def set_request_context(
    *, request_id: str = "", acting_user_id: str = "", origin: str = "", handler: str = ""
) -> None:
    """Setea el contexto mínimo del request o job actual."""
    request_id_var.set(request_id or "")
    acting_user_id_var.set(acting_user_id or "")
    origin_var.set(origin or "")
    handler_var.set(handler or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, sin las claves vacías."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := acting_user_id_var.get():
        ctx[_CTX_USER_ID] = val
    if val := origin_var.get():
        ctx[_CTX_ORIGIN] = val
    if val := handler_var.get():
        ctx[_CTX_HANDLER] = val

    return ctx


def clear_context() -> None:
    """
    Resetea el contexto al final de un request/job.

    Evita que el contexto se filtre entre jobs del mismo proceso worker.
    """
    request_id_var.set("")
    acting_user_id_var.set("")
    origin_var.set("")
    handler_var.set("")
