"""
===============================================================================
CRC CARD — identity/current_user.py
===============================================================================

Class:
    CurrentUserService

Responsibilities:
    - Resolver el usuario actuante del request/job actual desde el contexto
      ambiente (context.acting_user_id_var).
    - Caer al UUID nulo si no hay nadie identificado, para que la captura de
      auditoría siempre pueda armar el work item.

Collaborators:
    - context.acting_user_id_var (lo setea el host desde un header X-User-Id,
      un flag de CLI o un argumento del job)
    - domain.services.CurrentUserProvider (puerto que implementa)
    - application.auditing.coordinator (único consumidor)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ..context import acting_user_id_var
from ..crosscutting.logger import logger
from ..domain.audit import NIL_USER_ID


class CurrentUserService:
    def get_user_id_or_default(self) -> UUID:
        raw = (acting_user_id_var.get() or "").strip()
        if not raw:
            return NIL_USER_ID

        try:
            return UUID(raw)
        except ValueError:
            logger.warning(
                "Ignoring malformed acting user id", extra={"acting_user_id": raw}
            )
            return NIL_USER_ID
