# catalog/crosscutting/exceptions.py
"""
===============================================================================
MODULE: Excepciones tipadas del backend (errores internos)
===============================================================================

Goal
----
Excepciones internas con:
- un error_code estable
- un error_id para correlacionar con logs
- un mensaje legible (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  CatalogError + subclasses

Responsibilities:
  - Estandarizar los errores de infraestructura de repositorios y adaptadores
  - Generar un error_id para trazabilidad

Collaborators:
  - infrastructure/repositories/postgres (lanzan DatabaseError)
  - worker/jobs.py (loguea y re-lanza para la re-entrega)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4


@dataclass(frozen=True)
class ErrorResponse:
    """Forma mínima y consistente del error para quien necesite serializarlo."""

    error_code: str
    message: str
    error_id: str

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class CatalogError(Exception):
    """Base de los errores internos (no de dominio) del catálogo."""

    error_code: str = "CATALOG_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code, message=self.message, error_id=self.error_id
        )


class DatabaseError(CatalogError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"
