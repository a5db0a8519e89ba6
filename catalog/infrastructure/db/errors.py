"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Component:
  Errores tipados de pool/conectividad

Responsibilities:
  - Evitar RuntimeError genérico.
  - Dar significado claro: "no inicializado", "ya inicializado", etc.
===============================================================================
"""


class DatabasePoolError(RuntimeError):
    """Base de los errores del pool de DB."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() se llamó más de una vez."""


class PoolNotInitializedError(DatabasePoolError):
    """Se usó el pool antes de init_pool()."""


class DatabaseConnectionError(DatabasePoolError):
    """No se pudo obtener o validar una conexión."""
