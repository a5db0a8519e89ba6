"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Component:
  Pool de conexiones PostgreSQL (singleton)

Responsibilities:
  - Inicializar, exponer y cerrar el pool del proceso.
  - Configurar cada conexión con el statement_timeout por defecto.

Collaborators:
  - psycopg_pool.ConnectionPool
  - crosscutting.config (db_statement_timeout_ms)
  - infrastructure/repositories/postgres (unit of work + audit store)

Principles:
  - Fail-fast (doble init, uso antes del init)
  - Un pool por proceso (proceso API, proceso worker)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError

_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _configure_connection(conn) -> None:
    """El pool lo aplica a cada conexión nueva."""
    from ...crosscutting.config import get_settings

    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {timeout_ms}")
        conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> ConnectionPool:
    """Inicializa el pool (una vez por proceso)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("Database pool already initialized.")

        logger.info(
            "Initializing DB pool",
            extra={"min_size": min_size, "max_size": max_size},
        )

        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_configure_connection,
            open=True,
        )

        logger.info(
            "DB pool initialized",
            extra={"min_size": min_size, "max_size": max_size},
        )
        return _pool


def get_pool() -> ConnectionPool:
    if _pool is None:
        raise PoolNotInitializedError(
            "Database pool not initialized. Call init_pool() first."
        )
    return _pool


def close_pool() -> None:
    """Cierra el pool (idempotente)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            logger.info("Closing DB pool")
            try:
                _pool.close()
            finally:
                _pool = None
            logger.info("DB pool closed")


def reset_pool() -> None:
    """Descarta el singleton sin fallar (tests)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            try:
                _pool.close()
            except Exception:
                logger.warning("Ignoring error while closing DB pool on reset")
        _pool = None
