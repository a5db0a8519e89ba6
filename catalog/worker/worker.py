"""
===============================================================================
CRC CARD — worker/worker.py (proceso worker: auditoría + integration events)
===============================================================================

Responsibilities:
  - Consumir la cola de auditoría y la de integration events con un único
    rq.Worker (la de auditoría primero: RQ atiende las colas en orden).
  - Abrir el pool de DB antes del primer job y cerrarlo al salir.
  - Servir /healthz y /metrics en WORKER_HTTP_PORT.

Usage:
  catalog-audit-worker   (o: python -m catalog.worker.worker)
===============================================================================
"""

from __future__ import annotations

from redis import Redis
from rq import Queue, Worker

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..infrastructure.db.pool import close_pool, init_pool
from .worker_server import start_worker_http_server


def main() -> None:
    settings = get_settings()
    if not settings.redis_url.strip():
        raise SystemExit("REDIS_URL is required to run the audit worker.")

    redis_conn = Redis.from_url(settings.redis_url, socket_connect_timeout=2)
    queues = [
        Queue(name=name, connection=redis_conn)
        for name in (settings.audit_queue_name, settings.integration_events_queue_name)
    ]

    init_pool(
        database_url=settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    server = start_worker_http_server(settings.worker_http_port)
    logger.info(
        "Audit worker starting",
        extra={"queues": [q.name for q in queues], "http_port": settings.worker_http_port},
    )
    try:
        Worker(queues, connection=redis_conn).work(with_scheduler=False)
    finally:
        if server is not None:
            server.shutdown()
            server.server_close()
        close_pool()
        logger.info("Audit worker stopped")


if __name__ == "__main__":
    main()
