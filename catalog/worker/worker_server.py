"""
===============================================================================
CRC CARD — worker/worker_server.py (HTTP liviano del worker)
===============================================================================

Responsibilities:
  - Exponer los endpoints operativos del worker:
      * GET /healthz  (liveness)
      * GET /metrics  (Prometheus)

Patterns:
  - HTTP server mínimo: http.server (sin framework web en el worker).
  - Best-effort: si el server no arranca, el worker sigue corriendo.

Collaborators:
  - crosscutting.metrics.get_metrics_response
===============================================================================
"""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlparse

from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response


class _WorkerHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:
        path = urlparse(self.path).path

        if path == "/healthz":
            self._write_json(200, {"ok": True})
            return

        if path == "/metrics":
            body, content_type = get_metrics_response()
            self.send_response(200)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            return

        self.send_response(404)
        self.end_headers()

    def log_message(self, format: str, *args) -> None:
        logger.debug(
            "Worker HTTP request",
            extra={
                "client": self.client_address[0] if self.client_address else None,
                "path": getattr(self, "path", None),
            },
        )

    def _write_json(self, status: int, payload: dict) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)


def start_worker_http_server(port: int) -> ThreadingHTTPServer | None:
    """Arranca el server en un thread daemon; None si no pudo hacer bind."""
    try:
        server = ThreadingHTTPServer(("0.0.0.0", port), _WorkerHandler)
    except OSError as exc:
        logger.warning("Worker HTTP server could not start", extra={"error": str(exc)})
        return None

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    logger.info("Worker HTTP server started", extra={"port": port})
    return server
