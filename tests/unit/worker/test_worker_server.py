"""
Name: Worker HTTP Server Tests

Responsibilities:
  - /healthz and /metrics answer on the worker's side port
"""

import json
from urllib.error import HTTPError
from urllib.request import urlopen

import pytest

from catalog.worker.worker_server import start_worker_http_server

pytestmark = pytest.mark.unit


@pytest.fixture
def base_url():
    server = start_worker_http_server(0)
    assert server is not None
    host, port = server.server_address[:2]
    yield f"http://127.0.0.1:{port}"
    server.shutdown()
    server.server_close()


def test_healthz(base_url):
    with urlopen(f"{base_url}/healthz", timeout=5) as response:
        assert response.status == 200
        assert json.loads(response.read()) == {"ok": True}


def test_metrics(base_url):
    with urlopen(f"{base_url}/metrics", timeout=5) as response:
        assert response.status == 200
        assert b"catalog_audit_worker_processed_total" in response.read()


def test_unknown_path(base_url):
    with pytest.raises(HTTPError) as exc_info:
        urlopen(f"{base_url}/nope", timeout=5)

    assert exc_info.value.code == 404
