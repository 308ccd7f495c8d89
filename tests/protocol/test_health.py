from __future__ import annotations

from fastapi.testclient import TestClient

from gambit.config import Settings
from gambit.protocol.http.app import create_app


def test_healthz_ok() -> None:
    client = TestClient(create_app(Settings()))
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert "x-request-id" in r.headers
