from __future__ import annotations

from fastapi.testclient import TestClient

from src.protocol.http.app import create_app


def test_healthz_ok_and_request_id() -> None:
    client = TestClient(create_app())
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers.get("x-request-id")
    assert r.headers.get("x-elapsed-ms") is not None


def test_request_id_is_echoed() -> None:
    client = TestClient(create_app())
    r = client.get("/healthz", headers={"x-request-id": "abc123"})
    assert r.headers["x-request-id"] == "abc123"
