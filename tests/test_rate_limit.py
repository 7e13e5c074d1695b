from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from folio.middleware.rate_limit import RateLimitMiddleware


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _app(limit: str, clock: _Clock) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, limit=limit, clock=clock)

    @app.get("/ping")
    def ping():
        return {"pong": True}

    return app


def test_requests_over_limit_get_429_with_retry_after() -> None:
    clock = _Clock()
    client = TestClient(_app("2/minute", clock))

    assert client.get("/ping").status_code == 200
    clock.now += 15
    assert client.get("/ping").status_code == 200

    response = client.get("/ping")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "45"
    assert response.json()["error"] == "rate_limit_exceeded"


def test_window_resets() -> None:
    clock = _Clock()
    client = TestClient(_app("1/second", clock))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 429

    clock.now += 1
    assert client.get("/ping").status_code == 200


def test_clients_are_counted_separately() -> None:
    clock = _Clock()
    client = TestClient(_app("1/minute", clock))

    assert client.get("/ping", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 200
    assert client.get("/ping", headers={"X-Forwarded-For": "10.0.0.2, 172.16.0.1"}).status_code == 200
    assert client.get("/ping", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429
