from __future__ import annotations

from collections.abc import Iterator

import pytest
from conftest import FakeBackend
from fastapi.testclient import TestClient

from folio.core.backend import BackendError
from folio.core.database import get_backend
from folio.main import app


@pytest.fixture
def client(backend: FakeBackend) -> Iterator[TestClient]:
    # Lifespan is not entered: no MongoDB connection, the fake is injected instead.
    app.dependency_overrides[get_backend] = lambda: backend
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_lists_site_metadata(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["posts"] == "/posts"


def test_health_reports_database_state(client: TestClient, backend: FakeBackend) -> None:
    assert client.get("/health").json()["data"] == {"status": "ok", "database": "connected"}

    backend.error = BackendError("down")
    assert client.get("/health").json()["data"] == {"status": "ok", "database": "disconnected"}


def test_list_posts(client: TestClient) -> None:
    response = client.get("/posts")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["slug"] for p in data] == ["post-c", "post-a"]
    assert data[0]["reading_time_minutes"] == 1
    assert data[0]["author_id"] == "author-1"


def test_list_posts_by_tag(client: TestClient) -> None:
    response = client.get("/posts", params={"tag": "web"})

    assert [p["slug"] for p in response.json()["data"]] == ["post-a"]


def test_list_posts_backend_failure(client: TestClient, backend: FakeBackend) -> None:
    backend.error = BackendError("connection reset")

    response = client.get("/posts")

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "error": "backend_failure",
        "message": "Content is temporarily unavailable",
    }


def test_get_post(client: TestClient) -> None:
    response = client.get("/posts/post-a")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "a"


def test_get_unpublished_post_is_404(client: TestClient) -> None:
    response = client.get("/posts/post-b")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_get_post_backend_failure(client: TestClient, backend: FakeBackend) -> None:
    backend.error = BackendError("timeout")

    assert client.get("/posts/post-a").status_code == 503


def test_record_view(client: TestClient, backend: FakeBackend) -> None:
    response = client.post("/posts/post-a/views")

    assert response.status_code == 200
    assert response.json()["data"] == {"recorded": True}
    assert client.get("/posts/post-a").json()["data"]["views"] == 1


def test_record_view_write_failure_is_soft(client: TestClient, backend: FakeBackend) -> None:
    def failing_increment(*args, **kwargs):
        raise BackendError("read-only replica")

    backend.increment = failing_increment  # type: ignore[method-assign]

    response = client.post("/posts/post-a/views")

    assert response.status_code == 200
    assert response.json()["data"] == {"recorded": False}


def test_record_view_unknown_post(client: TestClient) -> None:
    assert client.post("/posts/missing/views").status_code == 404


def test_portfolio_sections(client: TestClient) -> None:
    response = client.get("/portfolio/sections")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [s["id"] for s in data] == ["s1", "s2"]
    assert [i["id"] for i in data[0]["items"]] == ["i2", "i1"]
    assert data[1]["items"] == []


def test_portfolio_malformed_rows(client: TestClient, backend: FakeBackend) -> None:
    backend.tables["portfolio_sections"].append({"id": "s3", "display_order": 3})

    response = client.get("/portfolio/sections")

    assert response.status_code == 503
    assert response.json()["error"] == "malformed_record"


def test_unknown_route_is_structured(client: TestClient) -> None:
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False
