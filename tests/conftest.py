from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Any

import pytest

# Before folio.main is imported: no throttling across the test session.
os.environ.setdefault("RATE_LIMIT", "100000/minute")

from folio.core.backend import BackendError  # noqa: E402


def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    for key, expected in filters.items():
        actual = row.get(key)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class FakeBackend:
    """In-memory stand-in for MongoBackend.

    Tables are lists of row dicts. Setting ``error`` makes every call raise it.
    """

    def __init__(self, tables: dict[str, list[dict]] | None = None) -> None:
        self.tables: dict[str, list[dict]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.error: BackendError | None = None
        self.calls: list[tuple[str, str]] = []

    def query(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        ordering: Sequence[tuple[str, bool]] = (),
    ) -> list[dict]:
        self.calls.append(("query", table))
        if self.error is not None:
            raise self.error
        rows = [dict(r) for r in self.tables.get(table, []) if _matches(r, filters or {})]
        for name, ascending in reversed(list(ordering)):
            present = [r for r in rows if r.get(name) is not None]
            missing = [r for r in rows if r.get(name) is None]
            present.sort(key=lambda r: r[name], reverse=not ascending)
            rows = present + missing
        return rows

    def increment(self, table: str, record_id: str, field: str, amount: int = 1) -> bool:
        self.calls.append(("increment", table))
        if self.error is not None:
            raise self.error
        for row in self.tables.get(table, []):
            if row.get("id") == record_id:
                row[field] = (row.get(field) or 0) + amount
                return True
        return False

    def ping(self) -> None:
        self.calls.append(("ping", ""))
        if self.error is not None:
            raise self.error


def make_post(post_id: str, slug: str, **fields: Any) -> dict:
    row = {
        "id": post_id,
        "slug": slug,
        "title": f"Post {post_id}",
        "content": "Some words here",
        "published": True,
        "published_at": "2024-01-01T00:00:00+00:00",
        "user_id": "author-1",
    }
    row.update(fields)
    return row


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(
        {
            "blog_posts": [
                make_post("a", "post-a", published_at="2024-02-01T10:00:00+00:00", tags=["Python", "web"]),
                make_post("b", "post-b", published=False, published_at=None),
                make_post("c", "post-c", published_at="2024-03-15T08:30:00+00:00", tags=["python"]),
            ],
            "portfolio_sections": [
                {"id": "s2", "title": "Talks", "display_order": 2},
                {"id": "s1", "title": "Projects", "display_order": 1},
            ],
            "portfolio_items": [
                {"id": "i1", "section_id": "s1", "title": "Compiler", "display_order": 2},
                {"id": "i2", "section_id": "s1", "title": "Blog engine", "display_order": 1},
            ],
        }
    )
