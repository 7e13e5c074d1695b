"""
Чтение опубликованного контента: посты блога и секции портфолио.

Каждая функция делает одно логическое чтение через переданный адаптер
(Backend), маппит строки в модели и гарантирует порядок сама, не полагаясь
на сортировку хранилища.

Ошибки не пробрасываются вызывающему (fail-soft): fetch_* возвращают
FetchResult, где «пусто» и «не удалось» различимы; list_*/get_* — прежний
контракт, где при ошибке просто пустой список / None. Каждая ошибка
пишется в лог ровно один раз.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import ValidationError

from folio.core.backend import Backend, BackendError
from folio.core.errors import ContentError, MalformedRecord, NotFound, normalize_error, report_error
from folio.schemas.content import BlogPost, PortfolioItem, PortfolioSection
from folio.services.mappers import to_blog_post, to_portfolio_item, to_portfolio_section

logger = logging.getLogger(__name__)

POSTS_TABLE = "blog_posts"
SECTIONS_TABLE = "portfolio_sections"
ITEMS_TABLE = "portfolio_items"

# Ошибки, которые превращаются в FetchResult. Прочие исключения пробрасываются.
_READ_ERRORS = (BackendError, ContentError, ValidationError)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Результат чтения: data + error (None, если чтение удалось)."""

    data: T
    error: ContentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def empty(self) -> bool:
        """Чтение удалось, но данных нет: [] у списков, None у промаха по slug."""
        return self.ok and not self.data


def _failed(default, exc: Exception, operation: str, **context) -> FetchResult:
    error = normalize_error(exc, operation, **context)
    report_error(error, logger)
    return FetchResult(default, error)


def _require_text(name: str, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")


def _pk(record_id: str) -> tuple:
    """Порядок первичного ключа: числовые id — как числа."""
    return (0, int(record_id), "") if record_id.isdecimal() else (1, 0, record_id)


def _timestamp(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _newest_first(posts: list[BlogPost]) -> list[BlogPost]:
    """published_at по убыванию, без даты — в конце, равные — по id."""
    by_pk = sorted(posts, key=lambda p: _pk(p.id))
    return sorted(
        by_pk,
        key=lambda p: (p.published_at is not None, _timestamp(p.published_at) if p.published_at else 0.0),
        reverse=True,
    )


def _by_display_order(records: list):
    return sorted(records, key=lambda r: (r.display_order, _pk(r.id)))


def _published_posts(backend: Backend) -> list[BlogPost]:
    rows = backend.query(
        POSTS_TABLE,
        filters={"published": True},
        ordering=[("published_at", False)],
    )
    return [post for post in map(to_blog_post, rows) if post.published]


# ==================== Blog ====================


def fetch_published_posts(backend: Backend) -> FetchResult[list[BlogPost]]:
    """Все опубликованные посты, новые первыми."""
    try:
        posts = _published_posts(backend)
    except _READ_ERRORS as exc:
        return _failed([], exc, "list_published_posts")
    return FetchResult(_newest_first(posts))


def fetch_posts_by_tag(backend: Backend, tag: str) -> FetchResult[list[BlogPost]]:
    """Опубликованные посты с тегом (без учёта регистра), новые первыми."""
    _require_text("tag", tag)
    wanted = tag.strip().lower()
    try:
        posts = _published_posts(backend)
    except _READ_ERRORS as exc:
        return _failed([], exc, "list_posts_by_tag", tag=tag)
    tagged = [p for p in posts if wanted in {t.lower() for t in p.tags}]
    return FetchResult(_newest_first(tagged))


def fetch_post_by_slug(backend: Backend, slug: str) -> FetchResult[BlogPost | None]:
    """
    Опубликованный пост с точным (регистрозависимым) совпадением slug.

    Нет такого поста — FetchResult(None) без ошибки (not_found пишется только в DEBUG).
    Несколько постов на один slug — нарушение уникальности, malformed_record.
    """
    _require_text("slug", slug)
    try:
        rows = backend.query(POSTS_TABLE, filters={"slug": slug, "published": True})
        matches = [p for p in map(to_blog_post, rows) if p.published and p.slug == slug]
        if not matches:
            raise NotFound("No published post with this slug")
        if len(matches) > 1:
            raise MalformedRecord(f"Slug is not unique: {len(matches)} published posts")
    except _READ_ERRORS as exc:
        result = _failed(None, exc, "get_post_by_slug", slug=slug)
        if isinstance(result.error, NotFound):
            return FetchResult(None)
        return result
    return FetchResult(matches[0])


def record_post_view(backend: Backend, post_id: str) -> bool:
    """Увеличить счётчик просмотров поста. Ошибки — в лог, наружу только False."""
    _require_text("post_id", post_id)
    try:
        if not backend.increment(POSTS_TABLE, post_id, "views"):
            raise NotFound("No post with this id")
    except (BackendError, ContentError) as exc:
        report_error(normalize_error(exc, "record_post_view", post_id=post_id), logger)
        return False
    return True


# ==================== Portfolio ====================


def fetch_portfolio_sections(backend: Backend) -> FetchResult[list[PortfolioSection]]:
    """Секции по display_order, элементы внутри секции — тоже по display_order."""
    try:
        section_rows = backend.query(
            SECTIONS_TABLE,
            ordering=[("display_order", True), ("id", True)],
        )
        if not section_rows:
            return FetchResult([])
        sections = [to_portfolio_section(row) for row in section_rows]
        section_ids = [s.id for s in sections]
        item_rows = backend.query(
            ITEMS_TABLE,
            filters={"section_id": section_ids},
            ordering=[("display_order", True), ("id", True)],
        )
        items_by_section: dict[str, list[PortfolioItem]] = defaultdict(list)
        for item in map(to_portfolio_item, item_rows):
            items_by_section[item.section_id].append(item)
        sections = [
            s.model_copy(update={"items": _by_display_order(items_by_section.get(s.id, []))})
            for s in sections
        ]
    except _READ_ERRORS as exc:
        return _failed([], exc, "list_portfolio_sections_with_items")
    return FetchResult(_by_display_order(sections))


# ==================== Fail-soft контракт ====================


def list_published_posts(backend: Backend) -> list[BlogPost]:
    """При ошибке — []: «нет постов» и «не удалось» различимы только по логу."""
    return fetch_published_posts(backend).data


def get_post_by_slug(backend: Backend, slug: str) -> BlogPost | None:
    return fetch_post_by_slug(backend, slug).data


def list_portfolio_sections_with_items(backend: Backend) -> list[PortfolioSection]:
    return fetch_portfolio_sections(backend).data
