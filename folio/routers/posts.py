"""
Публичное чтение блога: список опубликованных постов, пост по slug, просмотры.

Роутер вызывает сервис, ошибку чтения превращает в структурированный 503,
отсутствие поста — в 404.
"""
from fastapi import APIRouter, Depends, HTTPException

from folio.core.backend import Backend
from folio.core.database import get_backend
from folio.routers.errors import raise_for_failure
from folio.schemas.common import ErrorResponse, SuccessResponse
from folio.schemas.content import BlogPost
from folio.services import content

router = APIRouter(prefix="/posts", tags=["posts"])

_NOT_FOUND = {"error": "not_found", "message": "Post not found"}


def _published_post(backend: Backend, slug: str) -> BlogPost:
    result = content.fetch_post_by_slug(backend, slug)
    raise_for_failure(result)
    if result.data is None:
        raise HTTPException(404, detail=_NOT_FOUND)
    return result.data


@router.get(
    "",
    response_model=SuccessResponse[list[BlogPost]],
    responses={503: {"model": ErrorResponse}},
)
def list_posts(tag: str | None = None, backend: Backend = Depends(get_backend)):
    """Опубликованные посты, новые первыми. ?tag= — только с этим тегом."""
    if tag is not None and tag.strip():
        result = content.fetch_posts_by_tag(backend, tag)
    else:
        result = content.fetch_published_posts(backend)
    raise_for_failure(result)
    return SuccessResponse(data=result.data)


@router.get(
    "/{slug}",
    response_model=SuccessResponse[BlogPost],
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def get_post(slug: str, backend: Backend = Depends(get_backend)):
    """Один опубликованный пост."""
    return SuccessResponse(data=_published_post(backend, slug))


@router.post(
    "/{slug}/views",
    response_model=SuccessResponse[dict],
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def add_view(slug: str, backend: Backend = Depends(get_backend)):
    """Засчитать просмотр. Неудачная запись счётчика страницу не ломает: recorded=false."""
    post = _published_post(backend, slug)
    recorded = content.record_post_view(backend, post.id)
    return SuccessResponse(data={"recorded": recorded})
