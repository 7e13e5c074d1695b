"""
Схемы контента сайта: посты блога и секции портфолио.

Строки из хранилища валидируются этими моделями (см. services/mappers.py),
они же отдаются в ответах API.
"""
import math
from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

WORDS_PER_MINUTE = 225
META_DESCRIPTION_LENGTH = 160
# Символы, допустимые в URL без экранирования
SLUG_PATTERN = r"^[A-Za-z0-9._~-]+$"


def _unique_tags(value: object) -> list[str]:
    """Теги — множество строк: None -> [], дубли убираем, порядок сохраняем."""
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError("tags must be a list of strings")
    seen: list[str] = []
    for tag in value:
        if not isinstance(tag, str):
            raise ValueError("tags must be a list of strings")
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class BlogPost(BaseModel):
    """Пост блога."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    slug: str = Field(min_length=1, pattern=SLUG_PATTERN)
    title: str
    content: str | None = None
    excerpt: str | None = None
    cover_image_url: str | None = None
    published: bool = False
    published_at: datetime | None = None
    author_id: str | None = Field(default=None, validation_alias=AliasChoices("author_id", "user_id"))
    tags: list[str] = []
    views: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v):
        return _unique_tags(v)

    @field_validator("views", mode="before")
    @classmethod
    def _views(cls, v):
        return 0 if v is None else v

    @computed_field
    @property
    def reading_time_minutes(self) -> int:
        words = len((self.content or "").split())
        return max(1, math.ceil(words / WORDS_PER_MINUTE))

    @computed_field
    @property
    def meta_description(self) -> str:
        if self.excerpt:
            return self.excerpt
        if self.content:
            return self.content[:META_DESCRIPTION_LENGTH].replace("\n", " ")
        return self.title


class PortfolioItem(BaseModel):
    """Элемент секции портфолио."""

    id: str
    section_id: str
    title: str
    subtitle: str | None = None
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    tags: list[str] = []
    featured: bool = False
    display_order: int = 0

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v):
        return _unique_tags(v)

    @field_validator("display_order", "featured", mode="before")
    @classmethod
    def _null_to_default(cls, v, info):
        if v is None:
            return 0 if info.field_name == "display_order" else False
        return v


class PortfolioSection(BaseModel):
    """Секция портфолио с упорядоченными элементами."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    type: Literal["markdown", "list_items", "gallery"] = "list_items"
    content: str | None = None
    display_order: int = 0
    items: list[PortfolioItem] = Field(
        default=[], validation_alias=AliasChoices("items", "portfolio_items")
    )

    @field_validator("display_order", mode="before")
    @classmethod
    def _order(cls, v):
        return 0 if v is None else v

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, v):
        return [] if v is None else v
