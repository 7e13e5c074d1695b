"""
Строка хранилища -> модель. Чистые функции, без побочных эффектов.

Не та форма строки (нет обязательных полей, неверные типы) -> MalformedRecord.
"""
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from folio.core.errors import MalformedRecord, normalize_error
from folio.schemas.content import BlogPost, PortfolioItem, PortfolioSection


def _map(model: type[BaseModel], row: Any):
    # operation заполнит вызывающая функция чтения (normalize_error)
    if not isinstance(row, Mapping):
        raise MalformedRecord(f"Expected a mapping, got {type(row).__name__}")
    try:
        return model.model_validate(dict(row))
    except ValidationError as exc:
        raise normalize_error(exc, "", record_id=row.get("id")) from exc


def to_blog_post(row: Mapping[str, Any]) -> BlogPost:
    return _map(BlogPost, row)


def to_portfolio_item(row: Mapping[str, Any]) -> PortfolioItem:
    return _map(PortfolioItem, row)


def to_portfolio_section(row: Mapping[str, Any], items: list[PortfolioItem] | None = None) -> PortfolioSection:
    """Секция; items, если переданы, заменяют вложенные в строку."""
    section = _map(PortfolioSection, row)
    if items is not None:
        section = section.model_copy(update={"items": items})
    return section
