# schemas — Pydantic-модели: конверт ответа API и модели контента (пост, секция, элемент).
from folio.schemas.common import ErrorResponse, SuccessResponse
from folio.schemas.content import BlogPost, PortfolioItem, PortfolioSection

__all__ = ["SuccessResponse", "ErrorResponse", "BlogPost", "PortfolioItem", "PortfolioSection"]
