"""
Конверт ответов API: единый формат для успеха и ошибок.

Успех: { "success": true, "data": <payload> }
Ошибка: { "success": false, "error": "<code>", "message": "<text>" }

Коды ошибок: not_found, backend_failure, malformed_record,
validation_error, rate_limit_exceeded, internal_server_error.
"""
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """Успешный ответ: data — пост, список постов, секции портфолио и т.п."""

    success: bool = True
    data: T | None = Field(default=None, description="Тело ответа")


class ErrorResponse(BaseModel):
    """Ответ с ошибкой. Подробности сбоя хранилища клиенту не отдаём — они в логе."""

    success: bool = False
    error: str = Field(..., description="Код ошибки (not_found, backend_failure, ...)")
    message: str = Field(..., description="Человекочитаемое сообщение")
