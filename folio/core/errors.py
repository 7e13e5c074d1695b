"""
Нормализация ошибок чтения контента.

Любая ошибка хранилища или маппинга сводится к одному из трёх видов:
not_found (ожидаемо, не ошибка), backend_failure, malformed_record.
Вызывающий код ветвится только по ErrorKind, а не по кодам драйвера.
"""
import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError

from folio.core.backend import BackendError

# Коды BackendError, означающие «строки нет»
NOT_FOUND_CODES = frozenset({"not_found"})


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    BACKEND_FAILURE = "backend_failure"
    MALFORMED_RECORD = "malformed_record"


class ContentError(Exception):
    """Базовая ошибка слоя контента. operation и context — для диагностики в логах."""

    kind: ErrorKind = ErrorKind.BACKEND_FAILURE

    def __init__(self, message: str, operation: str = "", **context: Any):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context

    def describe(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        where = f"{self.operation}({params})" if self.operation else "content read"
        return f"{where}: {self.message}"


class NotFound(ContentError):
    kind = ErrorKind.NOT_FOUND


class BackendFailure(ContentError):
    kind = ErrorKind.BACKEND_FAILURE


class MalformedRecord(ContentError):
    kind = ErrorKind.MALFORMED_RECORD


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or "Record failed validation"


def normalize_error(exc: Exception, operation: str, **context: Any) -> ContentError:
    """
    Ошибку хранилища/маппинга -> ContentError.

    Неизвестные исключения (ошибки программиста) не глотаются — пробрасываются дальше.
    """
    if isinstance(exc, ContentError):
        if not exc.operation:
            exc.operation = operation
            exc.context = {**context, **exc.context}
        return exc
    if isinstance(exc, BackendError):
        cls = NotFound if exc.code in NOT_FOUND_CODES else BackendFailure
        return cls(exc.message or "Backend request failed", operation, **context)
    if isinstance(exc, ValidationError):
        return MalformedRecord(_validation_message(exc), operation, **context)
    raise exc


def report_error(error: ContentError, log: logging.Logger) -> None:
    """Одна запись в лог на ошибку: not_found — DEBUG, остальное — ERROR."""
    if error.kind is ErrorKind.NOT_FOUND:
        log.debug("Not found: %s", error.describe())
    else:
        log.error("%s: %s", error.kind.value, error.describe())
