"""
Неудачный FetchResult -> HTTPException с кодом вида ошибки.

Сообщение клиенту общее, подробности уже в логе (report_error).
"""
from fastapi import HTTPException

from folio.core.errors import ErrorKind
from folio.services.content import FetchResult

_MESSAGES = {
    ErrorKind.BACKEND_FAILURE: "Content is temporarily unavailable",
    ErrorKind.MALFORMED_RECORD: "Stored content is invalid",
}


def raise_for_failure(result: FetchResult) -> None:
    if result.error is None:
        return
    kind = result.error.kind
    raise HTTPException(
        503,
        detail={"error": kind.value, "message": _MESSAGES.get(kind, "Content read failed")},
    )
