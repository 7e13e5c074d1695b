"""
Health check: жив ли сервис, доступно ли хранилище.

Эндпоинт для оркестраторов (Docker, k8s) и мониторинга.
"""
import logging

from fastapi import APIRouter, Depends

from folio.core.backend import Backend, BackendError
from folio.core.database import get_backend
from folio.schemas.common import SuccessResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=SuccessResponse[dict])
def health(backend: Backend = Depends(get_backend)):
    """Проверка живости сервиса и БД."""
    try:
        backend.ping()
        database = "connected"
    except BackendError as exc:
        logger.warning("Health check: backend ping failed: %s", exc)
        database = "disconnected"
    return SuccessResponse(data={"status": "ok", "database": database})
