"""
Подключение к MongoDB (облако: Atlas и т.д.).

Один клиент на процесс: создаётся при старте (lifespan в main) из явно
переданных настроек и кладётся в app.state. Роутеры получают адаптер через
зависимость get_backend, сервисы — аргументом.
"""
import logging

from fastapi import Request
from pymongo import MongoClient

from folio.core.backend import Backend, MongoBackend
from folio.core.config import Settings

logger = logging.getLogger(__name__)


def connect_backend(config: Settings) -> MongoBackend:
    """Создать клиент и проверить доступность кластера. Вызывается в lifespan при старте."""
    client = MongoClient(
        config.MONGO_URI,
        serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS,
        appname=config.SITE_TITLE,
    )
    backend = MongoBackend(client, config.MONGO_DB_NAME)
    backend.ping()
    logger.info("Connected to MongoDB database %s", config.MONGO_DB_NAME)
    return backend


def close_backend(backend: MongoBackend | None) -> None:
    """Закрыть соединение. Вызывается в lifespan при остановке."""
    if backend is not None:
        backend.close()


def get_backend(request: Request) -> Backend:
    """Dependency: адаптер из app.state. В тестах подменяется через dependency_overrides."""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise RuntimeError("Backend not connected. Call connect_backend() on startup first.")
    return backend
