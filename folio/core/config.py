"""
Конфигурация приложения из переменных окружения.

Один класс Settings (pydantic-settings), все секреты и настройки читаются из .env.
Экземпляр передаётся явно туда, где он нужен (connect_backend, middleware),
функции чтения контента конфиг не читают.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки из env."""

    # MongoDB: облачная БД (Atlas), URI из .env
    MONGO_URI: str = ""
    MONGO_DB_NAME: str = "portfolio"
    # Таймаут выбора сервера, мс. Пулом соединений управляет сам клиент.
    MONGO_TIMEOUT_MS: int = 5000

    # CORS: список origin через запятую в .env
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Rate limit: запросов с одного IP за окно ("100/minute", "10/second")
    RATE_LIMIT: str = "100/minute"

    # Логирование
    LOG_LEVEL: str = "INFO"

    # Метаданные сайта (отдаются на корне API)
    SITE_TITLE: str = "Portfolio"
    SITE_DESCRIPTION: str = "A portfolio website with blog functionality."
    SITE_URL: str = "http://localhost:3000"
    SITE_AUTHOR: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def cors_list(self) -> list[str]:
        """CORS origins как список для CORSMiddleware."""
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    def rate_limit_parsed(self) -> tuple[int, int]:
        """RATE_LIMIT разобрать в (max_requests, window_seconds). '100/minute' -> (100, 60)."""
        return parse_rate_limit(self.RATE_LIMIT)


_WINDOWS = {
    "second": 1,
    "sec": 1,
    "s": 1,
    "minute": 60,
    "min": 60,
    "m": 60,
    "hour": 3600,
    "h": 3600,
    "day": 86400,
    "d": 86400,
}


def parse_rate_limit(value: str) -> tuple[int, int]:
    """Строку вида '<число>/<окно>' в (max_requests, window_seconds). Мусор -> (100, 60)."""
    s = value.strip().lower().replace(" ", "")
    if "/" not in s:
        return 100, 60
    part, window = s.split("/", 1)
    try:
        max_req = int(part)
    except ValueError:
        return 100, 60
    if max_req <= 0:
        return 100, 60
    return max_req, _WINDOWS.get(window, 60)


# Экземпляр процесса: создаётся один раз, дальше передаётся явно
settings = Settings()
