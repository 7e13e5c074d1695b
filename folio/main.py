"""
Точка входа FastAPI.

lifespan: адаптер хранилища создаётся при старте из settings и живёт в app.state.
CORS, rate limit, exception handlers (структурированные ответы), роутеры контента.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from folio.core.config import settings
from folio.core.database import close_backend, connect_backend
from folio.middleware.rate_limit import RateLimitMiddleware
from folio.routers import health, portfolio, posts
from folio.schemas.common import ErrorResponse, SuccessResponse

# Логирование
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл: при старте — подключение к хранилищу, при остановке — отключение."""
    logger.info("Starting up: connecting to MongoDB...")
    app.state.backend = connect_backend(settings)
    yield
    logger.info("Shutting down: closing MongoDB...")
    close_backend(app.state.backend)
    app.state.backend = None


app = FastAPI(
    title=f"{settings.SITE_TITLE} Content API",
    description="Published blog posts and portfolio sections. Ответы: success, data / error, message.",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS — список origins из конфига (добавляем первым, выполняется после rate limit)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list(),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
# Rate limit по IP — выполняется первым
app.add_middleware(RateLimitMiddleware, limit=settings.RATE_LIMIT)


# Обработчик неожиданных исключений — структурированный ответ
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    body = ErrorResponse(error="internal_server_error", message="An unexpected error occurred")
    return JSONResponse(status_code=500, content=body.model_dump())


# Обработчик HTTPException (в т.ч. 404/405 роутинга) — структурированный ответ
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail and "message" in detail:
        body = ErrorResponse(error=detail["error"], message=detail["message"])
    else:
        body = ErrorResponse(error="request_failed", message=str(detail) if detail else "Request failed")
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)


# Обработчик валидации (422) — структурированный ответ
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    msg = "; ".join(f"{e.get('loc', [])}: {e.get('msg', '')}" for e in errors[:3])
    body = ErrorResponse(error="validation_error", message=msg or "Validation failed")
    return JSONResponse(status_code=422, content=body.model_dump())


# Корень: метаданные сайта и ссылки
@app.get("/", response_model=SuccessResponse[dict])
def root():
    return SuccessResponse(
        data={
            "title": settings.SITE_TITLE,
            "description": settings.SITE_DESCRIPTION,
            "url": settings.SITE_URL,
            "author": settings.SITE_AUTHOR,
            "docs": "/docs",
            "health": "/health",
            "posts": "/posts",
            "portfolio": "/portfolio/sections",
        }
    )


# Роутеры
app.include_router(health.router)
app.include_router(posts.router)
app.include_router(portfolio.router)
