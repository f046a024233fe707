"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from lingocards.config import Settings, configure_logging, get_settings
from lingocards.core import container
from lingocards.database import create_tables, dispose_engine, get_session_factory, initialize_database
from lingocards.domain.common.exceptions import (
    AuthorizationError,
    ConcurrencyConflictError,
    DomainError,
    EntityNotFoundError,
)
from lingocards.domain.identity.exceptions import EmailAlreadyExistsError, InvalidCredentialsError
from lingocards.exceptions import LingoCardsError
from lingocards.infrastructure.common.rate_limit import limiter
from lingocards.infrastructure.common.routers import settings as settings_router
from lingocards.infrastructure.identity.routers import admin, auth, users
from lingocards.infrastructure.learning.routers import flashcards, stats, study

settings = get_settings()
configure_logging(settings.ENVIRONMENT, settings.LOG_LEVEL)

logger = structlog.get_logger(__name__)
stdlib_logger = logging.getLogger(__name__)

# Most specific first
DOMAIN_ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (EmailAlreadyExistsError, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
]


def status_for_domain_error(exc: DomainError) -> int:
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    # Validation, business rule and invariant errors
    return status.HTTP_400_BAD_REQUEST


def seed_admin(app_settings: Settings) -> None:
    """Create or promote the configured administrator account."""
    if not (app_settings.ADMIN_EMAIL and app_settings.ADMIN_PASSWORD):
        return
    session = get_session_factory(app_settings)()
    try:
        with container.db.override(session):
            use_case = container.register_user_use_case()
        use_case.ensure_admin(app_settings.ADMIN_EMAIL, app_settings.ADMIN_PASSWORD)
    finally:
        session.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    initialize_database(settings)
    create_tables()
    seed_admin(settings)
    logger.info("application_started", environment=settings.ENVIRONMENT, version=settings.VERSION)
    yield
    dispose_engine()
    logger.info("application_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LingoCardsError)
async def lingocards_exception_handler(request: Request, exc: LingoCardsError) -> JSONResponse:
    logger.warning(
        "application_error",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        detail=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for_domain_error(exc)
    logger.info(
        "domain_error",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
        detail=exc.message,
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    stdlib_logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )


app.include_router(auth.router, prefix=settings.API_V1_PREFIX)
app.include_router(users.router, prefix=settings.API_V1_PREFIX)
app.include_router(admin.router, prefix=settings.API_V1_PREFIX)
app.include_router(flashcards.router, prefix=settings.API_V1_PREFIX)
app.include_router(flashcards.cards_router, prefix=settings.API_V1_PREFIX)
app.include_router(study.router, prefix=settings.API_V1_PREFIX)
app.include_router(stats.router, prefix=settings.API_V1_PREFIX)
app.include_router(settings_router.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": settings.PROJECT_NAME, "version": settings.VERSION, "docs": "/docs"}


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
