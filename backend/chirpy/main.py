"""FastAPI application entry point"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from chirpy.api import admin, chirps, health, tokens, users, webhooks
from chirpy.config import settings
from chirpy.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from chirpy.middleware.monitoring import FileserverHitsMiddleware, endpoint_label, record_auth_failure
from chirpy.middleware.rate_limit import limiter
from chirpy.utils.logger import logger, setup_logging

# Setup logging
setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("Chirpy starting up", extra={"action": "startup"})
    yield
    logger.info("Chirpy shutting down", extra={"action": "shutdown"})


app = FastAPI(
    title="Chirpy",
    description="Short text posts with access/refresh token authentication",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ===== Middleware Setup =====

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.add_middleware(FileserverHitsMiddleware, prefix="/app")

if settings.METRICS_ENABLED:
    from chirpy.middleware.monitoring import MonitoringMiddleware
    app.add_middleware(MonitoringMiddleware)

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=[settings.METRICS_PATH, "/api/healthz"],
    )
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint=settings.METRICS_PATH, include_in_schema=False)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ===== Route Setup =====

app.include_router(health.router)
app.include_router(admin.router)
app.include_router(users.router)
app.include_router(tokens.router)
app.include_router(chirps.router)
app.include_router(webhooks.router)

if os.path.isdir(settings.STATIC_DIR):
    app.mount("/app", StaticFiles(directory=settings.STATIC_DIR, html=True), name="app")


# ===== Error Handlers =====

def _error(status_code: int, error: str, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message}, headers=headers)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    record_auth_failure(endpoint_label(request))
    logger.info(
        f"Authentication failed: {exc}",
        extra={"path": request.url.path, "method": request.method},
    )
    return _error(401, "unauthorized", str(exc), headers={"WWW-Authenticate": "Bearer"})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, "not_found", str(exc))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return _error(409, "conflict", str(exc))


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(400, "bad_request", str(exc))


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(
        f"Database failure: {exc}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True
    )
    return _error(500, "database_error", "The database could not be read or written.")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for uncaught errors"""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )
    return _error(500, "internal_server_error", "An unexpected error occurred.")
