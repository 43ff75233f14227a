"""FastAPI application instance and error translation."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from compensation.core import get_logger, get_settings
from compensation.core.errors import CompensationError, ConflictError
from compensation.core.logger import init_logging, shutdown_logging
from compensation.routers import salary_config_router, salary_router

LOGGER = get_logger(__name__)


def _error_body(error: CompensationError) -> dict:
    return {
        "success": False,
        "code": error.code,
        "message": error.message,
        "detail": error.detail,
    }


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    init_logging(level=settings.logging.level, log_dir=settings.logging.log_dir)

    app = FastAPI(title="Pollen Compensation", version="0.1.0")
    app.include_router(salary_router)
    app.include_router(salary_config_router)

    @app.exception_handler(CompensationError)
    async def handle_business_error(request: Request, exc: CompensationError) -> JSONResponse:
        if exc.status_code >= 500:
            LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            LOGGER.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
        LOGGER.warning("%s %s hit a constraint: %s", request.method, request.url.path, exc.orig)
        error = ConflictError("数据已被其他操作修改或已存在，请刷新后重试")
        return JSONResponse(status_code=error.status_code, content=_error_body(error))

    @app.exception_handler(StaleDataError)
    async def handle_stale_data(request: Request, exc: StaleDataError) -> JSONResponse:
        LOGGER.warning("%s %s lost an optimistic lock race", request.method, request.url.path)
        error = ConflictError("并发修改冲突，请刷新后重试")
        return JSONResponse(status_code=error.status_code, content=_error_body(error))

    @app.on_event("shutdown")
    def flush_logs() -> None:
        shutdown_logging()

    LOGGER.info("FastAPI application initialised")
    return app
