"""
FastAPI application for pipe order tracking.

Run with: uvicorn pipetrack.api.main:app
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from uuid import uuid4

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pipetrack.api.routes import ROUTERS
from pipetrack.core.errors import DomainError
from pipetrack.core.logging import configure_logging, correlation_id_var
from pipetrack.core.settings import AppSettings, get_app_settings
from pipetrack.db.run_migrations import upgrade_to_head
from pipetrack.db.seed import seed_all
from pipetrack.db.session import dispose_engine
from pipetrack.schemas.common import ErrorInfo, ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

OPENAPI_TAGS = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Auth", "description": "Login and current user."},
    {"name": "Users", "description": "User administration (admin only)."},
    {"name": "Orders", "description": "Order entry, lookup, soft delete and recompute."},
    {"name": "Production", "description": "Production records per process stage."},
    {"name": "Shipping", "description": "Shipping records."},
    {"name": "Plans", "description": "Production plan dispatch."},
    {"name": "Master Data", "description": "Option lists for specs, levels, linings and more."},
    {"name": "Reports", "description": "Progress report, CSV export and dashboard figures."},
]


def error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    """Render the common error envelope."""
    body = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        path=request.url.path,
        method=request.method,
        timestamp=datetime.now(tz=timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def jsonable_errors(exc: RequestValidationError) -> List[dict]:
    """Validation issues without the raw input, which may not be JSON serializable."""
    return [{k: v for k, v in e.items() if k in ("type", "loc", "msg")} for e in exc.errors()]


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("%s on %s %s: %s", exc.error_type, request.method, request.url.path, exc.message)
    return error_response(request, exc.status_code, exc.error_type, exc.message, exc.details)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, str):
        message, details = exc.detail, None
    else:
        message, details = "HTTP error", exc.detail
    response = error_response(request, exc.status_code, "http_error", message, details)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        request, 422, "request_validation_error", "Request validation failed", jsonable_errors(exc)
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, 500, "internal_error", "An unexpected error occurred")


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure onto the ErrorResponse envelope."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


async def correlation_id_middleware(request: Request, call_next):
    """Tag the request (logs, error bodies, response header) with a correlation id."""
    corr = request.headers.get(CORRELATION_HEADER) or request.headers.get("X-Request-ID") or str(uuid4())
    request.state.correlation_id = corr
    token = correlation_id_var.set(corr)
    try:
        logger.debug("%s %s", request.method, request.url.path)
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token)
    response.headers[CORRELATION_HEADER] = corr
    return response


async def run_startup_tasks(settings: AppSettings) -> None:
    """
    Migrate and optionally seed. Failures are logged and the app keeps serving;
    database-backed routes will report the problem.
    """
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            # Alembic's env runs its own event loop.
            await asyncio.to_thread(upgrade_to_head)
        except Exception:
            logger.exception("Startup migration failed")
    if settings.AUTO_SEED:
        try:
            await seed_all()
        except Exception:
            logger.exception("Startup seeding failed")


def build_api_router() -> APIRouter:
    api_v1 = APIRouter(prefix="/api/v1")

    # PUBLIC_INTERFACE
    @api_v1.get("/health", response_model=MessageResponse, summary="Health Check", tags=["Health"])
    def health_check() -> MessageResponse:
        """Liveness probe; does not touch the database."""
        return MessageResponse(message="Healthy")

    for router in ROUTERS:
        api_v1.include_router(router)
    return api_v1


# PUBLIC_INTERFACE
def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Assemble the application: logging, CORS, correlation ids, error envelope, routes."""
    settings = settings or get_app_settings()
    configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=OPENAPI_TAGS,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.cors_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    application.middleware("http")(correlation_id_middleware)
    register_exception_handlers(application)
    application.include_router(build_api_router())

    @application.on_event("startup")
    async def on_startup() -> None:
        await run_startup_tasks(settings)

    @application.on_event("shutdown")
    async def on_shutdown() -> None:
        await dispose_engine()

    logger.info("%s %s ready (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT or "default")
    return application


app = create_app()
