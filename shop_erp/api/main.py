from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shop_erp.api.pages import redirect, render_page
from shop_erp.api.routes import attendance, auth, billing, challans, dashboard, master_data, production, registers, reports
from shop_erp.core.errors import LoginRequired, NotFound, StoreError
from shop_erp.core.logging import configure_logging, correlation_id_var, username_var
from shop_erp.core.security import SessionGuard
from shop_erp.core.settings import get_app_settings
from shop_erp.db.seed import seed_all
from shop_erp.db.session import create_tables, dispose_engine
from shop_erp.schemas.common import ErrorInfo, ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Auth", "description": "Sign-in page, sign-in and sign-out."},
    {"name": "Dashboard", "description": "Headline metrics."},
    {"name": "Master Data", "description": "Customers, employees, parts and machines."},
    {"name": "Production", "description": "Job orders and the shop floor board."},
    {"name": "Challans", "description": "Plating challans."},
    {"name": "Billing", "description": "GST invoices."},
    {"name": "Attendance", "description": "Daily attendance, CSV interchange, monthly summary."},
    {"name": "Reports", "description": "Business reports with CSV export."},
    {"name": "Registers", "description": "Read-only register pages."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create missing tables and seed the administrator (plus demo rows where
    enabled) on startup; dispose the engine on shutdown.
    """
    settings = get_app_settings()
    if settings.CREATE_TABLES_ON_STARTUP:
        logger.info("Creating missing tables")
        await create_tables()
    if settings.AUTO_SEED:
        try:
            logger.info("Running database seeding...")
            await seed_all()
            logger.info("Seeding completed.")
        except StoreError:
            # the console still serves pages; each page surfaces store failures itself
            logger.exception("Seeding step failed")
    yield
    await dispose_engine()


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build a standardized ErrorResponse JSONResponse."""
    err = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        path=request.url.path,
        method=request.method,
        timestamp=datetime.now(tz=timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json"))


def _error_page(request: Request, status_code: int, message: str):
    return render_page(
        request,
        "error.html",
        status=status_code,
        message=message,
        correlation_id=getattr(request.state, "correlation_id", None),
        status_code=status_code,
    )


def _error(request: Request, status_code: int, error_type: str, message: str, details: Any | None = None):
    if _wants_json(request):
        return _build_error_response(request, status_code, error_type, message, details)
    return _error_page(request, status_code, message)


async def login_required_handler(request: Request, exc: LoginRequired):
    return redirect("/")


async def store_error_handler(request: Request, exc: StoreError):
    """Re-render the page shell with the raw store message in an alert and no data."""
    logger.exception("Store failure on %s", request.url.path, exc_info=exc)
    if _wants_json(request):
        return _build_error_response(request, 503, "store_error", exc.message)
    guard = SessionGuard()
    guard.restore(request.cookies.get(get_app_settings().SESSION_COOKIE_NAME))
    if not guard.is_authenticated:
        return redirect("/")
    return render_page(request, "pages/list.html", identity=guard.identity, alert=exc.message, table="")


async def not_found_handler(request: Request, exc: NotFound):
    return _error(request, 404, "not_found", str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Global handler for HTTPException to produce a standardized error envelope.
    """
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    details = None if isinstance(exc.detail, str) else exc.detail
    return _error(request, exc.status_code, "http_error", str(detail), details)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Global handler for request validation errors with a standard structure.
    """
    if _wants_json(request):
        return _build_error_response(request, 422, "validation_error", "Request validation failed", exc.errors())
    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())[1:]) or "request" for err in exc.errors())
    return _error_page(request, 422, f"Invalid request parameters: {fields}")


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return a structured error.
    """
    logger.exception("Unhandled error processing request", exc_info=exc)
    return _error(request, 500, "internal_error", "An unexpected error occurred")


async def request_context_middleware(request: Request, call_next):
    """
    Enrich request context with a correlation_id for logging and error responses.
    Adds 'X-Correlation-ID' to every response.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token_corr = correlation_id_var.set(corr)
    token_user = username_var.set(None)
    request.state.correlation_id = corr

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token_corr)
        username_var.reset(token_user)
    response.headers["X-Correlation-ID"] = corr
    return response


api_v1 = APIRouter(prefix="/api/v1")


# PUBLIC_INTERFACE
@api_v1.get(
    "/health",
    response_model=MessageResponse,
    summary="Health Check",
    tags=["Health"],
)
def health_check() -> MessageResponse:
    """
    Basic liveness health check endpoint.

    Returns:
        MessageResponse: Simple confirmation that the service is running.
    """
    return MessageResponse(message="Healthy")


# PUBLIC_INTERFACE
def create_app() -> FastAPI:
    """Build the console application: middleware, exception handlers and every page router."""
    settings = get_app_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # CORS - avoid wildcard with credentials
    cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
        logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
        cors_allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=cors_allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_v1)
    app.include_router(auth.router)
    app.include_router(dashboard.router)
    for router in master_data.routers:
        app.include_router(router)
    app.include_router(production.router)
    app.include_router(challans.router)
    app.include_router(billing.router)
    app.include_router(attendance.router)
    app.include_router(reports.router)
    for router in registers.routers:
        app.include_router(router)
    return app


app = create_app()
