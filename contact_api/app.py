"""Contact form backend of a portfolio website."""

import traceback
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

import sentry_sdk
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.aiohttp import AioHttpIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .context import AppContext, get_context
from .endpoints import ROUTERS
from .exceptions.api_exception import APIException
from .exceptions.contact import ContactRateLimitExceededError, RateLimitExceededError
from .logger import get_logger
from .settings import settings
from .utils.rate_limit import RateLimiter, get_client_address
from .utils.utc import utcnow


logger = get_logger(__name__)

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; style-src 'self' 'unsafe-inline'; script-src 'self'; "
    "img-src 'self' data: https:",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting contact api", version=__version__, environment=settings.environment)
    context = AppContext.from_settings(settings)
    await context.startup()
    app.state.context = context
    try:
        yield
    finally:
        logger.info("Shutting down server")
        await context.shutdown()


app = FastAPI(
    title="Portfolio Contact API",
    version=__version__,
    root_path=settings.root_path,
    root_path_in_servers=False,
    lifespan=lifespan,
    openapi_tags=[{"name": name, "description": doc} for name, (_, doc, _) in ROUTERS.items()],
)
for router, _, prefix in ROUTERS.values():
    app.include_router(router, prefix=prefix)


if settings.sentry_dsn:
    logger.debug("initializing sentry")
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        attach_stacktrace=True,
        shutdown_timeout=5,
        environment=settings.sentry_environment,
        integrations=[AioHttpIntegration(), SqlalchemyIntegration()],
    )


def _rate_limited(exc: RateLimitExceededError, limiter: RateLimiter, address: str) -> JSONResponse:
    headers = {**limiter.headers(address), "Retry-After": str(limiter.retry_after(address))}
    logger.warning("Rate limit exceeded", ip=address, limit=limiter.limit)
    return JSONResponse(exc.body, status_code=exc.status_code, headers=headers)


def _debug(request: Request) -> bool:
    context: AppContext | None = getattr(request.app.state, "context", None)
    return (context.settings if context else settings).debug


def _is_submission(request: Request) -> bool:
    return request.method == "POST" and request.url.path.rstrip("/").endswith("/api/contact")


@app.middleware("http")
async def rate_limit(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    context = get_context(request)
    address = get_client_address(request, context.settings.trusted_proxy_hops)

    if not context.general_limiter.hit(address):
        return _rate_limited(RateLimitExceededError(), context.general_limiter, address)

    if not _is_submission(request):
        return await call_next(request)

    # reserved up front, handed back for failed submissions
    if not context.contact_limiter.hit(address):
        context.contact_limiter.release(address)
        return _rate_limited(ContactRateLimitExceededError(), context.contact_limiter, address)

    try:
        response = await call_next(request)
    except Exception:
        context.contact_limiter.release(address)
        raise
    if response.status_code >= 400:
        context.contact_limiter.release(address)
    return response


@app.middleware("http")
async def security_headers(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    response = await call_next(request)
    for key, value in SECURITY_HEADERS.items():
        response.headers.setdefault(key, value)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials="*" not in settings.cors_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    if isinstance(exc, APIException):
        if exc.status_code >= 500:
            logger.error("Request failed", error=exc.detail, url=str(request.url), method=request.method)
        return JSONResponse(exc.body, status_code=exc.status_code, headers=exc.headers)

    if exc.status_code == 404:
        return JSONResponse(
            {
                "success": False,
                "error": "Endpoint not found",
                "path": request.url.path,
                "method": request.method,
                "timestamp": utcnow().isoformat(),
            },
            status_code=404,
        )

    return JSONResponse({"success": False, "error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    return JSONResponse(
        {
            "success": False,
            "error": "Validation failed",
            "details": str(exc.errors()) if _debug(request) else "Invalid input data",
        },
        status_code=400,
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
    logger.error(
        "Unhandled error",
        error=repr(exc),
        url=str(request.url),
        method=request.method,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        exc_info=exc,
    )

    body: dict[str, Any] = {
        "success": False,
        "error": "Internal server error",
        "details": str(exc) if _debug(request) else "Something went wrong",
    }
    if _debug(request):
        body["stack"] = "".join(traceback.format_exception(exc))
    return JSONResponse(body, status_code=500)
