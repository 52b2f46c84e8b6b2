"""
Main FastAPI application for the Inkparse backend.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from . import __version__
from .config import Settings, get_settings
from .exceptions import (
    EmptyUpstreamResponseError,
    InputValidationError,
    UnparsableUpstreamResponseError,
    UpstreamAuthError,
    UpstreamBadRequestError,
    UpstreamError,
    UpstreamPayloadTooLargeError,
    UpstreamRateLimitError,
    UpstreamUnavailableError,
)
from .routers.config import router as config_router
from .routers.documents import router as documents_router
from .routers.health import router as health_router
from .services.keepalive import KeepAlivePinger
from .services.llm import LLMService
from .utils.network import declared_content_length, get_client_ip

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

UPSTREAM_STATUS = {
    UpstreamAuthError: 401,
    UpstreamRateLimitError: 429,
    UpstreamPayloadTooLargeError: 413,
    UpstreamBadRequestError: 400,
    UpstreamUnavailableError: 502,
    EmptyUpstreamResponseError: 500,
    UnparsableUpstreamResponseError: 500,
}

# Parse failures get a fixed message; raw model text stays in the server log
UPSTREAM_MESSAGE = {
    EmptyUpstreamResponseError: "The model returned an empty response",
    UnparsableUpstreamResponseError: "Could not parse the model response, please try again",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def configure_logging(level: str) -> None:
    """Apply LOG_LEVEL to the package loggers, however the app is served."""
    # No-op when the server (or a test runner) already configured the root logger
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger(__package__).setLevel(level)


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InputValidationError)
    async def input_validation_handler(request: Request, exc: InputValidationError):
        logger.info("[%s] rejected input: %s", get_client_ip(request), exc)
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        detail = f"{where}: {first.get('msg')}" if where else str(first.get("msg", "invalid body"))
        logger.info("[%s] invalid request body: %s", get_client_ip(request), detail)
        return _error(400, f"Invalid request body ({detail})")

    @app.exception_handler(UpstreamError)
    async def upstream_handler(request: Request, exc: UpstreamError):
        status_code = UPSTREAM_STATUS.get(type(exc), 502)
        return _error(status_code, UPSTREAM_MESSAGE.get(type(exc), str(exc)))

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception):
        logger.exception("[%s] unexpected error", get_client_ip(request))
        return _error(500, "Something went wrong")


def create_app(settings: Optional[Settings] = None, llm: Optional[LLMService] = None) -> FastAPI:
    """Build the app with its read-only settings and one shared LLMService."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if settings.KEEPALIVE_ENABLE and settings.KEEPALIVE_URL:
            pinger = KeepAlivePinger(settings.KEEPALIVE_URL, settings.KEEPALIVE_INTERVAL_MIN)
            app.state._keepalive_task = asyncio.create_task(pinger.run())
            logger.info("Keep-alive pinging %s every %d min", settings.KEEPALIVE_URL, settings.KEEPALIVE_INTERVAL_MIN)
        try:
            yield
        finally:
            # Shutdown
            t = getattr(app.state, "_keepalive_task", None)
            if t and not t.done():
                t.cancel()
                try:
                    await t
                except asyncio.CancelledError:
                    pass

    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.llm = llm or LLMService(settings)
    app.state.started_at = time.monotonic()

    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; model calls will fail with 401")

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = declared_content_length(request)
        if length is None and request.method in ("POST", "PUT", "PATCH"):
            # Chunked upload without Content-Length: measure the buffered body
            length = len(await request.body())
        if length is not None and length > settings.max_body_bytes:
            logger.info("[%s] body of %d bytes rejected", get_client_ip(request), length)
            return _error(413, f"Request body too large: maximum {settings.MAX_BODY_MB} MB")
        return await call_next(request)

    # CORS configuration (added last so it wraps the size check)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX or None,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    _install_exception_handlers(app)

    # Routers
    app.include_router(health_router)
    app.include_router(config_router, prefix=settings.API_PREFIX)
    app.include_router(documents_router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["root"])
    async def root() -> dict:
        """Simple root endpoint."""
        return {"name": app.title, "version": app.version}

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


app = create_app()
