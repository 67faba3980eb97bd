"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortener.errors import ShortenerError
from shortener.handlers import LinkHandlers
from .api import api_router, users_router
from .web import links_router
from .middleware.auth import AuthenticationMiddleware
from .middleware.logging import LoggingMiddleware

logger = logging.getLogger("shortener.web")


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": message}`` with its status code."""

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [
            f"{'.'.join(str(part) for part in err['loc'][1:]) or 'body'}: {err['msg']}"
            for err in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path} invalid body: {messages}")
        return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


def create_app(
    service_instance,
    identity_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: URLShortenerService (None when the lifespan sets it)
        identity_instance: IdentityService (None when the lifespan sets it)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Short links owned by registered users",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.config = config
    attach_services(app, service_instance, identity_instance)

    # Added last runs first: CORS must wrap the auth middleware's own error responses
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Static prefixes must be registered before the catch-all /{short_code}
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(users_router, prefix="/users", tags=["Users"])
    app.include_router(links_router, tags=["Links"])

    return app


def attach_services(app: FastAPI, service_instance, identity_instance) -> None:
    """Store services and the handler table in app state for access in routes."""
    config = app.state.config
    app.state.service = service_instance
    app.state.identity = identity_instance
    app.state.handlers = None
    if service_instance is not None and identity_instance is not None:
        app.state.handlers = LinkHandlers(
            service=service_instance,
            identity=identity_instance,
            enable_custom_codes=config.enable_custom_codes,
            path_prefix=config.path_prefix,
        )
