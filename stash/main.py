"""FastAPI application entry point.

Wiring only: logging, lifespan, rate limiter, exception handlers,
middleware, routers. See stash.core.lifespan and stash.core.exception_handlers.

Settings are loaded inside create_app() so tests can set env and clear
the get_settings cache before calling it.
"""

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from stash.api.router import api_router
from stash.core.config import get_settings
from stash.core.exception_handlers import register_exception_handlers
from stash.core.lifespan import create_lifespan
from stash.core.limiter import limiter
from stash.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware
from stash.shared.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    limiter.enabled = settings.rate_limit_enabled
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Last added is outermost: size limit runs before request ID.
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)

    app.include_router(api_router)
    return app


app = create_app()
