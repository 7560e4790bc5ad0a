"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (health/metadata and the portfolio bounded context)
- Error handlers (one terminal renders every error)
- Middleware chain (security headers, request context, HTTPS redirect,
  sanitization, origin policy, CORS)
- Rate limiting, metrics, error tracking and logging configuration
- Storage schema and the process supervisor, from the lifespan handler

No business logic belongs here.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings
from app.core.config import settings as default_settings
from app.infrastructure.database import build_engine, create_schema
from app.interfaces.health import root_router
from app.interfaces.health import router as health_router
from app.interfaces.portfolio.router import router as portfolio_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.metrics import RequestMetrics
from app.shared.middleware import RequestContextMiddleware
from app.shared.security.cors import CORS_HEADERS, CORS_METHODS, OriginPolicyMiddleware
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.https import HTTPSRedirectMiddleware
from app.shared.security.rate_limiting import configure_limiter
from app.shared.security.sanitization import SanitizeRequestMiddleware
from app.shared.supervisor import install_process_supervisor
from app.shared.tracking import build_error_tracker

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: prepare storage and install the supervisor."""
    settings: Settings = app.state.settings
    create_schema(app.state.engine)
    supervisor = install_process_supervisor(settings)
    supervisor.install_loop_handler(asyncio.get_running_loop())

    if settings.is_production and not settings.email_configured:
        logger.warning("Email credentials are not configured; contact emails will not be sent")
    logger.info(
        "%s %s started (environment=%s)",
        settings.project_name,
        settings.version,
        settings.environment,
    )

    yield

    app.state.engine.dispose()
    logger.info("%s stopped", settings.project_name)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and the middleware chain.
    This is the composition root of the application.

    Args:
        settings: Configuration to build against. Defaults to the
            environment-derived settings.

    Returns:
        A fully configured FastAPI application instance.
    """
    config = settings or default_settings
    configure_logging(level=config.log_level)

    expose_docs = not config.is_production
    app = FastAPI(
        title=config.project_name,
        description=config.description,
        version=config.version,
        docs_url="/docs" if expose_docs else None,
        redoc_url="/redoc" if expose_docs else None,
        openapi_url="/openapi.json" if expose_docs else None,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.engine = build_engine(config.database_url)
    app.state.metrics = RequestMetrics()
    app.state.error_tracker = build_error_tracker(config)

    # --- Rate Limiting ---
    app.state.limiter = configure_limiter(config)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Middleware (last added runs first) ---
    origins = config.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    app.add_middleware(OriginPolicyMiddleware, allowed_origins=origins)
    app.add_middleware(SanitizeRequestMiddleware, max_body_bytes=config.max_body_bytes)
    app.add_middleware(
        HTTPSRedirectMiddleware, enabled=config.is_production and config.https_only
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=config.is_production)

    # --- Routers ---
    app.include_router(root_router)
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(portfolio_router, prefix=API_PREFIX)

    return app


app = create_app()
