"""
Service metadata router.

Provides the health endpoint for liveness checks, API information with
request metrics, the machine-readable endpoint catalog and the root
welcome payload. No business logic.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Request

from app.core.config import Settings
from app.interfaces.catalog import ENDPOINTS, endpoint_signatures
from app.shared.errors.schemas import CamelModel
from app.shared.security.rate_limiting import limit_read_only

router = APIRouter(tags=["health"])
root_router = APIRouter(tags=["health"])


class HealthResponse(CamelModel):
    """Response schema for the health check endpoint."""

    success: bool = True
    status: str
    timestamp: datetime
    environment: str
    version: str
    message: str


class InfoResponse(CamelModel):
    success: bool = True
    name: str
    version: str
    description: str
    author: str
    environment: str
    documentation: str
    endpoints: list[str]
    metrics: dict[str, Any]


class EndpointSchema(CamelModel):
    method: str
    path: str
    description: str
    rate_limit: Optional[str] = None
    query: dict[str, str] = {}
    request_example: Optional[dict[str, Any]] = None
    response_example: dict[str, Any] = {}


class DocsResponse(CamelModel):
    """Response schema for the endpoint catalog."""

    success: bool = True
    title: str
    version: str
    description: str
    base_url: str
    openapi: Optional[str] = None
    cors_origins: list[str]
    rate_limits: dict[str, str]
    endpoints: list[EndpointSchema]
    last_updated: datetime


def _settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check(request: Request) -> HealthResponse:
    """Return current application health status."""
    settings = _settings(request)
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        version=settings.version,
        message="API is running successfully",
    )


@router.get(
    "/info",
    response_model=InfoResponse,
    summary="API information",
    description="Static metadata, available endpoints and request metrics.",
)
@limit_read_only
def api_info(request: Request) -> InfoResponse:
    settings = _settings(request)
    return InfoResponse(
        name=settings.project_name,
        version=settings.version,
        description=settings.description,
        author=settings.author,
        environment=settings.environment,
        documentation="/api/docs",
        endpoints=endpoint_signatures(),
        metrics=request.app.state.metrics.snapshot(),
    )


@router.get(
    "/docs",
    response_model=DocsResponse,
    summary="API documentation",
    description="Machine-readable description of every endpoint.",
)
@limit_read_only
def api_docs(request: Request) -> DocsResponse:
    """Render the endpoint registry."""
    settings = _settings(request)
    return DocsResponse(
        title=f"{settings.project_name} API Documentation",
        version=settings.version,
        description=settings.description,
        base_url=str(request.base_url).rstrip("/"),
        openapi=request.app.openapi_url if request.app.docs_url else None,
        cors_origins=settings.cors_origins_list,
        rate_limits={
            "general": settings.rate_limit_general,
            "read_only": settings.rate_limit_read_only,
            "contact": settings.rate_limit_contact,
            "strict": settings.rate_limit_strict,
        },
        endpoints=[
            EndpointSchema(
                method=e.method,
                path=e.path,
                description=e.description,
                rate_limit=e.rate_limit,
                query=e.query,
                request_example=e.request_example,
                response_example=e.response_example,
            )
            for e in ENDPOINTS
        ],
        last_updated=datetime.now(timezone.utc),
    )


@root_router.get("/", summary="Welcome", include_in_schema=False)
def welcome(request: Request) -> dict[str, Any]:
    settings = _settings(request)
    return {
        "success": True,
        "message": f"Welcome to {settings.project_name}",
        "version": settings.version,
        "documentation": "/api/docs",
        "health": "/api/health",
    }
