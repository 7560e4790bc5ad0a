"""
Endpoint registry.

One list describes the public surface. ``/api/info`` reports its
signatures and ``/api/docs`` renders it in full, so the two never drift.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from app.shared.security import rate_limiting


@dataclass(frozen=True)
class EndpointDoc:
    """Description of one public endpoint.

    Attributes:
        method: HTTP method.
        path: Path including the ``/api`` prefix.
        description: What the endpoint does.
        rate_limit: Limit class applied to it, or None.
        request_example: Example JSON body, for endpoints that take one.
        response_example: Example success body.
        query: Accepted query parameters and their rules.
    """

    method: str
    path: str
    description: str
    rate_limit: Optional[str] = None
    request_example: Optional[dict[str, Any]] = None
    response_example: dict[str, Any] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)

    @property
    def signature(self) -> str:
        return f"{self.method} {self.path}"


ENDPOINTS: tuple[EndpointDoc, ...] = (
    EndpointDoc(
        method="GET",
        path="/api/health",
        description="Check API server status and health",
        response_example={
            "success": True,
            "status": "healthy",
            "timestamp": "2025-05-29T10:30:00Z",
            "message": "API is running successfully",
        },
    ),
    EndpointDoc(
        method="GET",
        path="/api/info",
        description="Get API information, available endpoints and request metrics",
        rate_limit=rate_limiting.READ_ONLY,
        response_example={"success": True, "name": "portfolio-api", "version": "1.0.0"},
    ),
    EndpointDoc(
        method="GET",
        path="/api/docs",
        description="Machine-readable description of this API",
        rate_limit=rate_limiting.READ_ONLY,
    ),
    EndpointDoc(
        method="GET",
        path="/api/about",
        description="Profile, experience and skills of the site owner",
        rate_limit=rate_limiting.READ_ONLY,
        response_example={
            "success": True,
            "data": {"name": "Jane Doe", "title": "Software Engineer", "skills": {}},
            "message": "About information retrieved successfully",
        },
    ),
    EndpointDoc(
        method="GET",
        path="/api/skills",
        description="All skills grouped by category, with counts",
        rate_limit=rate_limiting.READ_ONLY,
        response_example={
            "success": True,
            "data": {"languages": [{"name": "Python", "proficiency": "expert"}]},
            "counts": {"languages": 1},
            "total": 1,
        },
    ),
    EndpointDoc(
        method="GET",
        path="/api/skills/{category}",
        description="Skills of one category; 404 lists the valid categories",
        rate_limit=rate_limiting.READ_ONLY,
    ),
    EndpointDoc(
        method="POST",
        path="/api/contact",
        description="Submit the website contact form",
        rate_limit=rate_limiting.CONTACT,
        request_example={
            "name": "John Doe",
            "email": "john@example.com",
            "subject": "Project inquiry",
            "message": "Hi, I'd like to talk about a project.",
        },
        response_example={
            "success": True,
            "message": "Contact form submitted successfully",
            "submissionId": "6f1c1a8e-9b7e-4a8b-a0a5-2f3c4d5e6f70",
            "timestamp": "2025-05-29T10:30:00Z",
        },
    ),
    EndpointDoc(
        method="GET",
        path="/api/contact",
        description="Paginated list of contact submissions, newest first",
        rate_limit=rate_limiting.STRICT,
        query={
            "page": "integer >= 1, default 1",
            "limit": "integer 1-100, default 10",
            "status": "one of new, read, replied, archived",
        },
    ),
    EndpointDoc(
        method="GET",
        path="/api/contact/{id}",
        description="A single contact submission",
        rate_limit=rate_limiting.STRICT,
    ),
    EndpointDoc(
        method="GET",
        path="/api/isitnotfriday",
        description="Answers whether today is not Friday",
        rate_limit=rate_limiting.GENERAL,
        response_example={
            "success": True,
            "question": "Is it not Friday?",
            "answer": "Yes",
            "details": {"currentDay": "Monday", "isFriday": False, "dayOfWeek": 1},
        },
    ),
)


def endpoint_signatures() -> list[str]:
    return [endpoint.signature for endpoint in ENDPOINTS]
