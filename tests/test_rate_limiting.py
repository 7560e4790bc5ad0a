"""
Tests for rate limiting behavior.
"""

import pytest
from fastapi.testclient import TestClient

from app.interfaces.portfolio.dependencies import get_email_sender
from app.main import create_app
from tests.conftest import FakeEmailSender, make_settings, valid_contact


@pytest.fixture
def limited_client(tmp_path):
    app = create_app(
        make_settings(
            tmp_path,
            rate_limit_contact="2 per hour",
            rate_limit_strict="1 per hour",
            rate_limit_general="3 per minute",
        )
    )
    app.dependency_overrides[get_email_sender] = lambda: FakeEmailSender()
    with TestClient(app) as test_client:
        yield test_client


class TestRateLimiting:
    """Tests for per-class limits."""

    def test_rate_limit_returns_429(self, limited_client) -> None:
        for _ in range(2):
            assert limited_client.post("/api/contact", json=valid_contact()).status_code == 201

        response = limited_client.post("/api/contact", json=valid_contact())

        assert response.status_code == 429
        error = response.json()["error"]
        assert response.json()["success"] is False
        assert error["code"] == "RATE_LIMIT_ERROR"
        assert error["message"] == (
            "Too many contact form submissions from this IP. Please try again in an hour."
        )
        assert 0 < error["retryAfter"] <= 3600
        assert int(response.headers["Retry-After"]) == error["retryAfter"]

    def test_stays_limited_within_window(self, limited_client) -> None:
        for _ in range(3):
            limited_client.post("/api/contact", json=valid_contact())

        assert limited_client.post("/api/contact", json=valid_contact()).status_code == 429
        assert limited_client.post("/api/contact", json=valid_contact()).status_code == 429

    def test_invalid_submissions_do_not_use_the_quota(self, limited_client) -> None:
        for _ in range(3):
            response = limited_client.post("/api/contact", json=valid_contact(name="A"))
            assert response.status_code == 400

        assert limited_client.post("/api/contact", json=valid_contact()).status_code == 201
        assert limited_client.post("/api/contact", json=valid_contact()).status_code == 201

    def test_classes_are_independent(self, limited_client) -> None:
        for _ in range(3):
            limited_client.post("/api/contact", json=valid_contact())

        assert limited_client.get("/api/isitnotfriday").status_code == 200
        assert limited_client.get("/api/skills").status_code == 200

    def test_routes_of_one_class_share_a_window(self, limited_client) -> None:
        assert limited_client.get("/api/contact").status_code == 200

        response = limited_client.get("/api/contact/not-a-uuid")

        assert response.status_code == 429
        assert response.json()["error"]["message"] == (
            "Rate limit exceeded for sensitive operations. Please try again later."
        )

    def test_health_is_never_limited(self, limited_client) -> None:
        for _ in range(10):
            assert limited_client.get("/api/health").status_code == 200

    def test_disabled_limiter(self, tmp_path) -> None:
        app = create_app(
            make_settings(tmp_path, rate_limit_enabled=False, rate_limit_general="1 per hour")
        )
        with TestClient(app) as client:
            for _ in range(3):
                assert client.get("/api/isitnotfriday").status_code == 200
