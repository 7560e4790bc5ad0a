"""
Tests for the profile, skills and day-check endpoints.
"""

import pytest

from tests.conftest import FRIDAY, MONDAY


class TestAboutEndpoint:
    """Tests for GET /api/about."""

    def test_no_active_profile_is_not_found(self, client) -> None:
        response = client.get("/api/about")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND_ERROR"
        assert body["error"]["message"] == "No active profile found"

    def test_profile_with_grouped_skills(self, client, seeded_profile) -> None:
        response = client.get("/api/about")

        assert response.status_code == 200
        body = response.json()
        data = body["data"]
        assert body["success"] is True
        assert body["lastUpdated"]
        assert data["name"] == "Jane Doe"
        assert data["experience"][0]["achievements"] == ["Shipped v2"]
        assert list(data["skills"]) == ["languages", "tools"]
        assert [s["name"] for s in data["skills"]["languages"]] == ["Python", "Kotlin"]
        assert data["skills"]["languages"][0] == {
            "name": "Python",
            "proficiency": "expert",
            "yearsOfExperience": 8,
            "description": None,
        }


class TestSkillsEndpoints:
    """Tests for GET /api/skills and GET /api/skills/{category}."""

    def test_all_skills_with_counts(self, client, seeded_profile) -> None:
        body = client.get("/api/skills").json()

        assert body["counts"] == {"languages": 2, "tools": 1}
        assert body["total"] == 3
        assert "Go" not in [s["name"] for s in body["data"]["languages"]]

    def test_empty_catalog(self, client) -> None:
        body = client.get("/api/skills").json()

        assert body["success"] is True
        assert body["data"] == {}
        assert body["total"] == 0

    def test_single_category(self, client, seeded_profile) -> None:
        response = client.get("/api/skills/languages")

        assert response.status_code == 200
        body = response.json()
        assert body["category"] == "languages"
        assert body["count"] == 2
        assert [s["name"] for s in body["skills"]] == ["Python", "Kotlin"]
        assert body["message"] == "Skills for category 'languages' retrieved successfully"

    def test_unknown_category_lists_available(self, client, seeded_profile) -> None:
        response = client.get("/api/skills/cooking")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["message"] == "Skills category 'cooking' not found"
        assert error["details"][0]["field"] == "category"
        assert "languages" in error["details"][0]["message"]
        assert "tools" in error["details"][0]["message"]


class TestIsItNotFriday:
    """Tests for GET /api/isitnotfriday."""

    def test_on_a_friday(self, client, clock) -> None:
        clock.instant = FRIDAY

        body = client.get("/api/isitnotfriday").json()

        assert body["success"] is True
        assert body["question"] == "Is it not Friday?"
        assert body["answer"] == "No"
        assert body["details"]["isFriday"] is True
        assert body["details"]["currentDay"] == "Friday"
        assert body["details"]["dayOfWeek"] == 5

    def test_on_a_monday(self, client, clock) -> None:
        clock.instant = MONDAY

        body = client.get("/api/isitnotfriday").json()

        assert body["answer"] == "Yes"
        assert body["details"]["isFriday"] is False
        assert body["details"]["currentDay"] == "Monday"
        assert body["details"]["dayOfWeek"] == 1
        assert body["details"]["timezone"] == "UTC"
        assert body["message"] == "It's Monday. Still waiting for Friday!"


class TestServiceEndpoints:
    """Tests for health, info, docs and the welcome route."""

    def test_health(self, client) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "test"
        assert body["version"] == "1.0.0"

    def test_info_lists_endpoints_and_metrics(self, client) -> None:
        client.get("/api/health")

        body = client.get("/api/info").json()

        assert "POST /api/contact" in body["endpoints"]
        assert "GET /api/isitnotfriday" in body["endpoints"]
        assert body["metrics"]["totalRequests"] >= 1
        assert body["documentation"] == "/api/docs"

    def test_docs_catalog(self, client) -> None:
        body = client.get("/api/docs").json()

        contact = next(
            e for e in body["endpoints"] if e["method"] == "POST" and e["path"] == "/api/contact"
        )
        assert contact["rateLimit"] == "contact"
        assert contact["requestExample"]["email"] == "john@example.com"
        assert body["corsOrigins"] == ["https://portfolio.example"]
        assert body["openapi"] == "/openapi.json"
        assert body["baseUrl"] == "http://testserver"

    def test_welcome(self, client) -> None:
        body = client.get("/").json()

        assert body["success"] is True
        assert body["documentation"] == "/api/docs"

    @pytest.mark.parametrize("path", ["/api/nope", "/api/contact/a/b"])
    def test_unknown_route(self, client, path) -> None:
        response = client.get(path)

        assert response.status_code == 404
        assert response.json()["error"]["message"] == f"Route GET {path} not found"

    def test_unsupported_method_is_not_found(self, client) -> None:
        response = client.delete("/api/health")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Route DELETE /api/health not found"
