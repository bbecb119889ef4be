"""Tests for application wiring: root document, legacy route, health, docs and middleware."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from resource_api.app.core.config import Settings
from resource_api.app.core.errors import CacheClosed
from resource_api.app.main import create_app
from resource_api.app.middleware.security_headers import SECURITY_HEADERS


class TestRootDocument:
    def test_root_links(self, client: TestClient) -> None:
        body = client.get("/api").json()
        assert body["_links"] == {
            "self": {"href": "/api"},
            "users": {"href": "/api/users"},
            "docs": {"href": "/api-docs"},
        }
        assert body["version"] == "2.0"

    def test_legacy_endpoint_announces_deprecation(self, client: TestClient) -> None:
        response = client.get("/api/legacy", headers={"api-version": "2.0"})
        assert response.status_code == 200
        assert response.headers["Deprecation"] == "true"
        assert response.headers["Sunset"] == "Sat, 31 Dec 2023 23:59:59 GMT"
        assert "/api/users" in response.headers["Link"]
        assert "/api/users" in response.json()["message"]

    def test_health(self, client: TestClient) -> None:
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["users"] == 0
        assert set(body["cache"]) == {"hits", "misses", "keys"}

    def test_openapi_document_is_served(self, client: TestClient) -> None:
        response = client.get("/api-docs/openapi.json")
        assert response.status_code == 200
        assert "/api/users" in response.json()["paths"]


class TestMiddleware:
    def test_security_headers_are_set(self, client: TestClient) -> None:
        response = client.get("/api")
        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value

    def test_rejected_version_still_gets_security_headers(self, client: TestClient) -> None:
        response = client.get("/api", headers={"api-version": "0.1"})
        assert response.status_code == 400
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_rate_limit_returns_429(self) -> None:
        app = create_app(Settings(rate_limit="2/minute", rate_limit_enabled=True))
        client = TestClient(app)
        assert client.get("/api").status_code == 200
        assert client.get("/api").status_code == 200
        response = client.get("/api")
        assert response.status_code == 429
        assert response.json()["error"] == "Too Many Requests"

    def test_apps_do_not_share_state(self, auth_headers) -> None:
        first = create_app(Settings(secret_key="test-secret", rate_limit_enabled=False))
        second = create_app(Settings(secret_key="test-secret", rate_limit_enabled=False))
        TestClient(first).post(
            "/api/users",
            json={"user_name": "a", "email": "a@example.com", "birth_date": "1990-01-01"},
            headers=auth_headers,
        )
        assert first.state.user_service.store.count() == 1
        assert second.state.user_service.store.count() == 0


class TestLifecycle:
    def test_startup_starts_and_shutdown_closes_cache(self, app: FastAPI) -> None:
        cache = app.state.user_service.cache
        with TestClient(app) as client:
            assert client.get("/api/users").status_code == 200
            assert cache._sweeper is not None
        assert cache.closed

    def test_zero_check_period_disables_sweeper(self) -> None:
        app_settings = Settings(cache_check_period=0, rate_limit_enabled=False)
        assert app_settings.sweep_interval == 0
        app = create_app(app_settings)
        cache = app.state.user_service.cache
        with TestClient(app) as client:
            assert client.get("/api/users").status_code == 200
            assert cache._sweeper is None

    def test_check_period_falls_back_to_fifth_of_ttl(self) -> None:
        assert Settings(cache_ttl_seconds=10, cache_check_period=None).sweep_interval == 2.0


class TestErrorHandlers:
    def test_closed_cache_is_503(self, app: FastAPI) -> None:
        app.state.user_service.cache.close()
        response = TestClient(app).get("/api/users")
        assert response.status_code == 503
        assert response.json() == {"error": "Service Unavailable", "message": "Cache is closed"}

    def test_unexpected_error_hides_details(self, app: FastAPI) -> None:
        @app.get("/boom")
        async def boom() -> None:
            raise RuntimeError("secret internals")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "message": "Something went wrong"}

    def test_unexpected_error_shown_in_debug(self) -> None:
        app = create_app(Settings(debug=True, rate_limit_enabled=False))

        @app.get("/boom")
        async def boom() -> None:
            raise RuntimeError("secret internals")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")
        assert response.status_code == 500
        assert response.json()["message"] == "secret internals"

    def test_cache_closed_error_body(self) -> None:
        assert CacheClosed().to_dict() == {"error": "Service Unavailable", "message": "Cache is closed"}
