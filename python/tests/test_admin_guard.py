"""Tests for AdminGuardMiddleware (admin page redirects)."""

import pytest
from fastapi.testclient import TestClient

from tests.helpers import VIEWER_EMAIL, VIEWER_PASSWORD, set_cookie_header, use_session
from wishwall.auth.middleware import is_protected_page
from wishwall.auth.provider import FakeIdentityProvider


class TestIsProtectedPage:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/admin", True),
            ("/admin/", True),
            ("/admin/messages", True),
            ("/admin/login", False),
            ("/admin/forgot-password", False),
            ("/admin/reset-password", False),
            ("/administrator", False),
            ("/api/admin/messages", False),
            ("/health", False),
        ],
    )
    def test_paths(self, path, expected):
        assert is_protected_page(path) is expected


class TestAdminGuard:
    def test_redirects_without_session(self, client: TestClient):
        response = client.get("/admin/messages", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login?redirect=%2Fadmin%2Fmessages"

    def test_dashboard_redirect_keeps_path(self, client: TestClient):
        response = client.get("/admin", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login?redirect=%2Fadmin"

    def test_login_page_is_public(self, client: TestClient):
        response = client.get("/admin/login", follow_redirects=False)

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    @pytest.mark.parametrize(
        ("path", "view"),
        [("/admin/forgot-password", "forgot-password"), ("/admin/reset-password", "reset-password")],
    )
    def test_password_pages_are_public(self, client: TestClient, path, view):
        response = client.get(path, follow_redirects=False)

        assert response.status_code == 200
        assert f'data-view="{view}"' in response.text

    def test_admin_sees_page(self, admin_client: TestClient):
        response = admin_client.get("/admin/messages", follow_redirects=False)

        assert response.status_code == 200
        assert 'data-view="messages"' in response.text

    def test_non_admin_is_sent_back_with_error(self, app, client: TestClient, viewer_user):
        session = app.state.session_gate.establish(VIEWER_EMAIL, VIEWER_PASSWORD)
        use_session(client, session.token)

        response = client.get("/admin", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login?error=unauthorized"
        assert "Max-Age=0" in set_cookie_header(response)

    def test_each_navigation_reverifies(
        self, admin_client: TestClient, fake_provider: FakeIdentityProvider
    ):
        assert admin_client.get("/admin", follow_redirects=False).status_code == 200

        fake_provider.available = False

        response = admin_client.get("/admin", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"].startswith("/admin/login?redirect=")

    def test_api_routes_are_not_redirected(self, client: TestClient):
        response = client.get("/api/admin/messages", follow_redirects=False)
        assert response.status_code == 401
