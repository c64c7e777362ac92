"""Tests for error handling and response envelopes.

Verifies:
- Error envelope shape is correct
- Session errors carry the top-level authenticated flag
- Every error code maps to the correct HTTP status
- Forbidden session errors clear the session cookie
- Unknown exceptions return E_INTERNAL with 500
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wishwall.auth.provider import FakeIdentityProvider
from wishwall.auth.session import SessionGate
from wishwall.errors import (
    ERROR_CODE_TO_STATUS,
    AdminRequiredError,
    ApiError,
    ApiErrorCode,
    ForbiddenError,
    IdentityProviderUnavailable,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
)
from wishwall.responses import (
    api_error_handler,
    error_response,
    success_response,
    unhandled_exception_handler,
)


class TestErrorResponse:
    def test_shape(self):
        response = error_response(ApiErrorCode.E_NOT_FOUND, "Resource not found")

        assert response == {"error": {"code": "E_NOT_FOUND", "message": "Resource not found"}}

    def test_request_id_included_when_given(self):
        response = error_response(ApiErrorCode.E_INTERNAL, "boom", request_id="req-1")
        assert response["error"]["request_id"] == "req-1"

    def test_unauthenticated_flag(self):
        response = error_response(ApiErrorCode.E_UNAUTHENTICATED, "Authentication required")
        assert response["authenticated"] is False

    def test_forbidden_flag(self):
        response = error_response(ApiErrorCode.E_FORBIDDEN, "Admin access required")
        assert response["authenticated"] is True

    def test_no_flag_for_other_errors(self):
        response = error_response(ApiErrorCode.E_INVALID_CREDENTIALS, "Invalid credentials")
        assert "authenticated" not in response


class TestSuccessResponse:
    def test_wraps_data(self):
        assert success_response({"id": "123"}) == {"data": {"id": "123"}}


class TestErrorCodes:
    def test_every_code_has_status(self):
        for code in ApiErrorCode:
            assert code in ERROR_CODE_TO_STATUS

    @pytest.mark.parametrize(
        ("error", "status", "code"),
        [
            (UnauthenticatedError(), 401, ApiErrorCode.E_UNAUTHENTICATED),
            (InvalidCredentialsError(), 401, ApiErrorCode.E_INVALID_CREDENTIALS),
            (ForbiddenError(), 403, ApiErrorCode.E_FORBIDDEN),
            (AdminRequiredError(), 403, ApiErrorCode.E_FORBIDDEN),
            (NotFoundError(ApiErrorCode.E_MESSAGE_NOT_FOUND), 404, ApiErrorCode.E_MESSAGE_NOT_FOUND),
            (IdentityProviderUnavailable(), 503, ApiErrorCode.E_AUTH_UNAVAILABLE),
        ],
    )
    def test_status_mapping(self, error: ApiError, status: int, code: ApiErrorCode):
        assert error.status_code == status
        assert error.code is code

    def test_only_admin_required_clears_session(self):
        assert AdminRequiredError.clear_session is True
        assert ForbiddenError.clear_session is False
        assert UnauthenticatedError.clear_session is False


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    app.state.session_gate = SessionGate(
        FakeIdentityProvider(), secret="error-test-secret-0123456789abcdef", ttl_seconds=60
    )
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/forbidden")
    def forbidden():
        raise ForbiddenError(message="Nope")

    @app.get("/not-admin")
    def not_admin():
        raise AdminRequiredError()

    @app.get("/crash")
    def crash():
        raise RuntimeError("secret internals")

    return app


class TestHandlers:
    def test_api_error(self, error_app: FastAPI):
        response = TestClient(error_app).get("/forbidden")

        assert response.status_code == 403
        assert response.json()["error"] == {"code": "E_FORBIDDEN", "message": "Nope"}
        assert "set-cookie" not in response.headers

    def test_admin_required_clears_cookie(self, error_app: FastAPI):
        response = TestClient(error_app).get("/not-admin")

        assert response.status_code == 403
        assert response.headers["set-cookie"].startswith("admin-session=")
        assert "Max-Age=0" in response.headers["set-cookie"]

    def test_unhandled_exception(self, error_app: FastAPI):
        response = TestClient(error_app, raise_server_exceptions=False).get("/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["code"] == "E_INTERNAL"
        assert "secret internals" not in response.text
