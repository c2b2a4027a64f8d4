"""
Tests for the exception hierarchy and error responses.
"""

import json

from entitlement_engine.exception_handlers import create_error_response, get_error_type, get_http_error_code
from entitlement_engine.exceptions import (
    EngineError,
    ErrorCode,
    FeatureNotAvailableError,
    ForbiddenError,
    InternalError,
    ResourceNotFoundError,
    UnauthorizedError,
    UsageLimitExceededError,
)


class TestExceptionHierarchy:
    def test_status_codes(self):
        assert UnauthorizedError().status_code == 401
        assert ForbiddenError().status_code == 403
        assert ResourceNotFoundError("Order", "ord-1").status_code == 404
        assert InternalError().status_code == 500

    def test_forbidden_subclasses(self):
        assert isinstance(UsageLimitExceededError("farms", 1, 1), ForbiddenError)
        assert isinstance(FeatureNotAvailableError("nope", feature="analytics"), ForbiddenError)

    def test_forbidden_reason_defaults_to_message(self):
        assert ForbiddenError("Access denied").reason == "Access denied"
        assert ForbiddenError("Access denied", reason="cross-tenant access").reason == "cross-tenant access"

    def test_error_code_override(self):
        exc = UnauthorizedError("Organization not found", error_code=ErrorCode.TENANT_NOT_FOUND)

        assert exc.error_code == ErrorCode.TENANT_NOT_FOUND
        assert UnauthorizedError().error_code == ErrorCode.AUTH_UNAUTHORIZED

    def test_not_found_message(self):
        assert ResourceNotFoundError("Order").message == "Order not found"
        assert ResourceNotFoundError("Order", "ord-1").message == "Order with id 'ord-1' not found"

    def test_details_default_to_empty(self):
        assert EngineError("boom").details == {}


class TestErrorResponse:
    def test_body_shape(self):
        response = create_error_response(
            status_code=403,
            message="Denied",
            error_code=ErrorCode.AUTH_PERMISSION_DENIED,
            details={"required_permission": "orders:read"},
            path="/orders",
        )

        assert response.status_code == 403
        assert json.loads(response.body) == {
            "error": {
                "status_code": 403,
                "message": "Denied",
                "type": "Forbidden",
                "error_code": "AUTH_PERMISSION_DENIED",
                "details": {"required_permission": "orders:read"},
                "path": "/orders",
            }
        }

    def test_optional_fields_are_omitted(self):
        body = json.loads(create_error_response(status_code=401, message="Nope").body)

        assert body == {"error": {"status_code": 401, "message": "Nope", "type": "Unauthorized"}}

    def test_error_types(self):
        assert get_error_type(404) == "Not Found"
        assert get_error_type(418) == "Error"

    def test_http_error_codes(self):
        assert get_http_error_code(403) == "AUTH_PERMISSION_DENIED"
        assert get_http_error_code(418) == "UNKNOWN_ERROR"
