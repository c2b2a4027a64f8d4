"""
Exception Classes for the Entitlement Engine

Every authorization outcome that stops a request is raised as an
EngineError subclass so that HTTP handlers and middleware can render a
consistent error body.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in the error body."""

    AUTH_UNAUTHORIZED = "AUTH_UNAUTHORIZED"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    TENANT_IMPERSONATION_FORBIDDEN = "TENANT_IMPERSONATION_FORBIDDEN"
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    TENANT_INACTIVE = "TENANT_INACTIVE"
    TENANT_SUSPENDED = "TENANT_SUSPENDED"
    TENANT_INVALID = "TENANT_INVALID"
    FEATURE_NOT_AVAILABLE = "FEATURE_NOT_AVAILABLE"
    USAGE_LIMIT_EXCEEDED = "USAGE_LIMIT_EXCEEDED"
    RESOURCE_ACCESS_DENIED = "RESOURCE_ACCESS_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class EngineError(Exception):
    """Base exception class for all engine exceptions"""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class UnauthorizedError(EngineError):
    """Raised when the caller cannot be bound to a valid tenant or identity"""

    error_code = ErrorCode.AUTH_UNAUTHORIZED

    def __init__(
        self,
        message: str = "Authentication required",
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code=error_code,
        )


class ForbiddenError(EngineError):
    """Raised when an authenticated caller is not allowed to proceed"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        reason: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.reason = reason or message
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
            error_code=error_code,
        )


class FeatureNotAvailableError(ForbiddenError):
    """Raised when the organization type or plan does not include a module"""

    error_code = ErrorCode.FEATURE_NOT_AVAILABLE

    def __init__(self, message: str, feature: str):
        super().__init__(message=message, details={"feature": feature})


class UsageLimitExceededError(ForbiddenError):
    """Raised when creating a resource would exceed the plan quota"""

    error_code = ErrorCode.USAGE_LIMIT_EXCEEDED

    def __init__(self, resource_type: str, current: int, limit: int):
        message = (
            f"Usage limit exceeded for {resource_type}. Current: {current}/{limit}. "
            "Please upgrade your plan or contact support."
        )
        super().__init__(
            message=message,
            details={"resource_type": resource_type, "current": current, "limit": limit},
        )


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceNotFoundError(EngineError):
    """Raised when the resource an access decision targets does not exist"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


# ============================================================================
# Internal Exceptions
# ============================================================================


class InternalError(EngineError):
    """Raised for unexpected collaborator failures"""

    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Internal error", details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details)
