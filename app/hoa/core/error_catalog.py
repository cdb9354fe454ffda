from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Insufficient permissions",
        status.HTTP_403_FORBIDDEN,
    )
    USER_CREATE_FAILED = ErrorDefinition(
        "USER_CREATE_FAILED",
        "Failed to create user",
        status.HTTP_400_BAD_REQUEST,
    )
    PROFILE_CREATE_FAILED = ErrorDefinition(
        "PROFILE_CREATE_FAILED",
        "Failed to create profile",
        status.HTTP_400_BAD_REQUEST,
    )
    USER_DELETE_FAILED = ErrorDefinition(
        "USER_DELETE_FAILED",
        "Failed to delete user",
        status.HTTP_400_BAD_REQUEST,
    )
    UPSTREAM_UNAVAILABLE = ErrorDefinition(
        "UPSTREAM_UNAVAILABLE",
        "Auth provider unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Missing required fields",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None, message: str | None = None):
        self.error = error
        self.details = details
        self.message = message or error.message
        super().__init__(self.message)
