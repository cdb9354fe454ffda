from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class AuthError(UnauthorizedError):
    """Authentication failed or session is invalid."""


class InvalidCredentialsError(AuthError):
    """Email/password pair rejected by the auth provider."""


class PermissionError(ForbiddenError):
    """Denied by a row-level policy or the service-role boundary."""


class ConflictError(ApiError):
    """409 or unique-constraint violations."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class RequestTimeoutError(TransportError):
    """A provider call exceeded its timeout and was abandoned client-side."""


class SchemaMismatchError(ValidationError):
    """A provider row did not match the expected response schema."""


@dataclass
class SessionError(Exception):
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class TenantSwitchError(SessionError):
    """Target tenant is not among the caller's active memberships."""


class TenantPersistenceError(SessionError):
    """The current-tenant pointer could not be written to the local store."""


class InsufficientPermissionsError(SessionError):
    """The session lacks the permission required by a management operation."""


class NotAuthenticatedError(SessionError):
    """An operation needed a ready session but none is assembled."""
