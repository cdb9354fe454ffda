from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    ValidationError,
)

# PostgREST reports "zero rows for .single()" as 406 with this code.
NO_ROWS_CODE = "PGRST116"
UNIQUE_VIOLATION_CODE = "23505"


def _message_from(payload: Mapping[str, object]) -> str:
    for key in ("message", "msg", "error_description", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return "Request failed"


def _code_from(payload: Mapping[str, object], status_code: int) -> str:
    for key in ("code", "error_code", "error"):
        value = payload.get(key)
        if value not in (None, ""):
            return str(value)
    return f"HTTP_{status_code}"


def map_error(status_code: int, payload: Mapping[str, object] | None) -> ApiError:
    payload = payload or {}
    code = _code_from(payload, status_code)
    message = _message_from(payload)
    details = payload.get("details") or payload.get("hint")
    mapped: type[ApiError]
    if code == NO_ROWS_CODE:
        mapped = NotFoundError
    elif code == UNIQUE_VIOLATION_CODE:
        mapped = ConflictError
    elif code == "invalid_grant" or "invalid login credentials" in message.lower():
        mapped = InvalidCredentialsError
    elif status_code in {401}:
        mapped = AuthError
    elif status_code in {403}:
        mapped = PermissionError
    elif status_code in {404, 406}:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        raw_payload=dict(payload),
    )
