from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import SchemaMismatchError
from ..models import AuthSession, Identity
from .base import BaseClient


@dataclass
class SignUpResult:
    user: Identity
    session: AuthSession | None = None


def _parse_session(data: object) -> AuthSession:
    try:
        return AuthSession.model_validate(data)
    except PydanticValidationError as exc:
        raise SchemaMismatchError(
            code="INVALID_AUTH_RESPONSE",
            message="Auth provider returned an unexpected session payload",
            details=exc.errors(include_url=False),
            status_code=200,
        ) from exc


class AuthClient(BaseClient):
    """Email/password auth against the provider's ``/auth/v1`` endpoints."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        data = await self.http.request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
            module="auth",
            operation="sign_in",
        )
        return _parse_session(data)

    async def refresh(self, refresh_token: str) -> AuthSession:
        data = await self.http.request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json_body={"refresh_token": refresh_token},
            module="auth",
            operation="refresh",
        )
        return _parse_session(data)

    async def sign_up(self, email: str, password: str, metadata: dict | None = None) -> SignUpResult:
        payload: dict = {"email": email, "password": password}
        if metadata:
            payload["data"] = metadata
        data = await self.http.request(
            "POST",
            "/auth/v1/signup",
            json_body=payload,
            module="auth",
            operation="sign_up",
        )
        if isinstance(data, dict) and data.get("access_token"):
            session = _parse_session(data)
            return SignUpResult(user=session.user, session=session)
        # Without auto-confirm the provider answers with the bare user object.
        user_data = data.get("user", data) if isinstance(data, dict) else data
        try:
            return SignUpResult(user=Identity.model_validate(user_data))
        except PydanticValidationError as exc:
            raise SchemaMismatchError(
                code="INVALID_AUTH_RESPONSE",
                message="Auth provider returned an unexpected sign-up payload",
                details=exc.errors(include_url=False),
                status_code=200,
            ) from exc

    async def get_user(self) -> Identity:
        data = await self._request("GET", "/auth/v1/user", module="auth", operation="get_user")
        try:
            return Identity.model_validate(data)
        except PydanticValidationError as exc:
            raise SchemaMismatchError(
                code="INVALID_AUTH_RESPONSE",
                message="Auth provider returned an unexpected user payload",
                details=exc.errors(include_url=False),
                status_code=200,
            ) from exc

    async def sign_out(self) -> None:
        await self._request("POST", "/auth/v1/logout", module="auth", operation="sign_out")
