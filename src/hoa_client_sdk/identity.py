from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .auth_store import AuthStore, validate_token
from .clients.auth import AuthClient
from .config import ClientConfig
from .diagnostics import DiagnosticsSink
from .exceptions import ApiError, AuthError, RequestTimeoutError
from .http_client import HttpClient
from .models import AuthSession, Identity
from .timeouts import with_timeout
from .ui_errors import CEILING_MESSAGE, STARTUP_TIMEOUT_MESSAGE


@dataclass(frozen=True)
class IdentityResolution:
    identity: Identity | None
    session: AuthSession | None = None
    message: str | None = None
    timed_out: bool = False

    @property
    def authenticated(self) -> bool:
        return self.identity is not None and self.session is not None


UNAUTHENTICATED = IdentityResolution(identity=None)


class IdentityResolver:
    """Turns the cached auth session into a verified identity.

    Every provider call is bounded by ``session_check_timeout_seconds`` and the
    whole pass by ``init_ceiling_seconds``. Any failure resolves to
    unauthenticated instead of propagating.
    """

    def __init__(
        self,
        config: ClientConfig,
        http: HttpClient,
        auth_store: AuthStore,
        diagnostics: DiagnosticsSink,
    ) -> None:
        self.config = config
        self.http = http
        self.auth_store = auth_store
        self.diagnostics = diagnostics

    async def resolve(self) -> IdentityResolution:
        self.diagnostics.record("identity", "Checking stored session")
        try:
            async with asyncio.timeout(self.config.init_ceiling_seconds):
                return await self._resolve_stored()
        except TimeoutError:
            self.diagnostics.record("identity", "Session check exceeded ceiling")
            return IdentityResolution(identity=None, message=CEILING_MESSAGE, timed_out=True)

    async def _resolve_stored(self) -> IdentityResolution:
        stored = self.auth_store.load()
        if stored is None:
            self.diagnostics.record("identity", "No stored session")
            return UNAUTHENTICATED

        session = stored.session
        validation = validate_token(session.access_token)
        if not validation.valid:
            if validation.reason == "expired_token" and session.refresh_token:
                refreshed = await self._refresh(session.refresh_token)
                if refreshed is None or refreshed.timed_out:
                    return refreshed or UNAUTHENTICATED
                session = refreshed.session
            else:
                self.diagnostics.record("identity", "Discarding stored session", reason=validation.reason)
                self.auth_store.clear()
                return UNAUTHENTICATED

        client = AuthClient(http=self.http, access_token=session.access_token)
        try:
            identity = await with_timeout(
                client.get_user(), self.config.session_check_timeout_seconds, "Session check"
            )
        except RequestTimeoutError:
            self.diagnostics.record("identity", "Session check timed out")
            return IdentityResolution(identity=None, message=STARTUP_TIMEOUT_MESSAGE, timed_out=True)
        except AuthError as exc:
            self.diagnostics.record("identity", "Stored session rejected", code=exc.code)
            self.auth_store.clear()
            return UNAUTHENTICATED
        except ApiError as exc:
            self.diagnostics.record("identity", "Session check failed", code=exc.code)
            return IdentityResolution(identity=None, message=exc.message)

        self.diagnostics.record("identity", "Session found", user_id=identity.id)
        return IdentityResolution(identity=identity, session=session.model_copy(update={"user": identity}))

    async def _refresh(self, refresh_token: str) -> IdentityResolution | None:
        client = AuthClient(http=self.http)
        try:
            session = await with_timeout(
                client.refresh(refresh_token), self.config.session_check_timeout_seconds, "Session refresh"
            )
        except RequestTimeoutError:
            self.diagnostics.record("identity", "Session refresh timed out")
            return IdentityResolution(identity=None, message=STARTUP_TIMEOUT_MESSAGE, timed_out=True)
        except ApiError as exc:
            self.diagnostics.record("identity", "Session refresh failed", code=exc.code)
            self.auth_store.clear()
            return None
        self.auth_store.save(session, self.config.env_name)
        self.diagnostics.record("identity", "Session refreshed", user_id=session.user.id)
        return IdentityResolution(identity=session.user, session=session)
