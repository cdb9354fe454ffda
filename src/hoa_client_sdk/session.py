from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Iterable

from .auth_store import AuthStore
from .clients.associations import AssociationsClient
from .clients.auth import AuthClient
from .clients.categories import CategoriesClient
from .clients.rest import RestClient
from .clients.roles import RolesClient
from .clients.users import UsersClient
from .clients.violations import ViolationsClient
from .config import ClientConfig
from .context import SessionContext
from .diagnostics import DiagnosticsSink, RingBufferSink
from .exceptions import ApiError, InvalidCredentialsError, NotAuthenticatedError
from .http_client import HttpClient
from .identity import IdentityResolver
from .loaders import LoadError, ProfileMembershipLoader, select_current_tenant
from .local_store import FileLocalStore, LocalStore
from .logger import get_logger, log_action
from .models import Association, AuthSession, Identity, Profile, Role, TenantMembership
from .permissions import Permission
from .roles import RoleAggregator
from .tenant_switcher import TenantSwitcher
from .timeouts import with_timeout
from .ui_errors import (
    CEILING_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    NO_ASSOCIATIONS_MESSAGE,
    NO_PROFILE_MESSAGE,
    UNEXPECTED_MESSAGE,
    ErrorCategory,
    RecoveryAction,
    UserFacingError,
    to_user_facing_error,
)


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    RESOLVING = "resolving"
    UNAUTHENTICATED = "unauthenticated"
    PROFILE_MISSING = "profile_missing"
    TENANT_MISSING = "tenant_missing"
    READY = "ready"
    ERROR = "error"


class SessionManager:
    """Owns one logical session: identity, profile, memberships, roles and tenant.

    Each resolution pass takes a generation number; results arriving after a
    newer pass (or a sign-out) has started are discarded.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http: HttpClient | None = None,
        store: LocalStore | None = None,
        diagnostics: DiagnosticsSink | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.http = http or HttpClient(config=config)
        self.store = store if store is not None else FileLocalStore()
        self.auth_store = AuthStore(self.store)
        self.diagnostics = diagnostics or RingBufferSink(config.diagnostics_capacity)
        self.logger = logger or get_logger("hoa_client_sdk.session")
        self.tenant_switcher = TenantSwitcher(self.store, self.logger)

        self.status = SessionStatus.UNINITIALIZED
        self.context: SessionContext | None = None
        self.identity: Identity | None = None
        self.profile: Profile | None = None
        self.auth_session: AuthSession | None = None
        self.error: UserFacingError | None = None
        self._generation = 0

    @property
    def loading(self) -> bool:
        return self.status is SessionStatus.RESOLVING

    @property
    def current_tenant(self) -> Association | None:
        return self.context.current_tenant if self.context else None

    @property
    def access_token(self) -> str | None:
        return self.auth_session.access_token if self.auth_session else None

    def debug_log(self) -> list[str]:
        return [event.as_line() for event in self.diagnostics.snapshot()]

    def has_permission(self, permission: Permission | str) -> bool:
        if self.context is None:
            return False
        return self.context.has_permission(permission)

    def has_any_permission(self, permissions: Iterable[Permission | str]) -> bool:
        if self.context is None:
            return False
        return self.context.has_any_permission(permissions)

    def rest_client(self) -> RestClient:
        return RestClient(http=self.http, access_token=self.access_token)

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self.http, access_token=self.access_token)

    def violations_client(self) -> ViolationsClient:
        return ViolationsClient(http=self.http, access_token=self.access_token, context=self.context)

    def categories_client(self) -> CategoriesClient:
        return CategoriesClient(http=self.http, access_token=self.access_token, context=self.context)

    def roles_client(self) -> RolesClient:
        return RolesClient(http=self.http, access_token=self.access_token, context=self.context)

    def associations_client(self) -> AssociationsClient:
        return AssociationsClient(http=self.http, access_token=self.access_token, context=self.context)

    def users_client(self) -> UsersClient:
        return UsersClient(http=self.http, access_token=self.access_token, context=self.context)

    def _begin(self) -> int:
        self._generation += 1
        self.status = SessionStatus.RESOLVING
        self.error = None
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _reset(self, status: SessionStatus) -> None:
        self.status = status
        self.context = None
        self.identity = None
        self.profile = None
        self.auth_session = None

    def _fail(self, error: UserFacingError) -> SessionStatus:
        self.status = SessionStatus.ERROR
        self.context = None
        self.error = error
        log_action(
            self.logger,
            "session",
            "resolve",
            self.identity.id if self.identity else None,
            None,
            "error",
            category=error.category.value,
        )
        return self.status

    async def initialize(self) -> SessionStatus:
        """Run one resolution pass from the cached credentials."""
        generation = self._begin()
        resolver = IdentityResolver(self.config, self.http, self.auth_store, self.diagnostics)
        resolution = await resolver.resolve()
        if not self._is_current(generation):
            return self.status
        if not resolution.authenticated:
            self._reset(SessionStatus.UNAUTHENTICATED)
            if resolution.timed_out:
                self.error = UserFacingError(
                    ErrorCategory.TIMEOUT, resolution.message or CEILING_MESSAGE, RecoveryAction.RELOAD
                )
            elif resolution.message:
                self.error = UserFacingError(
                    ErrorCategory.GENERIC, resolution.message, RecoveryAction.CLEAR_AND_RETRY
                )
            return self.status
        return await self._load(resolution.session, generation)

    async def refetch(self) -> SessionStatus:
        return await self.initialize()

    async def sign_in(self, email: str, password: str) -> SessionStatus:
        generation = self._begin()
        self.diagnostics.record("auth", "Signing in")
        client = AuthClient(http=self.http)
        try:
            session = await with_timeout(
                client.sign_in(email, password), self.config.session_check_timeout_seconds, "Sign in"
            )
        except InvalidCredentialsError:
            return self._sign_in_failed(
                generation,
                UserFacingError(ErrorCategory.GENERIC, INVALID_CREDENTIALS_MESSAGE, RecoveryAction.SIGN_IN),
            )
        except ApiError as exc:
            error = to_user_facing_error(exc, fallback=exc.message or UNEXPECTED_MESSAGE)
            return self._sign_in_failed(
                generation, UserFacingError(error.category, error.message, RecoveryAction.SIGN_IN, error.details)
            )
        if not self._is_current(generation):
            return self.status
        self.auth_store.save(session, self.config.env_name)
        self.diagnostics.record("auth", "Sign in successful")
        return await self._load(session, generation)

    def _sign_in_failed(self, generation: int, error: UserFacingError) -> SessionStatus:
        self.diagnostics.record("auth", "Sign in error", category=error.category.value)
        if self._is_current(generation):
            self._reset(SessionStatus.UNAUTHENTICATED)
            self.error = error
        return self.status

    async def sign_up(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        association_id: str,
    ) -> SessionStatus:
        """Create the identity, then its profile and first membership."""
        generation = self._begin()
        client = AuthClient(http=self.http)
        try:
            result = await with_timeout(
                client.sign_up(email, password, metadata={"full_name": f"{first_name} {last_name}".strip()}),
                self.config.step_timeout_seconds,
                "Sign up",
            )
            rest = RestClient(
                http=self.http, access_token=result.session.access_token if result.session else None
            )
            outcome = await with_timeout(
                rest.rpc(
                    "create_user_and_membership",
                    {
                        "p_user_id": result.user.id,
                        "p_association_id": association_id,
                        "p_first_name": first_name,
                        "p_last_name": last_name,
                    },
                ),
                self.config.step_timeout_seconds,
                "Create profile",
            )
        except ApiError as exc:
            error = to_user_facing_error(exc, fallback=exc.message or UNEXPECTED_MESSAGE)
            return self._sign_in_failed(
                generation, UserFacingError(error.category, error.message, RecoveryAction.RETRY, error.details)
            )

        if isinstance(outcome, list):
            outcome = outcome[0] if outcome else None
        if isinstance(outcome, dict) and outcome.get("success") is False:
            message = str(outcome.get("error") or "Failed to create user profile")
            return self._sign_in_failed(
                generation, UserFacingError(ErrorCategory.GENERIC, message, RecoveryAction.RETRY)
            )

        log_action(self.logger, "auth", "sign_up", result.user.id, association_id, "success")
        if not self._is_current(generation):
            return self.status
        if result.session is None:
            # Email confirmation pending; the user signs in afterwards.
            self._reset(SessionStatus.UNAUTHENTICATED)
            return self.status
        self.auth_store.save(result.session, self.config.env_name)
        return await self._load(result.session, generation)

    async def clear_auth_state(self) -> bool:
        """Drop all local state and sign out at the provider; ``False`` if the provider call failed."""
        token = self.access_token
        self._generation += 1
        self._reset(SessionStatus.UNAUTHENTICATED)
        self.error = None
        provider_ok = True
        try:
            if token:
                client = AuthClient(http=self.http, access_token=token)
                await with_timeout(client.sign_out(), self.config.step_timeout_seconds, "Sign out")
        except ApiError as exc:
            provider_ok = False
            self.diagnostics.record("auth", "Provider sign out failed", code=exc.code)
        finally:
            self.store.clear()
        self.diagnostics.record("auth", "User signed out")
        return provider_ok

    async def sign_out(self) -> SessionStatus:
        await self.clear_auth_state()
        return self.status

    def clear_load_error(self) -> None:
        self.error = None

    def switch_tenant(self, tenant_id: str) -> SessionContext:
        if self.context is None:
            raise NotAuthenticatedError(code="NOT_AUTHENTICATED", message="No active session")
        self.context = self.tenant_switcher.switch(self.context, tenant_id)
        self.diagnostics.record("tenant", "Switched association", association_id=tenant_id)
        return self.context

    async def _load(self, session: AuthSession, generation: int) -> SessionStatus:
        identity = session.user
        self.identity = identity
        self.auth_session = session
        rest = RestClient(http=self.http, access_token=session.access_token)
        loader = ProfileMembershipLoader(rest, self.config.step_timeout_seconds, self.diagnostics)
        aggregator = RoleAggregator(rest, self.config.step_timeout_seconds, self.diagnostics)

        try:
            async with asyncio.timeout(self.config.load_ceiling_seconds):
                profile = await loader.load_profile(identity.id)
                if profile is None:
                    memberships: list[TenantMembership] = []
                    roles: list[Role] = []
                else:
                    memberships, roles = await self._load_memberships_and_roles(loader, aggregator, identity.id)
        except TimeoutError:
            if not self._is_current(generation):
                return self.status
            self.diagnostics.record("session", "Load exceeded ceiling")
            return self._fail(UserFacingError(ErrorCategory.TIMEOUT, CEILING_MESSAGE, RecoveryAction.RELOAD))
        except LoadError as exc:
            if not self._is_current(generation):
                return self.status
            return self._fail(exc.error)

        if not self._is_current(generation):
            return self.status

        if profile is None:
            self.status = SessionStatus.PROFILE_MISSING
            self.context = None
            self.profile = None
            self.error = UserFacingError(
                ErrorCategory.NOT_FOUND, NO_PROFILE_MESSAGE, RecoveryAction.COMPLETE_PROFILE
            )
            return self.status

        self.profile = profile
        if not memberships:
            self.status = SessionStatus.TENANT_MISSING
            self.context = None
            self.error = UserFacingError(
                ErrorCategory.NOT_FOUND, NO_ASSOCIATIONS_MESSAGE, RecoveryAction.CONTACT_SUPPORT
            )
            return self.status

        current = select_current_tenant(memberships, self.tenant_switcher.read_persisted())
        self.context = SessionContext(
            identity=identity,
            profile=profile,
            memberships=tuple(memberships),
            current_tenant_id=current.tenant_id,
            roles=tuple(roles),
        )
        self.status = SessionStatus.READY
        self.error = None
        self.diagnostics.record("session", "User loaded", user_id=identity.id)
        log_action(self.logger, "session", "resolve", identity.id, current.tenant_id, "success")
        return self.status

    async def _load_memberships_and_roles(
        self,
        loader: ProfileMembershipLoader,
        aggregator: RoleAggregator,
        user_id: str,
    ) -> tuple[list[TenantMembership], list[Role]]:
        try:
            async with asyncio.TaskGroup() as group:
                memberships_task = group.create_task(loader.load_memberships(user_id))
                roles_task = group.create_task(aggregator.load_roles(user_id))
        except ExceptionGroup as failures:
            load_errors = [exc for exc in failures.exceptions if isinstance(exc, LoadError)]
            if load_errors:
                raise load_errors[0] from failures
            raise
        return memberships_task.result(), roles_task.result()

    async def aclose(self) -> None:
        await self.http.aclose()
