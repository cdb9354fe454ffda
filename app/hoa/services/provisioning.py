import logging

from hoa_client_sdk.diagnostics import RingBufferSink
from hoa_client_sdk.exceptions import ApiError, RequestTimeoutError, TransportError
from hoa_client_sdk.models import CreatedUser
from hoa_client_sdk.permissions import Permission, scoped_permissions
from hoa_client_sdk.roles import RoleAggregator

from app.hoa.core.error_catalog import AppError, ErrorCatalog
from app.hoa.core.logging import log_json
from app.hoa.schemas.users import CreateUserRequest
from app.hoa.services.admin_gateway import AdminGateway

logger = logging.getLogger(__name__)


class ProvisioningService:
    """Creates and deletes users with the service-role key.

    A user is created in two provider calls. When the second one (profile and
    membership) fails, the identity from the first is deleted again.
    """

    def __init__(
        self,
        gateway: AdminGateway,
        *,
        step_timeout_seconds: float = 5.0,
        require_caller_permission: bool = True,
    ) -> None:
        self.gateway = gateway
        self.step_timeout_seconds = step_timeout_seconds
        self.require_caller_permission = require_caller_permission

    async def authorize(self, caller_id: str, association_id: str | None, trace_id: str = "") -> None:
        """Caller needs ``manage_users`` through a system role or a role of ``association_id``."""
        if not self.require_caller_permission:
            return
        sink = RingBufferSink(capacity=20, logger=logger)
        aggregator = RoleAggregator(self.gateway.rest, self.step_timeout_seconds, sink)
        roles = await aggregator.load_roles(caller_id)
        if Permission.MANAGE_USERS.value not in scoped_permissions(roles, association_id):
            log_json(
                logger,
                {
                    "event": "caller_denied",
                    "caller_id": caller_id,
                    "association_id": association_id,
                    "trace_id": trace_id,
                },
            )
            raise AppError(ErrorCatalog.PERMISSION_DENIED)

    async def create_user(self, payload: CreateUserRequest, caller_id: str, trace_id: str = "") -> CreatedUser:
        await self.authorize(caller_id, payload.association_id, trace_id)
        try:
            user = await self.gateway.create_auth_user(payload.email, payload.password, payload.full_name)
        except (RequestTimeoutError, TransportError) as exc:
            raise AppError(ErrorCatalog.UPSTREAM_UNAVAILABLE, details={"code": exc.code}) from exc
        except ApiError as exc:
            raise AppError(
                ErrorCatalog.USER_CREATE_FAILED,
                details={"code": exc.code},
                message=f"Failed to create user: {exc.message}",
            ) from exc

        failure = await self._create_profile(user, payload)
        if failure is not None:
            await self._compensate(user, trace_id)
            raise AppError(ErrorCatalog.PROFILE_CREATE_FAILED, message=failure)

        log_json(
            logger,
            {
                "event": "user_created",
                "user_id": user.id,
                "association_id": payload.association_id,
                "caller_id": caller_id,
                "trace_id": trace_id,
            },
        )
        return user

    async def _create_profile(self, user: CreatedUser, payload: CreateUserRequest) -> str | None:
        """Return an error message, or ``None`` when profile and membership exist."""
        try:
            result = await self.gateway.create_profile_and_membership(
                user.id, payload.association_id, payload.first_name, payload.last_name
            )
        except ApiError as exc:
            return f"Failed to create profile: {exc.message}"
        if isinstance(result, list):
            result = result[0] if result else None
        if isinstance(result, dict) and (result.get("error") or result.get("success") is False):
            return str(result.get("error") or "Failed to create profile")
        return None

    async def _compensate(self, user: CreatedUser, trace_id: str) -> None:
        try:
            await self.gateway.delete_auth_user(user.id)
        except ApiError as exc:
            log_json(
                logger,
                {"event": "orphaned_user", "user_id": user.id, "code": exc.code, "trace_id": trace_id},
                logging.ERROR,
            )
            return
        log_json(logger, {"event": "user_rolled_back", "user_id": user.id, "trace_id": trace_id})

    async def delete_user(self, user_id: str, caller_id: str, trace_id: str = "") -> None:
        try:
            profile = await self.gateway.find_profile(user_id)
        except ApiError as exc:
            raise AppError(ErrorCatalog.UPSTREAM_UNAVAILABLE, details={"code": exc.code}) from exc
        await self.authorize(caller_id, profile.association_id if profile else None, trace_id)
        try:
            await self.gateway.delete_auth_user(user_id)
        except ApiError as exc:
            raise AppError(
                ErrorCatalog.USER_DELETE_FAILED,
                details={"code": exc.code},
                message=f"Failed to delete user: {exc.message}",
            ) from exc
        log_json(logger, {"event": "user_deleted", "user_id": user_id, "caller_id": caller_id, "trace_id": trace_id})
