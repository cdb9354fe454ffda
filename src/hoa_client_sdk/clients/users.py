from __future__ import annotations

from ..exceptions import ConflictError, InsufficientPermissionsError, NotFoundError
from ..models import CreatedUser, Membership, Profile
from ..permissions import Permission
from .functions import FunctionsClient
from .rest import eq, first_row, parse_rows
from .scoped import ScopedClient

SUPER_ADMIN_ROLE = "Super Admin"


class UsersClient(ScopedClient):
    """User administration for holders of ``manage_users``."""

    def _functions(self) -> FunctionsClient:
        return FunctionsClient(http=self.http, access_token=self.access_token)

    async def list_profiles(self) -> list[Profile]:
        self._require(Permission.MANAGE_USERS)
        rows = await self.select("user_profiles", order="created_at.desc", operation="list_profiles")
        return parse_rows(Profile, rows, table="user_profiles")

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str = "",
        association_id: str | None = None,
    ) -> CreatedUser:
        self._require(Permission.MANAGE_USERS)
        return await self._functions().create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            association_id=association_id or self.tenant_id,
        )

    async def delete_user(self, user_id: str) -> None:
        self._require(Permission.MANAGE_USERS)
        await self._functions().delete_user(user_id)

    async def update_profile(
        self,
        user_id: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> Profile | None:
        """Rename a user; only a Super Admin may rename someone other than themselves."""
        context = self._require(Permission.MANAGE_USERS)
        is_super_admin = any(
            role.name == SUPER_ADMIN_ROLE and role.is_system_role for role in context.roles
        )
        if user_id != context.user_id and not is_super_admin:
            raise InsufficientPermissionsError(
                code="INSUFFICIENT_PERMISSIONS",
                message="Only Super Admins can update other users' profiles",
            )
        values: dict[str, str] = {}
        if first_name is not None:
            values["first_name"] = first_name
        if last_name is not None:
            values["last_name"] = last_name
        if not values:
            return None
        rows = await self.update(
            "user_profiles",
            values,
            filters=[("user_id", eq(user_id))],
            operation="update_profile",
        )
        return first_row(Profile, rows, table="user_profiles")

    async def add_to_association(self, user_id: str, association_id: str) -> Membership:
        self._require(Permission.MANAGE_USERS)
        existing = await self.select(
            "user_association_memberships",
            columns="id",
            filters=[("user_id", eq(user_id)), ("association_id", eq(association_id))],
            operation="check_membership",
        )
        if existing:
            raise ConflictError(
                code="MEMBERSHIP_EXISTS",
                message="User is already a member of this association",
                details={"user_id": user_id, "association_id": association_id},
                status_code=409,
            )
        rows = await self.insert(
            "user_association_memberships",
            {"user_id": user_id, "association_id": association_id, "is_active": True},
            operation="add_membership",
        )
        return first_row(Membership, rows, table="user_association_memberships")

    async def remove_from_association(self, membership_id: str) -> None:
        self._require(Permission.MANAGE_USERS)
        rows = await self.update(
            "user_association_memberships",
            {"is_active": False},
            filters=[("id", eq(membership_id))],
            operation="remove_membership",
        )
        if not rows:
            raise NotFoundError(
                code="MEMBERSHIP_NOT_FOUND",
                message="Membership not found",
                details={"membership_id": membership_id},
                status_code=404,
            )
