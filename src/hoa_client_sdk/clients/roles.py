from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from ..exceptions import ValidationError
from ..models import Role, UserRoleAssignment
from ..permissions import Permission, permission_key, unknown_permissions
from .rest import eq, first_row, parse_rows
from .scoped import ScopedClient

ASSIGNMENT_COLUMNS = (
    "id,user_id,role_id,assigned_by,assigned_at,"
    "roles(id,name,description,permissions,is_system_role,association_id,created_at,updated_at)"
)


def _permission_names(permissions: Iterable[Permission | str]) -> list[str]:
    names = list(dict.fromkeys(permission_key(permission) for permission in permissions))
    unknown = unknown_permissions(names)
    if unknown:
        raise ValidationError(
            code="UNKNOWN_PERMISSION",
            message=f"Unknown permissions: {', '.join(unknown)}",
            details={"unknown": unknown},
            status_code=400,
        )
    return names


class RolesClient(ScopedClient):
    """Role catalogue of the current association; system roles are read-only."""

    async def list_roles(self) -> list[Role]:
        self._require(Permission.MANAGE_ROLES)
        rows = await self.select(
            "roles",
            filters=[("or", f"(association_id.eq.{self.tenant_id},is_system_role.eq.true)")],
            order="is_system_role.desc,name.asc",
            operation="list_roles",
        )
        return parse_rows(Role, rows, table="roles")

    async def list_assignments(self) -> list[UserRoleAssignment]:
        self._require(Permission.MANAGE_ROLES)
        rows = await self.select(
            "user_role_assignments",
            columns=ASSIGNMENT_COLUMNS,
            operation="list_assignments",
        )
        return parse_rows(UserRoleAssignment, rows, table="user_role_assignments")

    async def create_role(
        self,
        name: str,
        permissions: Iterable[Permission | str],
        description: str | None = None,
    ) -> Role:
        self._require(Permission.MANAGE_ROLES)
        values = {
            "name": name,
            "description": description,
            "permissions": _permission_names(permissions),
            "association_id": self.tenant_id,
            "is_system_role": False,
        }
        rows = await self.insert("roles", values, operation="create_role")
        return first_row(Role, rows, table="roles")

    async def update_role(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        permissions: Iterable[Permission | str] | None = None,
    ) -> Role:
        self._require(Permission.MANAGE_ROLES)
        values: dict[str, object] = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if name is not None:
            values["name"] = name
        if description is not None:
            values["description"] = description
        if permissions is not None:
            values["permissions"] = _permission_names(permissions)
        rows = await self.update(
            "roles",
            values,
            filters=[
                ("id", eq(role_id)),
                ("association_id", eq(self.tenant_id)),
                ("is_system_role", eq(False)),
            ],
            operation="update_role",
        )
        return first_row(Role, rows, table="roles")

    async def delete_role(self, role_id: str) -> None:
        self._require(Permission.MANAGE_ROLES)
        await self.delete(
            "roles",
            filters=[
                ("id", eq(role_id)),
                ("association_id", eq(self.tenant_id)),
                ("is_system_role", eq(False)),
            ],
            operation="delete_role",
        )

    async def assign_role(self, user_id: str, role_id: str) -> UserRoleAssignment:
        context = self._require(Permission.MANAGE_USERS)
        rows = await self.insert(
            "user_role_assignments",
            {"user_id": user_id, "role_id": role_id, "assigned_by": context.user_id},
            operation="assign_role",
        )
        return first_row(UserRoleAssignment, rows, table="user_role_assignments")

    async def remove_role(self, user_id: str, role_id: str) -> None:
        self._require(Permission.MANAGE_USERS)
        await self.delete(
            "user_role_assignments",
            filters=[("user_id", eq(user_id)), ("role_id", eq(role_id))],
            operation="remove_role",
        )
