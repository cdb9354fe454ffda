from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .models import Role


class Permission(str, Enum):
    MANAGE_USERS = "manage_users"
    MANAGE_ROLES = "manage_roles"
    MANAGE_VIOLATIONS = "manage_violations"
    VIEW_VIOLATIONS = "view_violations"
    CREATE_VIOLATIONS = "create_violations"
    MANAGE_COMPANY = "manage_company"
    VIEW_REPORTS = "view_reports"
    MANAGE_SETTINGS = "manage_settings"


PERMISSION_DESCRIPTIONS: dict[Permission, str] = {
    Permission.MANAGE_USERS: "Create, edit, and delete user accounts and assign roles",
    Permission.MANAGE_ROLES: "Create, edit, and delete custom roles and permissions",
    Permission.MANAGE_VIOLATIONS: "Create, edit, delete, and update violation records",
    Permission.VIEW_VIOLATIONS: "View violation records and details",
    Permission.CREATE_VIOLATIONS: "Create new violation reports",
    Permission.MANAGE_COMPANY: "Edit association settings and information",
    Permission.VIEW_REPORTS: "Access reports and analytics",
    Permission.MANAGE_SETTINGS: "Configure system settings and preferences",
}


@dataclass(frozen=True)
class RoleTemplate:
    name: str
    description: str
    permissions: tuple[Permission, ...]


DEFAULT_ROLES: tuple[RoleTemplate, ...] = (
    RoleTemplate(
        name="Super Admin",
        description="Full system access with all permissions",
        permissions=(
            Permission.MANAGE_USERS,
            Permission.MANAGE_ROLES,
            Permission.MANAGE_VIOLATIONS,
            Permission.VIEW_VIOLATIONS,
            Permission.MANAGE_COMPANY,
            Permission.VIEW_REPORTS,
            Permission.MANAGE_SETTINGS,
        ),
    ),
    RoleTemplate(
        name="Association Admin",
        description="Full association access with user and violation management",
        permissions=(
            Permission.MANAGE_USERS,
            Permission.MANAGE_VIOLATIONS,
            Permission.VIEW_VIOLATIONS,
            Permission.MANAGE_COMPANY,
            Permission.VIEW_REPORTS,
        ),
    ),
    RoleTemplate(
        name="Manager",
        description="Can manage violations and view reports",
        permissions=(Permission.MANAGE_VIOLATIONS, Permission.VIEW_VIOLATIONS, Permission.VIEW_REPORTS),
    ),
    RoleTemplate(
        name="User",
        description="Basic user with violation viewing and reporting capabilities",
        permissions=(Permission.VIEW_VIOLATIONS, Permission.CREATE_VIOLATIONS),
    ),
    RoleTemplate(
        name="Viewer",
        description="Read-only access to violations",
        permissions=(Permission.VIEW_VIOLATIONS,),
    ),
)


def permission_key(permission: Permission | str) -> str:
    return permission.value if isinstance(permission, Permission) else str(permission)


def flatten_permissions(roles: Iterable[Role]) -> frozenset[str]:
    """Union of every role's permission list; a grant held twice counts once."""
    return frozenset(permission for role in roles for permission in role.permissions)


def roles_in_scope(roles: Iterable[Role], association_id: str | None) -> list[Role]:
    return [role for role in roles if role.applies_to(association_id)]


def scoped_permissions(roles: Iterable[Role], association_id: str | None) -> frozenset[str]:
    return flatten_permissions(roles_in_scope(roles, association_id))


def unknown_permissions(names: Iterable[str]) -> list[str]:
    known = {permission.value for permission in Permission}
    return sorted({name for name in names if name not in known})
