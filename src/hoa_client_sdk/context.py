from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from .models import Association, Identity, Profile, Role, TenantMembership
from .permissions import Permission, flatten_permissions, permission_key, roles_in_scope


@dataclass(frozen=True)
class SessionContext:
    identity: Identity
    profile: Profile
    memberships: tuple[TenantMembership, ...]
    current_tenant_id: str
    roles: tuple[Role, ...] = ()

    @property
    def user_id(self) -> str:
        return self.identity.id

    @property
    def tenants(self) -> list[Association]:
        return [row.tenant for row in self.memberships]

    @property
    def tenant_ids(self) -> list[str]:
        return [row.tenant_id for row in self.memberships]

    @property
    def current_tenant(self) -> Association:
        for row in self.memberships:
            if row.tenant_id == self.current_tenant_id:
                return row.tenant
        raise LookupError(f"Current tenant {self.current_tenant_id} is not a membership")

    @property
    def permissions(self) -> frozenset[str]:
        """Every permission held in any tenant; for display only."""
        return flatten_permissions(self.roles)

    @property
    def effective_permissions(self) -> frozenset[str]:
        return flatten_permissions(roles_in_scope(self.roles, self.current_tenant_id))

    def is_member_of(self, tenant_id: str) -> bool:
        return tenant_id in self.tenant_ids

    def has_permission(self, permission: Permission | str) -> bool:
        return permission_key(permission) in self.effective_permissions

    def has_any_permission(self, permissions: Iterable[Permission | str]) -> bool:
        effective = self.effective_permissions
        return any(permission_key(permission) in effective for permission in permissions)

    def with_tenant(self, tenant_id: str) -> "SessionContext":
        return replace(self, current_tenant_id=tenant_id)
