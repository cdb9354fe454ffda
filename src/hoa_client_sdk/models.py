from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderRow(BaseModel):
    """Base for rows returned by the backend; unknown columns are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Identity(ProviderRow):
    id: str
    email: str | None = None


class AuthSession(ProviderRow):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None
    user: Identity


class Association(ProviderRow):
    id: str
    name: str
    abbreviation: str | None = None
    created_at: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None


class Profile(ProviderRow):
    id: str
    user_id: str
    association_id: str | None = None
    first_name: str
    last_name: str = ""
    created_at: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Membership(ProviderRow):
    id: str
    user_id: str | None = None
    association_id: str
    is_active: bool = True
    joined_at: str | None = None
    created_at: str | None = None


class MembershipRow(Membership):
    """Membership joined with its association (``associations!inner``)."""

    association: Association = Field(alias="associations")

    def to_membership(self, user_id: str) -> Membership:
        return Membership(
            id=self.id,
            user_id=user_id,
            association_id=self.association_id,
            is_active=self.is_active,
            joined_at=self.joined_at,
            created_at=self.created_at,
        )


class Role(ProviderRow):
    id: str
    name: str
    description: str | None = None
    permissions: List[str] = Field(default_factory=list)
    is_system_role: bool = False
    association_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("permissions")
    @classmethod
    def _unique_permissions(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def applies_to(self, association_id: str | None) -> bool:
        return self.is_system_role or (
            association_id is not None and self.association_id == association_id
        )


class RoleAssignmentRow(ProviderRow):
    """Role assignment joined with its role (``roles!inner``)."""

    role_id: str
    role: Role = Field(alias="roles")


class UserRoleAssignment(ProviderRow):
    id: str
    user_id: str
    role_id: str
    assigned_by: str | None = None
    assigned_at: str | None = None
    role: Optional[Role] = Field(default=None, alias="roles")


class SessionData(BaseModel):
    session: AuthSession
    env_name: str | None = None


class CreatedUser(ProviderRow):
    id: str
    email: str | None = None


@dataclass(frozen=True)
class TenantMembership:
    membership: Membership
    tenant: Association

    @property
    def tenant_id(self) -> str:
        return self.tenant.id
