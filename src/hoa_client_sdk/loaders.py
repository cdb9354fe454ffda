from __future__ import annotations

from typing import Sequence

from .clients.rest import RestClient, eq, parse_row, parse_rows
from .diagnostics import DiagnosticsSink
from .error_mapper import NO_ROWS_CODE
from .exceptions import ApiError, NotFoundError
from .models import MembershipRow, Profile, TenantMembership
from .timeouts import with_timeout
from .ui_errors import (
    ASSOCIATIONS_FAILED_MESSAGE,
    PROFILE_FAILED_MESSAGE,
    UserFacingError,
    to_user_facing_error,
)

MEMBERSHIP_COLUMNS = (
    "id,user_id,association_id,is_active,joined_at,created_at,"
    "associations!inner(id,name,abbreviation,address,city,state,zip_code,phone,email,website,created_at)"
)


class LoadError(Exception):
    """A profile or membership fetch failed; carries the user-facing translation."""

    def __init__(self, stage: str, error: UserFacingError) -> None:
        super().__init__(error.message)
        self.stage = stage
        self.error = error


def dedupe_memberships(rows: Sequence[TenantMembership]) -> list[TenantMembership]:
    seen: set[str] = set()
    unique: list[TenantMembership] = []
    for row in rows:
        if row.tenant_id in seen:
            continue
        seen.add(row.tenant_id)
        unique.append(row)
    return unique


def order_memberships(rows: Sequence[TenantMembership]) -> list[TenantMembership]:
    """Oldest membership first; ties broken by membership id."""
    return sorted(rows, key=lambda row: (row.membership.joined_at or "", row.membership.id))


def select_current_tenant(
    memberships: Sequence[TenantMembership], persisted_tenant_id: str | None
) -> TenantMembership | None:
    """Persisted tenant if still a membership, otherwise the first one in list order."""
    if not memberships:
        return None
    if persisted_tenant_id:
        for row in memberships:
            if row.tenant_id == persisted_tenant_id:
                return row
    return memberships[0]


class ProfileMembershipLoader:
    def __init__(self, rest: RestClient, step_timeout_seconds: float, diagnostics: DiagnosticsSink) -> None:
        self.rest = rest
        self.step_timeout_seconds = step_timeout_seconds
        self.diagnostics = diagnostics

    async def load_profile(self, user_id: str) -> Profile | None:
        """Return the profile, or ``None`` when the identity has none."""
        self.diagnostics.record("profile", "Loading profile", user_id=user_id)
        try:
            row = await with_timeout(
                self.rest.select(
                    "user_profiles",
                    filters=[("user_id", eq(user_id))],
                    single=True,
                    operation="load_profile",
                ),
                self.step_timeout_seconds,
                "Profile query",
            )
            profile = parse_row(Profile, row, table="user_profiles")
        except NotFoundError as exc:
            if exc.code == NO_ROWS_CODE:
                self.diagnostics.record("profile", "No profile found")
                return None
            raise self._failure("profile", exc, PROFILE_FAILED_MESSAGE) from exc
        except ApiError as exc:
            raise self._failure("profile", exc, PROFILE_FAILED_MESSAGE) from exc
        self.diagnostics.record("profile", "Profile loaded", profile_id=profile.id)
        return profile

    async def load_memberships(self, user_id: str) -> list[TenantMembership]:
        """Active memberships joined with their association, oldest first, one per association."""
        self.diagnostics.record("memberships", "Loading associations")
        try:
            rows = await with_timeout(
                self.rest.select(
                    "user_association_memberships",
                    columns=MEMBERSHIP_COLUMNS,
                    filters=[("user_id", eq(user_id)), ("is_active", eq(True))],
                    order="joined_at.asc,id.asc",
                    operation="load_memberships",
                ),
                self.step_timeout_seconds,
                "Associations query",
            )
            parsed = parse_rows(MembershipRow, rows, table="user_association_memberships")
        except ApiError as exc:
            raise self._failure("memberships", exc, ASSOCIATIONS_FAILED_MESSAGE) from exc

        memberships = [
            TenantMembership(membership=row.to_membership(user_id), tenant=row.association)
            for row in parsed
            if row.is_active
        ]
        unique = dedupe_memberships(order_memberships(memberships))
        if len(unique) != len(memberships):
            self.diagnostics.record(
                "memberships", "Dropped duplicate memberships", duplicates=len(memberships) - len(unique)
            )
        self.diagnostics.record("memberships", f"Found {len(unique)} associations")
        return unique

    def _failure(self, stage: str, exc: ApiError, fallback: str) -> LoadError:
        error = to_user_facing_error(exc, fallback=fallback)
        self.diagnostics.record(stage, "Load failed", category=error.category.value, code=exc.code)
        return LoadError(stage, error)
