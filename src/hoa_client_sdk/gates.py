from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .context import SessionContext
from .exceptions import InsufficientPermissionsError, NotAuthenticatedError
from .permissions import PERMISSION_DESCRIPTIONS, Permission, permission_key


@dataclass(frozen=True)
class GateResult:
    allowed: bool
    reason: str = ""


class PermissionGate:
    @staticmethod
    def check(context: SessionContext | None, permission: Permission | str) -> GateResult:
        if context is None:
            return GateResult(False, "Sign in to continue.")
        if context.has_permission(permission):
            return GateResult(True)
        key = permission_key(permission)
        try:
            description = PERMISSION_DESCRIPTIONS[Permission(key)]
        except ValueError:
            description = key
        return GateResult(False, f"You don't have permission for this action ({description}).")

    @staticmethod
    def check_any(context: SessionContext | None, permissions: Iterable[Permission | str]) -> GateResult:
        if context is None:
            return GateResult(False, "Sign in to continue.")
        wanted = list(permissions)
        if context.has_any_permission(wanted):
            return GateResult(True)
        names = ", ".join(permission_key(permission) for permission in wanted)
        return GateResult(False, f"You don't have permission for this action ({names}).")

    @staticmethod
    def ensure(context: SessionContext | None, permission: Permission | str) -> SessionContext:
        """Return the context when allowed; raise before any provider call otherwise."""
        if context is None:
            raise NotAuthenticatedError(code="NOT_AUTHENTICATED", message="No active session")
        result = PermissionGate.check(context, permission)
        if not result.allowed:
            raise InsufficientPermissionsError(code="INSUFFICIENT_PERMISSIONS", message=result.reason)
        return context
