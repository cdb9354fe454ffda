from __future__ import annotations

from dataclasses import dataclass

from ..context import SessionContext
from ..exceptions import NotAuthenticatedError
from ..gates import PermissionGate
from ..permissions import Permission
from .rest import RestClient


@dataclass
class ScopedClient(RestClient):
    """REST client bound to a session context and its current association."""

    context: SessionContext | None = None

    def _require_context(self) -> SessionContext:
        if self.context is None:
            raise NotAuthenticatedError(code="NOT_AUTHENTICATED", message="No active session")
        return self.context

    def _require(self, permission: Permission) -> SessionContext:
        return PermissionGate.ensure(self.context, permission)

    @property
    def tenant_id(self) -> str:
        return self._require_context().current_tenant_id
