from __future__ import annotations

from .clients.rest import RestClient, eq, parse_rows
from .diagnostics import DiagnosticsSink
from .exceptions import ApiError
from .models import Role, RoleAssignmentRow
from .timeouts import with_timeout

ROLE_ASSIGNMENT_COLUMNS = (
    "role_id,roles!inner(id,name,description,permissions,is_system_role,association_id,created_at,updated_at)"
)


class RoleAggregator:
    """Loads the roles held by an identity.

    Failures never propagate: the caller gets an empty role list and a
    diagnostic event, so a role outage only hides permission-gated features.
    """

    def __init__(self, rest: RestClient, step_timeout_seconds: float, diagnostics: DiagnosticsSink) -> None:
        self.rest = rest
        self.step_timeout_seconds = step_timeout_seconds
        self.diagnostics = diagnostics

    async def load_roles(self, user_id: str) -> list[Role]:
        self.diagnostics.record("roles", "Loading roles")
        try:
            rows = await with_timeout(
                self.rest.select(
                    "user_role_assignments",
                    columns=ROLE_ASSIGNMENT_COLUMNS,
                    filters=[("user_id", eq(user_id))],
                    operation="load_roles",
                ),
                self.step_timeout_seconds,
                "Roles query",
            )
            assignments = parse_rows(RoleAssignmentRow, rows, table="user_role_assignments")
        except ApiError as exc:
            self.diagnostics.record(
                "roles", "Roles loading failed (continuing without roles)", code=exc.code
            )
            return []

        roles: list[Role] = []
        seen: set[str] = set()
        for assignment in assignments:
            if assignment.role.id in seen:
                continue
            seen.add(assignment.role.id)
            roles.append(assignment.role)
        self.diagnostics.record("roles", f"Loaded {len(roles)} roles")
        return roles
