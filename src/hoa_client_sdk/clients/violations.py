from __future__ import annotations

from datetime import datetime, timezone

from ..violation_models import Violation, ViolationFormData, ViolationRow
from .rest import eq, first_row, parse_rows
from .scoped import ScopedClient

VIOLATION_COLUMNS = "*,violation_categories(id,name,color),associations(id,name)"


class ViolationsClient(ScopedClient):
    async def list_violations(self) -> list[Violation]:
        rows = await self.select(
            "violations",
            columns=VIOLATION_COLUMNS,
            filters=[("association_id", eq(self.tenant_id))],
            order="created_at.desc",
            operation="list_violations",
        )
        return [row.to_violation() for row in parse_rows(ViolationRow, rows, table="violations")]

    async def add_violation(self, data: ViolationFormData) -> Violation:
        context = self._require_context()
        values = {
            **data.to_row(),
            "association_id": context.current_tenant_id,
            "created_by": context.user_id,
        }
        rows = await self.insert("violations", values, operation="add_violation")
        return first_row(ViolationRow, rows, table="violations").to_violation()

    async def update_violation(self, violation_id: str, data: ViolationFormData) -> Violation:
        values = {**data.to_row(), "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self.update(
            "violations",
            values,
            filters=[("id", eq(violation_id)), ("association_id", eq(self.tenant_id))],
            operation="update_violation",
        )
        return first_row(ViolationRow, rows, table="violations").to_violation()

    async def delete_violation(self, violation_id: str) -> None:
        await self.delete(
            "violations",
            filters=[("id", eq(violation_id)), ("association_id", eq(self.tenant_id))],
            operation="delete_violation",
        )
