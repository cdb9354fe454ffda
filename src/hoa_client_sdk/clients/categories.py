from __future__ import annotations

from datetime import datetime, timezone

from ..exceptions import InsufficientPermissionsError
from ..gates import PermissionGate
from ..permissions import Permission
from ..violation_models import DEFAULT_CATEGORY_COLOR, ViolationCategory
from .rest import eq, first_row, parse_rows
from .scoped import ScopedClient

CATEGORY_MANAGERS = (Permission.MANAGE_VIOLATIONS, Permission.MANAGE_COMPANY)


class CategoriesClient(ScopedClient):
    """Violation categories: system-wide ones plus the current association's own."""

    def _require_manager(self) -> None:
        context = self._require_context()
        result = PermissionGate.check_any(context, CATEGORY_MANAGERS)
        if not result.allowed:
            raise InsufficientPermissionsError(code="INSUFFICIENT_PERMISSIONS", message=result.reason)

    def _scope(self) -> tuple[str, str]:
        return ("or", f"(association_id.eq.{self.tenant_id},is_system_category.eq.true)")

    async def list_categories(self) -> list[ViolationCategory]:
        rows = await self.select(
            "violation_categories",
            filters=[("is_active", eq(True)), self._scope()],
            order="sort_order.asc,name.asc",
            operation="list_categories",
        )
        return parse_rows(ViolationCategory, rows, table="violation_categories")

    async def list_manageable_categories(self) -> list[ViolationCategory]:
        self._require_manager()
        rows = await self.select(
            "violation_categories",
            filters=[self._scope()],
            order="is_system_category.desc,sort_order.asc,name.asc",
            operation="list_manageable_categories",
        )
        return parse_rows(ViolationCategory, rows, table="violation_categories")

    async def create_category(
        self,
        name: str,
        *,
        description: str | None = None,
        color: str = DEFAULT_CATEGORY_COLOR,
        sort_order: int = 0,
    ) -> ViolationCategory:
        self._require_manager()
        values = {
            "name": name,
            "description": description,
            "color": color,
            "sort_order": sort_order,
            "association_id": self.tenant_id,
            "is_system_category": False,
            "is_active": True,
        }
        rows = await self.insert("violation_categories", values, operation="create_category")
        return first_row(ViolationCategory, rows, table="violation_categories")

    async def update_category(self, category_id: str, **changes: object) -> ViolationCategory:
        self._require_manager()
        allowed = {"name", "description", "color", "sort_order", "is_active"}
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise ValueError(f"Unsupported category fields: {', '.join(unknown)}")
        values = {**changes, "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self.update(
            "violation_categories",
            values,
            filters=[("id", eq(category_id)), ("is_system_category", eq(False))],
            operation="update_category",
        )
        return first_row(ViolationCategory, rows, table="violation_categories")

    async def deactivate_category(self, category_id: str) -> None:
        self._require_manager()
        await self.update(
            "violation_categories",
            {"is_active": False},
            filters=[("id", eq(category_id)), ("is_system_category", eq(False))],
            operation="deactivate_category",
        )

    async def reorder_categories(self, sort_orders: dict[str, int]) -> None:
        self._require_manager()
        for category_id, sort_order in sort_orders.items():
            await self.update(
                "violation_categories",
                {"sort_order": sort_order},
                filters=[("id", eq(category_id)), ("is_system_category", eq(False))],
                operation="reorder_categories",
            )
