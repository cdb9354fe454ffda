from __future__ import annotations

from ..models import Association
from ..permissions import Permission
from .rest import eq, first_row, parse_rows
from .scoped import ScopedClient

ASSOCIATION_FIELDS = {"name", "abbreviation", "address", "city", "state", "zip_code", "phone", "email", "website"}


def _checked(values: dict[str, object]) -> dict[str, object]:
    unknown = sorted(set(values) - ASSOCIATION_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported association fields: {', '.join(unknown)}")
    return values


class AssociationsClient(ScopedClient):
    async def list_associations(self) -> list[Association]:
        self._require_context()
        rows = await self.select("associations", order="name.asc", operation="list_associations")
        return parse_rows(Association, rows, table="associations")

    async def create_association(self, name: str, **fields: object) -> Association:
        self._require(Permission.MANAGE_COMPANY)
        rows = await self.insert(
            "associations", _checked({"name": name, **fields}), operation="create_association"
        )
        return first_row(Association, rows, table="associations")

    async def update_association(self, association_id: str, **fields: object) -> Association:
        self._require(Permission.MANAGE_COMPANY)
        rows = await self.update(
            "associations",
            _checked(fields),
            filters=[("id", eq(association_id))],
            operation="update_association",
        )
        return first_row(Association, rows, table="associations")
