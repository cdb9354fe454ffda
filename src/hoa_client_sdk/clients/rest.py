from __future__ import annotations

from typing import Any, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..error_mapper import NO_ROWS_CODE
from ..exceptions import NotFoundError, SchemaMismatchError
from ..http_client import JsonPayload
from .base import BaseClient

ModelT = TypeVar("ModelT", bound=BaseModel)

Filters = Sequence[tuple[str, str]]

SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"


def eq(value: object) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def parse_rows(model: Type[ModelT], rows: JsonPayload, *, table: str) -> list[ModelT]:
    """Validate provider rows; any malformed row fails the whole fetch."""
    if rows is None:
        return []
    if not isinstance(rows, list):
        rows = [rows]
    try:
        return [model.model_validate(row) for row in rows]
    except PydanticValidationError as exc:
        raise SchemaMismatchError(
            code="SCHEMA_MISMATCH",
            message=f"Unexpected row shape from {table}",
            details=exc.errors(include_url=False),
            status_code=200,
        ) from exc


def parse_row(model: Type[ModelT], row: JsonPayload, *, table: str) -> ModelT:
    return parse_rows(model, row if isinstance(row, dict) else {}, table=table)[0]


class RestClient(BaseClient):
    """Thin PostgREST wrapper over ``/rest/v1``."""

    def _params(
        self,
        filters: Filters | None,
        *,
        select: str | None = None,
        order: str | None = None,
        limit: int | None = None,
    ) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if select is not None:
            params.append(("select", select))
        params.extend(filters or ())
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        return params

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Filters | None = None,
        order: str | None = None,
        limit: int | None = None,
        single: bool = False,
        operation: str | None = None,
    ) -> JsonPayload:
        headers = {"Accept": SINGLE_OBJECT_MEDIA_TYPE} if single else {}
        return await self._request(
            "GET",
            f"/rest/v1/{table}",
            headers=headers,
            params=self._params(filters, select=columns, order=order, limit=limit),
            module=table,
            operation=operation or f"select_{table}",
        )

    async def insert(
        self,
        table: str,
        values: dict[str, Any] | list[dict[str, Any]],
        *,
        returning: bool = True,
        operation: str | None = None,
    ) -> JsonPayload:
        prefer = "return=representation" if returning else "return=minimal"
        return await self._request(
            "POST",
            f"/rest/v1/{table}",
            headers={"Prefer": prefer},
            json_body=values,
            module=table,
            operation=operation or f"insert_{table}",
        )

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        filters: Filters,
        operation: str | None = None,
    ) -> JsonPayload:
        return await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            headers={"Prefer": "return=representation"},
            json_body=values,
            params=self._params(filters),
            module=table,
            operation=operation or f"update_{table}",
        )

    async def delete(self, table: str, *, filters: Filters, operation: str | None = None) -> JsonPayload:
        return await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=self._params(filters),
            module=table,
            operation=operation or f"delete_{table}",
        )

    async def rpc(self, function: str, args: dict[str, Any]) -> JsonPayload:
        return await self._request(
            "POST",
            f"/rest/v1/rpc/{function}",
            json_body=args,
            module="rpc",
            operation=function,
        )


def first_row(model: Type[ModelT], rows: JsonPayload, *, table: str) -> ModelT:
    """First parsed row; an empty result means the filter matched nothing the caller may see."""
    parsed = parse_rows(model, rows, table=table)
    if not parsed:
        raise NotFoundError(
            code=NO_ROWS_CODE,
            message=f"No matching row in {table}",
            details=None,
            status_code=404,
        )
    return parsed[0]
