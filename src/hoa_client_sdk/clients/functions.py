from __future__ import annotations

from ..exceptions import ApiError
from ..models import CreatedUser
from .base import BaseClient
from .rest import parse_row


class FunctionsClient(BaseClient):
    """Calls to the privileged user-provisioning endpoints."""

    def _url(self, name: str) -> str:
        return f"{self.http.config.resolved_functions_url}/{name}"

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        association_id: str,
    ) -> CreatedUser:
        payload = {
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "associationId": association_id,
        }
        data = await self._request(
            "POST",
            self._url("create-user"),
            json_body=payload,
            module="functions",
            operation="create_user",
        )
        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else None
            raise ApiError(
                code="CREATE_USER_FAILED",
                message=str(error or "Failed to create user"),
                details=None,
                status_code=200,
                raw_payload=data,
            )
        return parse_row(CreatedUser, data.get("user"), table="create-user")

    async def delete_user(self, user_id: str) -> None:
        data = await self._request(
            "POST",
            self._url("delete-user"),
            json_body={"userId": user_id},
            module="functions",
            operation="delete_user",
        )
        if isinstance(data, dict) and data.get("success") is False:
            raise ApiError(
                code="DELETE_USER_FAILED",
                message=str(data.get("error") or "Failed to delete user"),
                details=None,
                status_code=200,
                raw_payload=data,
            )
