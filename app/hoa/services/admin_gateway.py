from __future__ import annotations

from hoa_client_sdk.clients.base import BaseClient
from hoa_client_sdk.clients.rest import RestClient, eq, parse_row, parse_rows
from hoa_client_sdk.http_client import HttpClient, JsonPayload
from hoa_client_sdk.models import CreatedUser, Profile


class AdminGateway(BaseClient):
    """Provider calls that need the service-role key."""

    def __init__(self, http: HttpClient) -> None:
        super().__init__(http=http, access_token=http.api_key)
        self.rest = RestClient(http=http, access_token=http.api_key)

    async def create_auth_user(self, email: str, password: str, full_name: str) -> CreatedUser:
        data = await self._request(
            "POST",
            "/auth/v1/admin/users",
            json_body={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"full_name": full_name, "created_by_admin": True},
            },
            module="admin",
            operation="create_auth_user",
        )
        user = data.get("user", data) if isinstance(data, dict) else data
        return parse_row(CreatedUser, user, table="auth.users")

    async def delete_auth_user(self, user_id: str) -> None:
        await self._request(
            "DELETE",
            f"/auth/v1/admin/users/{user_id}",
            module="admin",
            operation="delete_auth_user",
        )

    async def create_profile_and_membership(
        self, user_id: str, association_id: str, first_name: str, last_name: str
    ) -> JsonPayload:
        return await self.rest.rpc(
            "create_user_and_membership",
            {
                "p_user_id": user_id,
                "p_association_id": association_id,
                "p_first_name": first_name,
                "p_last_name": last_name,
            },
        )

    async def find_profile(self, user_id: str) -> Profile | None:
        rows = await self.rest.select(
            "user_profiles",
            filters=[("user_id", eq(user_id))],
            limit=1,
            operation="find_profile",
        )
        profiles = parse_rows(Profile, rows, table="user_profiles")
        return profiles[0] if profiles else None

    async def health(self) -> JsonPayload:
        return await self._request("GET", "/auth/v1/health", module="admin", operation="health")
