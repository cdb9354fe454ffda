from __future__ import annotations

from dataclasses import dataclass

from ..http_client import HttpClient, JsonPayload


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        token = self.access_token or self.http.api_key
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _request(self, method: str, path: str, **kwargs) -> JsonPayload:
        headers = kwargs.pop("headers", None) or {}
        merged = {**self._auth_headers(), **headers}
        return await self.http.request(method, path, headers=merged, **kwargs)
