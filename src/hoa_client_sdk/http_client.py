from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import RequestTimeoutError, TransportError

JsonPayload = dict[str, Any] | list[Any] | None


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    status_code: int | None = None


@dataclass
class HttpClient:
    """Async transport to the hosted backend.

    Transient failures are surfaced, never retried: the session layer decides
    what the user sees and whether to try again.
    """

    config: ClientConfig
    client: httpx.AsyncClient | None = None
    api_key: str | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.config.http_timeout_seconds,
                verify=self.config.verify_ssl,
            )
        if self.api_key is None:
            self.api_key = self.config.anon_key

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.config.supabase_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        params: dict[str, Any] | list[tuple[str, str]] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> JsonPayload:
        if self.client is None:
            raise RuntimeError("HTTP client not initialized")
        request_headers = {"Accept": "application/json", "apikey": self.api_key or ""}
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        url = self._build_url(path)
        started = time.monotonic()
        try:
            response = await self.client.request(
                normalized_method,
                url,
                headers=request_headers,
                json=json_body,
                params=params,
            )
        except httpx.TimeoutException as exc:
            self._record_operation(module, operation, started, "timeout", None)
            raise RequestTimeoutError(
                code="TIMEOUT",
                message=f"{operation} timed out",
                details={"type": type(exc).__name__},
                status_code=0,
            ) from exc
        except httpx.RequestError as exc:
            self._record_operation(module, operation, started, "network_error", None)
            raise TransportError(
                code="NETWORK_ERROR",
                message=str(exc) or "Network error while calling the backend",
                details={"type": type(exc).__name__},
                status_code=0,
            ) from exc

        if response.is_success:
            self._record_operation(module, operation, started, "success", response.status_code)
            if not response.content:
                return None
            return response.json()

        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        self._record_operation(module, operation, started, "error", response.status_code)
        raise map_error(response.status_code, payload if isinstance(payload, dict) else {"details": payload})

    def _record_operation(
        self,
        module: str,
        operation: str,
        started: float,
        result: str,
        status_code: int | None,
    ) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            status_code=status_code,
        )
