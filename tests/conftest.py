from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from hoa_client_sdk.auth_store import AuthStore
from hoa_client_sdk.config import ClientConfig
from hoa_client_sdk.diagnostics import RingBufferSink
from hoa_client_sdk.http_client import HttpClient
from hoa_client_sdk.local_store import MemoryLocalStore
from hoa_client_sdk.models import AuthSession
from hoa_client_sdk.session import SessionManager

from app.hoa.core.config import settings
from app.hoa.core.deps import get_admin_gateway
from app.hoa.services.admin_gateway import AdminGateway
from app.main import create_app
from tests.hoa_helpers import SUPABASE_URL, FakeBackend, caller_token, session_payload


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(
        env_name="test",
        supabase_url=SUPABASE_URL,
        anon_key="anon-key",
        step_timeout_seconds=0.2,
        session_check_timeout_seconds=0.2,
        init_ceiling_seconds=0.5,
        load_ceiling_seconds=0.5,
    )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
async def http(config, backend):
    client = HttpClient(
        config=config,
        client=httpx.AsyncClient(transport=httpx.MockTransport(backend)),
    )
    yield client
    await client.aclose()


@pytest.fixture()
def store() -> MemoryLocalStore:
    return MemoryLocalStore()


@pytest.fixture()
def diagnostics() -> RingBufferSink:
    return RingBufferSink(capacity=20)


@pytest.fixture()
def signed_in_store(store, config) -> MemoryLocalStore:
    AuthStore(store).save(AuthSession.model_validate(session_payload("user-1")), config.env_name)
    return store


@pytest.fixture()
def manager(config, http, store, diagnostics) -> SessionManager:
    return SessionManager(config, http=http, store=store, diagnostics=diagnostics)


@pytest.fixture()
def service_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def client(service_backend):
    app = create_app()

    async def _gateway():
        http = HttpClient(
            config=settings.service_client_config(),
            client=httpx.AsyncClient(transport=httpx.MockTransport(service_backend)),
        )
        try:
            yield AdminGateway(http)
        finally:
            await http.aclose()

    app.dependency_overrides[get_admin_gateway] = _gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def caller_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {caller_token()}"}
