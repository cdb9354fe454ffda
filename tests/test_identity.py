from __future__ import annotations

import json

import httpx

from hoa_client_sdk.auth_store import AuthStore
from hoa_client_sdk.config import ClientConfig
from hoa_client_sdk.identity import IdentityResolver
from hoa_client_sdk.local_store import AUTH_STORAGE_KEY
from hoa_client_sdk.models import AuthSession
from hoa_client_sdk.ui_errors import CEILING_MESSAGE, STARTUP_TIMEOUT_MESSAGE
from tests.hoa_helpers import session_payload


def resolver_for(config, http, store, diagnostics) -> IdentityResolver:
    return IdentityResolver(config, http, AuthStore(store), diagnostics)


async def test_no_stored_session(config, http, store, diagnostics, backend) -> None:
    resolution = await resolver_for(config, http, store, diagnostics).resolve()
    assert not resolution.authenticated
    assert resolution.message is None
    assert backend.requests == []


async def test_valid_session_is_verified(config, http, signed_in_store, diagnostics, backend) -> None:
    backend.on("GET", "/auth/v1/user", json={"id": "user-1", "email": "fresh@example.com"})

    resolution = await resolver_for(config, http, signed_in_store, diagnostics).resolve()

    assert resolution.authenticated
    assert resolution.identity.email == "fresh@example.com"
    assert resolution.session.user.email == "fresh@example.com"
    request = backend.calls("GET", "/auth/v1/user")[0]
    assert request.headers["Authorization"].startswith("Bearer ")
    assert request.headers["Authorization"] != "Bearer anon-key"


async def test_rejected_session_is_cleared(config, http, signed_in_store, diagnostics, backend) -> None:
    backend.on("GET", "/auth/v1/user", status=401, json={"message": "invalid JWT"})

    resolution = await resolver_for(config, http, signed_in_store, diagnostics).resolve()

    assert not resolution.authenticated
    assert AUTH_STORAGE_KEY not in signed_in_store.items


async def test_corrupt_token_is_cleared_without_network(config, http, store, diagnostics, backend) -> None:
    payload = session_payload()
    payload["access_token"] = "garbage"
    store.set_item(AUTH_STORAGE_KEY, json.dumps({"session": payload, "env_name": "test"}))

    resolution = await resolver_for(config, http, store, diagnostics).resolve()

    assert not resolution.authenticated
    assert AUTH_STORAGE_KEY not in store.items
    assert backend.requests == []


async def test_expired_token_is_refreshed(config, http, store, diagnostics, backend) -> None:
    AuthStore(store).save(AuthSession.model_validate(session_payload(expires_in=-60)), "test")
    backend.on("POST", "/auth/v1/token", json=session_payload())
    backend.on("GET", "/auth/v1/user", json={"id": "user-1", "email": "owner@example.com"})

    resolution = await resolver_for(config, http, store, diagnostics).resolve()

    assert resolution.authenticated
    refresh = backend.calls("POST", "/auth/v1/token")[0]
    assert refresh.url.params["grant_type"] == "refresh_token"
    assert json.loads(refresh.content) == {"refresh_token": "refresh-user-1"}
    stored = AuthStore(store).load()
    assert stored is not None
    assert stored.session.access_token == resolution.session.access_token


async def test_failed_refresh_signs_out(config, http, store, diagnostics, backend) -> None:
    AuthStore(store).save(AuthSession.model_validate(session_payload(expires_in=-60)), "test")
    backend.on("POST", "/auth/v1/token", status=400, json={"error": "invalid_grant", "error_description": "revoked"})

    resolution = await resolver_for(config, http, store, diagnostics).resolve()

    assert not resolution.authenticated
    assert AUTH_STORAGE_KEY not in store.items


async def test_session_check_timeout(config, http, signed_in_store, diagnostics, backend) -> None:
    backend.on("GET", "/auth/v1/user", json={"id": "user-1"}, delay=0.3)

    resolution = await resolver_for(config, http, signed_in_store, diagnostics).resolve()

    assert resolution.timed_out
    assert resolution.message == STARTUP_TIMEOUT_MESSAGE
    assert AUTH_STORAGE_KEY in signed_in_store.items


async def test_ceiling_bounds_the_whole_pass(http, signed_in_store, diagnostics, backend) -> None:
    config = ClientConfig(
        env_name="test",
        supabase_url="https://hoa.example.supabase.co",
        anon_key="anon-key",
        session_check_timeout_seconds=5,
        init_ceiling_seconds=0.1,
    )
    backend.on("GET", "/auth/v1/user", json={"id": "user-1"}, delay=1.0)

    resolution = await resolver_for(config, http, signed_in_store, diagnostics).resolve()

    assert resolution.timed_out
    assert resolution.message == CEILING_MESSAGE


async def test_network_failure_keeps_stored_session(config, http, signed_in_store, diagnostics, backend) -> None:
    backend.fail("GET", "/auth/v1/user", httpx.ConnectError("refused"))

    resolution = await resolver_for(config, http, signed_in_store, diagnostics).resolve()

    assert not resolution.authenticated
    assert not resolution.timed_out
    assert resolution.message
    assert AUTH_STORAGE_KEY in signed_in_store.items
