from __future__ import annotations

import httpx
import pytest

from hoa_client_sdk.clients.rest import RestClient, eq, first_row, parse_rows
from hoa_client_sdk.exceptions import (
    NotFoundError,
    RequestTimeoutError,
    SchemaMismatchError,
    TransportError,
)
from hoa_client_sdk.models import Profile
from tests.hoa_helpers import profile_row


async def test_request_sends_api_key_and_records_operation(http, backend) -> None:
    backend.on("GET", "/rest/v1/user_profiles", json=[profile_row()])
    rest = RestClient(http=http, access_token="user-token")

    rows = await rest.select("user_profiles", filters=[("user_id", eq("user-1"))], order="created_at.desc")

    assert rows == [profile_row()]
    request = backend.calls("GET", "/rest/v1/user_profiles")[0]
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer user-token"
    assert request.url.params["user_id"] == "eq.user-1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.url.params["select"] == "*"
    assert http.last_operation is not None
    assert http.last_operation.result == "success"
    assert http.last_operation.status_code == 200


async def test_single_select_asks_for_object(http, backend) -> None:
    backend.on("GET", "/rest/v1/user_profiles", json=profile_row())
    rest = RestClient(http=http)

    await rest.select("user_profiles", single=True)

    request = backend.calls("GET", "/rest/v1/user_profiles")[0]
    assert request.headers["Accept"] == "application/vnd.pgrst.object+json"
    assert request.headers["Authorization"] == "Bearer anon-key"


async def test_writes_prefer_representation(http, backend) -> None:
    backend.on("POST", "/rest/v1/violations", status=201, json=[{"id": "v-1"}])
    backend.on("PATCH", "/rest/v1/violations", json=[{"id": "v-1"}])
    backend.on("DELETE", "/rest/v1/violations", status=204)
    rest = RestClient(http=http)

    await rest.insert("violations", {"address": "1 Oak"})
    await rest.update("violations", {"status": "Resolved"}, filters=[("id", eq("v-1"))])
    assert await rest.delete("violations", filters=[("id", eq("v-1"))]) is None

    assert backend.calls("POST", "/rest/v1/violations")[0].headers["Prefer"] == "return=representation"
    patch = backend.calls("PATCH", "/rest/v1/violations")[0]
    assert patch.headers["Prefer"] == "return=representation"
    assert patch.url.params["id"] == "eq.v-1"


async def test_error_response_is_mapped(http, backend) -> None:
    backend.on("GET", "/rest/v1/user_profiles", status=406, json={"code": "PGRST116", "message": "no rows"})
    rest = RestClient(http=http)

    with pytest.raises(NotFoundError) as exc_info:
        await rest.select("user_profiles", single=True)

    assert exc_info.value.code == "PGRST116"
    assert http.last_operation.result == "error"


async def test_transport_failures(http, backend) -> None:
    backend.fail("GET", "/rest/v1/roles", httpx.ConnectError("connection refused"))
    backend.fail("GET", "/rest/v1/violations", httpx.ReadTimeout("read timed out"))
    rest = RestClient(http=http)

    with pytest.raises(TransportError) as network:
        await rest.select("roles")
    assert network.value.code == "NETWORK_ERROR"
    assert not isinstance(network.value, RequestTimeoutError)

    with pytest.raises(RequestTimeoutError) as timeout:
        await rest.select("violations")
    assert timeout.value.code == "TIMEOUT"
    assert http.last_operation.result == "timeout"


def test_filter_helpers() -> None:
    assert eq(True) == "eq.true"
    assert eq("abc") == "eq.abc"


def test_parse_helpers() -> None:
    assert parse_rows(Profile, None, table="user_profiles") == []
    with pytest.raises(SchemaMismatchError):
        parse_rows(Profile, [{"id": "p-1"}], table="user_profiles")
    with pytest.raises(NotFoundError):
        first_row(Profile, [], table="user_profiles")
