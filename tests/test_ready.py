import httpx

from app.hoa.core.config import settings


def test_ready(client, service_backend):
    service_backend.on("GET", "/auth/v1/health", json={"name": "GoTrue"})
    response = client.get("/ready")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["trace_id"]
    request = service_backend.calls("GET", "/auth/v1/health")[0]
    assert request.headers["apikey"] == settings.SUPABASE_SERVICE_ROLE_KEY


def test_ready_reports_unavailable_provider(client, service_backend):
    service_backend.fail("GET", "/auth/v1/health", httpx.ConnectError("refused"))
    response = client.get("/ready")
    assert response.status_code == 503
    payload = response.json()
    assert payload["code"] == "UPSTREAM_UNAVAILABLE"
    assert payload["details"] == {"code": "NETWORK_ERROR"}
