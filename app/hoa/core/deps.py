from typing import AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError

from hoa_client_sdk.http_client import HttpClient

from app.hoa.core.config import settings
from app.hoa.core.error_catalog import AppError, ErrorCatalog
from app.hoa.core.security import CallerClaims, bearer_scheme, decode_token
from app.hoa.services.admin_gateway import AdminGateway
from app.hoa.services.provisioning import ProvisioningService


def get_caller(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> CallerClaims:
    if credentials is None:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    try:
        return CallerClaims(**decode_token(credentials.credentials))
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


async def get_admin_gateway() -> AsyncIterator[AdminGateway]:
    http = HttpClient(config=settings.service_client_config())
    try:
        yield AdminGateway(http)
    finally:
        await http.aclose()


def get_provisioning_service(gateway: AdminGateway = Depends(get_admin_gateway)) -> ProvisioningService:
    return ProvisioningService(
        gateway,
        step_timeout_seconds=settings.STEP_TIMEOUT_SECONDS,
        require_caller_permission=settings.REQUIRE_CALLER_PERMISSION,
    )


def get_trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")
