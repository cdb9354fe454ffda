from fastapi import APIRouter, Depends, Request

from hoa_client_sdk.exceptions import ApiError

from app.hoa.core.deps import get_admin_gateway
from app.hoa.core.error_catalog import ErrorCatalog
from app.hoa.core.errors import error_response
from app.hoa.services.admin_gateway import AdminGateway

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    return {"status": "ok", "trace_id": trace_id}


@router.get("/ready")
async def ready(request: Request, gateway: AdminGateway = Depends(get_admin_gateway)):
    trace_id = getattr(request.state, "trace_id", "")
    try:
        await gateway.health()
    except ApiError as exc:
        return error_response(
            code=ErrorCatalog.UPSTREAM_UNAVAILABLE.code,
            message=ErrorCatalog.UPSTREAM_UNAVAILABLE.message,
            details={"code": exc.code},
            trace_id=trace_id,
            status_code=ErrorCatalog.UPSTREAM_UNAVAILABLE.status_code,
        )
    return {"status": "ready", "trace_id": trace_id}
