from fastapi import APIRouter, Depends

from app.hoa.core.deps import get_caller, get_provisioning_service, get_trace_id
from app.hoa.core.security import CallerClaims
from app.hoa.schemas.users import (
    CreatedUserOut,
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserRequest,
    DeleteUserResponse,
)
from app.hoa.services.provisioning import ProvisioningService

router = APIRouter()


@router.post("/create-user", response_model=CreateUserResponse)
async def create_user(
    payload: CreateUserRequest,
    caller: CallerClaims = Depends(get_caller),
    service: ProvisioningService = Depends(get_provisioning_service),
    trace_id: str = Depends(get_trace_id),
):
    user = await service.create_user(payload, caller.sub, trace_id)
    return CreateUserResponse(user=CreatedUserOut(id=user.id, email=user.email or payload.email))


@router.post("/delete-user", response_model=DeleteUserResponse)
async def delete_user(
    payload: DeleteUserRequest,
    caller: CallerClaims = Depends(get_caller),
    service: ProvisioningService = Depends(get_provisioning_service),
    trace_id: str = Depends(get_trace_id),
):
    await service.delete_user(payload.user_id, caller.sub, trace_id)
    return DeleteUserResponse()
