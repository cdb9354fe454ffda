from fastapi import APIRouter

from app.hoa.routers.health import router as health_router
from app.hoa.routers.users import router as users_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(users_router, prefix="/functions/v1", tags=["users"])
