from typing import Any

from fastapi.security import HTTPBearer
from jose import jwt
from pydantic import BaseModel

from app.hoa.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)


class CallerClaims(BaseModel):
    """Claims of a provider-issued access token."""

    sub: str
    email: str | None = None
    role: str | None = None
    exp: int | None = None


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )
