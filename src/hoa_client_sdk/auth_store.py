from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import ValidationError

from .local_store import AUTH_STORAGE_KEY, LocalStore
from .models import AuthSession, SessionData


@dataclass(frozen=True)
class TokenValidation:
    valid: bool
    reason: str | None = None


def validate_token(token: str | None, now_utc: datetime | None = None) -> TokenValidation:
    """Check a JWT's shape and ``exp`` claim without verifying its signature."""
    if not token:
        return TokenValidation(valid=False, reason="missing_token")

    parts = token.split(".")
    if len(parts) != 3:
        return TokenValidation(valid=False, reason="corrupt_token")

    payload_part = parts[1]
    padded = payload_part + ("=" * (-len(payload_part) % 4))
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8")
        payload = json.loads(decoded)
    except (ValueError, UnicodeDecodeError):
        return TokenValidation(valid=False, reason="corrupt_token")

    if not isinstance(payload, dict):
        return TokenValidation(valid=False, reason="corrupt_token")

    exp = payload.get("exp")
    if exp is None:
        return TokenValidation(valid=True)

    if not isinstance(exp, (int, float)):
        return TokenValidation(valid=False, reason="corrupt_token")

    now = now_utc or datetime.now(tz=timezone.utc)
    if float(exp) <= now.timestamp():
        return TokenValidation(valid=False, reason="expired_token")

    return TokenValidation(valid=True)


@dataclass
class AuthStore:
    store: LocalStore
    key: str = AUTH_STORAGE_KEY

    def save(self, session: AuthSession, env_name: str | None = None) -> None:
        data = SessionData(session=session, env_name=env_name)
        self.store.set_item(self.key, data.model_dump_json())

    def load(self) -> SessionData | None:
        raw = self.store.get_item(self.key)
        if raw is None:
            return None
        try:
            return SessionData.model_validate_json(raw)
        except (ValidationError, ValueError):
            self.clear()
            return None

    def clear(self) -> None:
        self.store.remove_item(self.key)
