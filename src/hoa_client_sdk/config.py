from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    supabase_url: str
    anon_key: str
    functions_url: str | None = None
    http_timeout_seconds: float = 120.0
    step_timeout_seconds: float = 5.0
    session_check_timeout_seconds: float = 8.0
    init_ceiling_seconds: float = 10.0
    load_ceiling_seconds: float = 15.0
    diagnostics_capacity: int = 20
    verify_ssl: bool = True

    @property
    def resolved_functions_url(self) -> str:
        return (self.functions_url or f"{self.supabase_url}/functions/v1").rstrip("/")


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("HOA_ENV") or "dev").strip()
    env_key = env_name.upper()

    supabase_url = (
        (os.getenv(f"HOA_SUPABASE_URL_{env_key}") or "").strip()
        or (os.getenv("HOA_SUPABASE_URL") or "").strip()
    )
    anon_key = (os.getenv("HOA_SUPABASE_ANON_KEY") or "").strip()
    functions_url = (os.getenv("HOA_FUNCTIONS_URL") or "").strip() or None

    http_timeout_seconds = _read_float("HOA_HTTP_TIMEOUT_SECONDS", "120")
    _validate(
        http_timeout_seconds > 0,
        f"Invalid HOA_HTTP_TIMEOUT_SECONDS: expected > 0, got {http_timeout_seconds}",
    )

    step_timeout_seconds = _read_float("HOA_STEP_TIMEOUT_SECONDS", "5")
    _validate(
        step_timeout_seconds > 0,
        f"Invalid HOA_STEP_TIMEOUT_SECONDS: expected > 0, got {step_timeout_seconds}",
    )

    session_check_timeout_seconds = _read_float("HOA_SESSION_CHECK_TIMEOUT_SECONDS", "8")
    _validate(
        session_check_timeout_seconds > 0,
        (
            "Invalid HOA_SESSION_CHECK_TIMEOUT_SECONDS: "
            f"expected > 0, got {session_check_timeout_seconds}"
        ),
    )

    init_ceiling_seconds = _read_float("HOA_INIT_CEILING_SECONDS", "10")
    _validate(
        init_ceiling_seconds > session_check_timeout_seconds,
        (
            "Invalid HOA_INIT_CEILING_SECONDS: expected > HOA_SESSION_CHECK_TIMEOUT_SECONDS "
            f"({session_check_timeout_seconds}), got {init_ceiling_seconds}"
        ),
    )

    load_ceiling_seconds = _read_float("HOA_LOAD_CEILING_SECONDS", "15")
    _validate(
        load_ceiling_seconds > step_timeout_seconds,
        (
            "Invalid HOA_LOAD_CEILING_SECONDS: expected > HOA_STEP_TIMEOUT_SECONDS "
            f"({step_timeout_seconds}), got {load_ceiling_seconds}"
        ),
    )

    diagnostics_capacity = _read_int("HOA_DIAGNOSTICS_CAPACITY", "20")
    _validate(
        diagnostics_capacity >= 1,
        f"Invalid HOA_DIAGNOSTICS_CAPACITY: expected >= 1, got {diagnostics_capacity}",
    )

    verify_ssl = _coerce_bool(os.getenv("HOA_VERIFY_SSL"), True)

    values = {"HOA_SUPABASE_URL": supabase_url, "HOA_SUPABASE_ANON_KEY": anon_key}
    _require(values, ["HOA_SUPABASE_URL", "HOA_SUPABASE_ANON_KEY"])

    return ClientConfig(
        env_name=env_name,
        supabase_url=supabase_url.rstrip("/"),
        anon_key=anon_key,
        functions_url=functions_url,
        http_timeout_seconds=http_timeout_seconds,
        step_timeout_seconds=step_timeout_seconds,
        session_check_timeout_seconds=session_check_timeout_seconds,
        init_ceiling_seconds=init_ceiling_seconds,
        load_ceiling_seconds=load_ceiling_seconds,
        diagnostics_capacity=diagnostics_capacity,
        verify_ssl=verify_ssl,
    )
