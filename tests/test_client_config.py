from __future__ import annotations

import pytest

from hoa_client_sdk.config import ConfigError, load_config

HOA_VARS = (
    "HOA_ENV",
    "HOA_SUPABASE_URL",
    "HOA_SUPABASE_URL_STAGING",
    "HOA_SUPABASE_ANON_KEY",
    "HOA_FUNCTIONS_URL",
    "HOA_HTTP_TIMEOUT_SECONDS",
    "HOA_STEP_TIMEOUT_SECONDS",
    "HOA_SESSION_CHECK_TIMEOUT_SECONDS",
    "HOA_INIT_CEILING_SECONDS",
    "HOA_LOAD_CEILING_SECONDS",
    "HOA_DIAGNOSTICS_CAPACITY",
    "HOA_VERIFY_SSL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in HOA_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_config_requires_url_and_key(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ConfigError, match="HOA_SUPABASE_URL"):
        load_config()
    monkeypatch.setenv("HOA_SUPABASE_URL", "https://hoa.example.supabase.co")
    with pytest.raises(ConfigError, match="HOA_SUPABASE_ANON_KEY"):
        load_config()


def test_load_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOA_SUPABASE_URL", "https://hoa.example.supabase.co/")
    monkeypatch.setenv("HOA_SUPABASE_ANON_KEY", "anon")
    cfg = load_config()
    assert cfg.env_name == "dev"
    assert cfg.supabase_url == "https://hoa.example.supabase.co"
    assert cfg.resolved_functions_url == "https://hoa.example.supabase.co/functions/v1"
    assert cfg.step_timeout_seconds == 5.0
    assert cfg.session_check_timeout_seconds == 8.0
    assert cfg.init_ceiling_seconds == 10.0
    assert cfg.load_ceiling_seconds == 15.0
    assert cfg.diagnostics_capacity == 20
    assert cfg.verify_ssl is True


def test_load_config_profile_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOA_ENV", "staging")
    monkeypatch.setenv("HOA_SUPABASE_URL", "https://default.example.com")
    monkeypatch.setenv("HOA_SUPABASE_URL_STAGING", "https://staging.example.com")
    monkeypatch.setenv("HOA_SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("HOA_FUNCTIONS_URL", "https://functions.example.com/v1/")
    monkeypatch.setenv("HOA_VERIFY_SSL", "false")
    cfg = load_config()
    assert cfg.env_name == "staging"
    assert cfg.supabase_url == "https://staging.example.com"
    assert cfg.resolved_functions_url == "https://functions.example.com/v1"
    assert cfg.verify_ssl is False


@pytest.mark.parametrize(
    ("key", "value", "snippet"),
    [
        ("HOA_STEP_TIMEOUT_SECONDS", "0", "HOA_STEP_TIMEOUT_SECONDS"),
        ("HOA_STEP_TIMEOUT_SECONDS", "abc", "HOA_STEP_TIMEOUT_SECONDS"),
        ("HOA_SESSION_CHECK_TIMEOUT_SECONDS", "-1", "HOA_SESSION_CHECK_TIMEOUT_SECONDS"),
        ("HOA_INIT_CEILING_SECONDS", "8", "HOA_INIT_CEILING_SECONDS"),
        ("HOA_LOAD_CEILING_SECONDS", "4", "HOA_LOAD_CEILING_SECONDS"),
        ("HOA_DIAGNOSTICS_CAPACITY", "0", "HOA_DIAGNOSTICS_CAPACITY"),
        ("HOA_DIAGNOSTICS_CAPACITY", "many", "HOA_DIAGNOSTICS_CAPACITY"),
    ],
)
def test_load_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    key: str,
    value: str,
    snippet: str,
) -> None:
    monkeypatch.setenv("HOA_SUPABASE_URL", "https://hoa.example.supabase.co")
    monkeypatch.setenv("HOA_SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError, match=snippet):
        load_config()
