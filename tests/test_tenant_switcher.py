from __future__ import annotations

import pytest

from hoa_client_sdk.exceptions import TenantPersistenceError, TenantSwitchError
from hoa_client_sdk.local_store import CURRENT_ASSOCIATION_KEY, MemoryLocalStore
from hoa_client_sdk.tenant_switcher import TenantSwitcher
from tests.hoa_helpers import build_context


class ReadOnlyStore(MemoryLocalStore):
    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk is read-only")


def test_switch_persists_then_returns_new_context() -> None:
    store = MemoryLocalStore()
    context = build_context([])

    switched = TenantSwitcher(store).switch(context, "assoc-b")

    assert switched.current_tenant_id == "assoc-b"
    assert store.get_item(CURRENT_ASSOCIATION_KEY) == "assoc-b"
    assert context.current_tenant_id == "assoc-a"


def test_switch_to_non_member_is_rejected() -> None:
    store = MemoryLocalStore({CURRENT_ASSOCIATION_KEY: "assoc-a"})
    context = build_context([])

    with pytest.raises(TenantSwitchError):
        TenantSwitcher(store).switch(context, "assoc-z")

    assert store.get_item(CURRENT_ASSOCIATION_KEY) == "assoc-a"


def test_failed_write_leaves_state_unchanged() -> None:
    store = ReadOnlyStore({CURRENT_ASSOCIATION_KEY: "assoc-a"})
    context = build_context([])

    with pytest.raises(TenantPersistenceError):
        TenantSwitcher(store).switch(context, "assoc-b")

    assert store.get_item(CURRENT_ASSOCIATION_KEY) == "assoc-a"
    assert context.current_tenant_id == "assoc-a"


def test_switch_to_current_tenant_is_idempotent() -> None:
    store = MemoryLocalStore()
    context = build_context([])
    switcher = TenantSwitcher(store)

    first = switcher.switch(context, "assoc-a")
    second = switcher.switch(first, "assoc-a")

    assert first is context
    assert second is context
    assert store.get_item(CURRENT_ASSOCIATION_KEY) == "assoc-a"


def test_read_persisted() -> None:
    assert TenantSwitcher(MemoryLocalStore()).read_persisted() is None
    store = MemoryLocalStore({CURRENT_ASSOCIATION_KEY: "assoc-b"})
    assert TenantSwitcher(store).read_persisted() == "assoc-b"
