from __future__ import annotations

import logging

from .context import SessionContext
from .exceptions import TenantPersistenceError, TenantSwitchError
from .local_store import CURRENT_ASSOCIATION_KEY, LocalStore
from .logger import get_logger, log_action


class TenantSwitcher:
    """Moves the current-tenant pointer.

    The pointer is persisted before the new context is returned; a failed
    write fails the switch and the caller keeps the old context.
    """

    def __init__(self, store: LocalStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or get_logger("hoa_client_sdk.tenant_switcher")

    def read_persisted(self) -> str | None:
        try:
            return self.store.get_item(CURRENT_ASSOCIATION_KEY)
        except OSError:
            return None

    def persist(self, tenant_id: str) -> None:
        try:
            self.store.set_item(CURRENT_ASSOCIATION_KEY, tenant_id)
        except OSError as exc:
            raise TenantPersistenceError(
                code="TENANT_PERSIST_FAILED",
                message=f"Could not save the selected association: {exc}",
            ) from exc

    def switch(self, context: SessionContext, tenant_id: str) -> SessionContext:
        if not context.is_member_of(tenant_id):
            log_action(self.logger, "tenant", "switch", context.user_id, tenant_id, "rejected")
            raise TenantSwitchError(
                code="TENANT_NOT_A_MEMBERSHIP",
                message=f"Association {tenant_id} is not among your memberships",
            )
        self.persist(tenant_id)
        log_action(self.logger, "tenant", "switch", context.user_id, tenant_id, "success")
        if context.current_tenant_id == tenant_id:
            return context
        return context.with_tenant(tenant_id)
