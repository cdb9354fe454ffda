import json
import logging
from datetime import datetime, timezone
from typing import Any


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_json(logger: logging.Logger, payload: dict[str, Any], level: int = logging.INFO) -> None:
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    user_id: str | None,
    tenant_id: str | None,
    outcome: str,
    **extra: Any,
) -> None:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "module": module,
        "action": action,
        "user_id": user_id,
        "association_id": tenant_id,
        "outcome": outcome,
    }
    payload.update(extra)
    log_json(logger, payload, logging.WARNING if outcome == "error" else logging.INFO)
