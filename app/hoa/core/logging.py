from __future__ import annotations

import logging

from hoa_client_sdk.logger import log_json


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(message)s")


__all__ = ["configure_logging", "log_json"]
