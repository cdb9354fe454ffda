from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir

CURRENT_ASSOCIATION_KEY = "currentAssociationId"
AUTH_STORAGE_KEY = "hoa-violations-auth"


class LocalStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def clear(self) -> None: ...


@dataclass
class MemoryLocalStore:
    """Per-process store; nothing survives the interpreter."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def clear(self) -> None:
        self.items.clear()


@dataclass
class FileLocalStore:
    """Key/value store backed by one JSON file in the user data directory.

    Writes replace the whole file, so two processes sharing the file are
    last-write-wins.
    """

    app_name: str = "hoa-violations"
    filename: str = "local_storage.json"
    path_override: Path | None = None

    def _path(self) -> Path:
        if self.path_override is not None:
            self.path_override.parent.mkdir(parents=True, exist_ok=True)
            return self.path_override
        configured = os.getenv("HOA_LOCAL_STORE_PATH", "").strip()
        if configured:
            path = Path(configured)
            path.parent.mkdir(parents=True, exist_ok=True)
            return path
        base = Path(user_data_dir(self.app_name, "HOA"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def _read(self) -> dict[str, str]:
        path = self._path()
        if not path.exists():
            return {}
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (ValueError, OSError):
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(key): str(value) for key, value in payload.items()}

    def _write(self, items: dict[str, str]) -> None:
        path = self._path()
        path.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()
