from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from app.application.ports.token_store import TokenStorePort


class MemoryTokenStore(TokenStorePort):
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class JsonTokenStore(TokenStorePort):
    """Persists the bearer token under a key in a small JSON file."""

    def __init__(self, path: str = "./data/auth.json", key: str = "janaseva_token") -> None:
        self._path = Path(path)
        self._key = key
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get_token(self) -> str | None:
        with self._lock:
            token = self._load().get(self._key)
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        with self._lock:
            data = self._load()
            data[self._key] = token
            self._save(data)

    def clear(self) -> None:
        with self._lock:
            data = self._load()
            if data.pop(self._key, None) is not None:
                self._save(data)

    def _load(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.warning("Token store unreadable, starting empty", extra={"error": str(e)})
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, object]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            temp_path.replace(self._path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
