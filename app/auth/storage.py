# =============================================================================
# app/auth/storage.py - Local Key-Value Cache
# =============================================================================
# Durable local storage for the warm-start copy of the session.
#
# Values are JSON strings under namespaced keys. This cache is never
# authoritative: it only lets the UI paint the last known user before
# Supabase confirms the current session.
#
# Two implementations:
# - JsonFileStore: one JSON object in a file (survives restarts)
# - MemoryStore: a dict (tests, ephemeral runs)
# =============================================================================

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageKeys:
    """Keys the auth-state cache writes."""
    USER_SESSION = "@breez_user_session"
    USER_DATA = "@breez_user_data"
    AUTH_STATE = "@breez_auth_state"

    ALL = (USER_SESSION, USER_DATA, AUTH_STATE)


AUTHENTICATED_FLAG = "authenticated"


class LocalStore:
    """Async key-value interface. Subclasses implement the three operations."""

    async def get(self, key: str) -> str | None:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def multi_remove(self, keys: list[str] | tuple[str, ...]) -> None:
        raise NotImplementedError


class MemoryStore(LocalStore):
    """Dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def multi_remove(self, keys: list[str] | tuple[str, ...]) -> None:
        for key in keys:
            self.data.pop(key, None)


class JsonFileStore(LocalStore):
    """
    Store persisted as a single JSON object on disk.

    Every write rewrites the whole file through a temp file and rename, so a
    crash mid-write leaves the previous contents in place.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Local cache at {self.path} is corrupt; starting empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._read().get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    async def multi_remove(self, keys: list[str] | tuple[str, ...]) -> None:
        async with self._lock:
            data = self._read()
            for key in keys:
                data.pop(key, None)
            self._write(data)
