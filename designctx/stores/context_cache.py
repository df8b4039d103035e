"""Bounded in-memory context cache with TTL and optional JSON persistence."""

from __future__ import annotations

from collections import OrderedDict
from datetime import UTC, datetime
import json
from pathlib import Path
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from ..logging import get_logger

_CACHE_VERSION = 1
DEFAULT_MAX_ENTRIES = 256

Clock = Callable[[], float]


class ContextCache:
    """LRU store of serialized contexts keyed by fingerprint.

    Entries expire ``ttl_seconds`` after they were written. Expiry uses wall
    clock time so persisted entries stay valid across processes.
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = time.time,
    ) -> None:
        self._path = path
        self._max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()
        self._lock = threading.Lock()
        self._connected = False
        self._dirty = False
        self.logger = get_logger("stores.context_cache")

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._entries)

    def connect(self) -> None:
        if self._connected:
            return
        if self._path is not None:
            self._load(self._path)
        self._connected = True

    def disconnect(self) -> None:
        self.persist()
        self._connected = False

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                self._dirty = True
                return None
            self._entries.move_to_end(key)
            return value

    def setex(self, key: str, ttl_seconds: int, value: str) -> bool:
        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.logger.debug("Evicted context cache entry %s", evicted)
            self._dirty = True
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._dirty = True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        now = self._clock()
        with self._lock:
            entries: Dict[str, Dict[str, object]] = {
                key: {"expires_at": expires_at, "value": value}
                for key, (expires_at, value) in self._entries.items()
                if expires_at > now
            }
        payload = {
            "version": _CACHE_VERSION,
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "entries": entries,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable context cache %s: %s", path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        now = self._clock()
        loaded: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()
        for key, raw in entries.items():
            if not isinstance(key, str) or not isinstance(raw, dict):
                continue
            expires_at = raw.get("expires_at")
            value = raw.get("value")
            if not isinstance(expires_at, (int, float)) or not isinstance(value, str):
                continue
            if expires_at <= now:
                continue
            loaded[key] = (float(expires_at), value)
        while len(loaded) > self._max_entries:
            loaded.popitem(last=False)
        with self._lock:
            self._entries = loaded
            self._dirty = False


__all__ = ["ContextCache", "DEFAULT_MAX_ENTRIES"]
