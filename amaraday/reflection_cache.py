"""Reflection cache — avoids asking the model twice for an identical payload.

Each ReflectionGenerator owns one; the TTL, size cap and clock are constructor arguments.
"""

import json
import logging
import time
from typing import Callable

from amaraday.models import ReflectionPayload

log = logging.getLogger(__name__)


class ReflectionCache:
    """TTL map from payload key -> reflection text.

    Expired entries are evicted on read and swept on every write. With
    max_entries set, the oldest entry is dropped once the cap is reached.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic,
                 max_entries: int | None = None):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    @staticmethod
    def key_for(payload: ReflectionPayload) -> str:
        return json.dumps(payload.to_dict(), sort_keys=True)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def _sweep(self, now: float) -> None:
        stale = [k for k, (_, stored_at) in self._entries.items() if self._expired(stored_at, now)]
        for key in stale:
            del self._entries[key]
        if stale:
            log.debug("Evicted %d expired reflections", len(stale))

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        text, stored_at = entry
        if self._expired(stored_at, self._clock()):
            del self._entries[key]
            return None
        return text

    def set(self, key: str, text: str) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries.pop(key, None)
        if self.max_entries is not None:
            while self._entries and len(self._entries) >= self.max_entries:
                # dicts keep insertion order, so the first key is the oldest write
                del self._entries[next(iter(self._entries))]
        self._entries[key] = (text, now)

    def clear(self) -> None:
        self._entries.clear()
        log.debug("Reflection cache cleared")

    def __len__(self) -> int:
        return len(self._entries)
