# resumeforge/services/resumes/temp_store.py
"""In-process store for resumes parsed by unauthenticated users.

Entries are addressed by an unguessable token and evicted after a TTL unless
KEEP_TEMP_RESUMES_FOR_TESTING is set.
"""
from __future__ import annotations

import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("resumes.temp_store")


@dataclass
class TempResume:
    token: str
    data: Dict[str, Any]
    meta: Dict[str, Any]
    created_at: float = field(default_factory=time.time)


class TempResumeStore:
    def __init__(
        self,
        ttl_seconds: int = 3600,
        *,
        keep_forever: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.keep_forever = keep_forever
        self._clock = clock
        self._items: Dict[str, TempResume] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def put(self, data: Dict[str, Any], meta: Optional[Dict[str, Any]] = None) -> str:
        token = secrets.token_urlsafe(24)
        with self._lock:
            self._evict_locked()
            self._items[token] = TempResume(token=token, data=data, meta=dict(meta or {}), created_at=self._clock())
        logger.debug("Stored temporary resume %s...", token[:6])
        return token

    def get(self, token: str) -> Optional[TempResume]:
        with self._lock:
            self._evict_locked()
            return self._items.get(token)

    def discard(self, token: str) -> bool:
        with self._lock:
            return self._items.pop(token, None) is not None

    def evict_expired(self) -> int:
        with self._lock:
            return self._evict_locked()

    def _evict_locked(self) -> int:
        if self.keep_forever:
            return 0
        cutoff = self._clock() - self.ttl_seconds
        expired = [t for t, item in self._items.items() if item.created_at < cutoff]
        for token in expired:
            del self._items[token]
        if expired:
            logger.info("Evicted %d expired temporary resume(s)", len(expired))
        return len(expired)
