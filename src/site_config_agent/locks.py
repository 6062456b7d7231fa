from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class _SiteLock:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class DocumentTurnLocks:
    """One lock per site id so turns against the same document never overlap.

    The agent returns whole-document snapshots with no version token, so two
    concurrent turns on one site would overwrite each other on save. Callers
    hold the site's lock from loading the document until the result is stored.
    A site's entry lives only while some caller holds or waits for it.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, _SiteLock] = {}
        self._lock = threading.Lock()

    @contextmanager
    def hold(self, site_id: str, *, timeout: float = -1) -> Iterator[None]:
        with self._lock:
            entry = self._locks.get(site_id)
            if entry is None:
                entry = self._locks[site_id] = _SiteLock()
            entry.holders += 1
        try:
            if not entry.lock.acquire(timeout=timeout):
                raise TimeoutError(f"Another turn is already running for site {site_id}")
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            with self._lock:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[site_id]

    def is_busy(self, site_id: str) -> bool:
        with self._lock:
            entry = self._locks.get(site_id)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._lock:
            return len(self._locks)


__all__ = ["DocumentTurnLocks"]
