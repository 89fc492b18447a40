"""Process-local record of each learner's last published generation."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from ..models import BusyEvent


def _normalize_learner_id(learner_id: str) -> str:
    normalized = learner_id.strip().lower()
    if not normalized:
        raise ValueError("Learner id cannot be empty when caching generations.")
    return normalized


@dataclass
class _GenerationEntry:
    events: List[BusyEvent]
    cached_at: datetime


class GenerationCache:
    """Previous-generation snapshots plus one run lock per learner.

    Runs for the same learner must not interleave, otherwise the snapshot
    read before a run would not match the events it reconciles against.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _GenerationEntry] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, learner_id: str) -> threading.Lock:
        key = _normalize_learner_id(learner_id)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def get(self, learner_id: str) -> Optional[List[BusyEvent]]:
        key = _normalize_learner_id(learner_id)
        entry = self._entries.get(key)
        if entry is None:
            return None
        return [event.model_copy(deep=True) for event in entry.events]

    def cached_at(self, learner_id: str) -> Optional[datetime]:
        entry = self._entries.get(_normalize_learner_id(learner_id))
        return entry.cached_at if entry else None

    def set(self, learner_id: str, events: Sequence[BusyEvent]) -> None:
        key = _normalize_learner_id(learner_id)
        self._entries[key] = _GenerationEntry(
            events=[event.model_copy(deep=True) for event in events],
            cached_at=datetime.now(timezone.utc),
        )

    def invalidate(self, learner_id: str) -> None:
        key = _normalize_learner_id(learner_id)
        self._entries.pop(key, None)
        with self._guard:
            lock = self._locks.get(key)
            if lock is not None and not lock.locked():
                del self._locks[key]

    def clear(self) -> None:
        self._entries.clear()
        with self._guard:
            # Locks held by a running generation stay so its learner keeps one lock.
            self._locks = {key: lock for key, lock in self._locks.items() if lock.locked()}


generation_cache = GenerationCache()

__all__ = ["GenerationCache", "generation_cache"]
