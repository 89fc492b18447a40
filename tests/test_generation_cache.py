"""Per-learner generation cache."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from planit.cache import GenerationCache
from planit.models import BusyEvent


def _event(hour: int) -> BusyEvent:
    return BusyEvent(
        start=datetime(2024, 6, 10, hour, tzinfo=timezone.utc),
        end=datetime(2024, 6, 10, hour + 1, tzinfo=timezone.utc),
        summary="PlanIt - Algebra",
    )


def test_set_and_get_round_trip_with_normalised_ids() -> None:
    cache = GenerationCache()
    cache.set("Dana ", [_event(8), _event(10)])

    events = cache.get("dana")

    assert events is not None
    assert [event.start.hour for event in events] == [8, 10]
    assert cache.cached_at("DANA") is not None


def test_get_returns_copies() -> None:
    cache = GenerationCache()
    cache.set("dana", [_event(8)])

    events = cache.get("dana")
    assert events is not None
    events[0].summary = "changed"
    events.clear()

    again = cache.get("dana")
    assert again is not None and again[0].summary == "PlanIt - Algebra"


def test_missing_learner_returns_none() -> None:
    cache = GenerationCache()
    assert cache.get("nobody") is None
    assert cache.cached_at("nobody") is None


def test_invalidate_and_clear() -> None:
    cache = GenerationCache()
    cache.set("dana", [_event(8)])
    cache.set("noa", [_event(9)])

    cache.invalidate("dana")
    assert cache.get("dana") is None
    assert cache.get("noa") is not None

    cache.clear()
    assert cache.get("noa") is None


def test_lock_is_shared_per_learner() -> None:
    cache = GenerationCache()

    assert cache.lock_for("Dana") is cache.lock_for("dana")
    assert cache.lock_for("dana") is not cache.lock_for("noa")


def test_empty_learner_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        GenerationCache().get("  ")


def test_invalidate_and_clear_release_idle_locks() -> None:
    cache = GenerationCache()
    first = cache.lock_for("dana")
    cache.lock_for("noa")

    cache.invalidate("dana")
    assert cache.lock_for("dana") is not first

    noa = cache.lock_for("noa")
    cache.clear()
    assert cache.lock_for("noa") is not noa


def test_held_lock_survives_invalidate_and_clear() -> None:
    cache = GenerationCache()
    lock = cache.lock_for("dana")

    with lock:
        cache.invalidate("dana")
        cache.clear()
        assert cache.lock_for("dana") is lock
