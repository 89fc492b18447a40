"""In-process telemetry for planner runs.

Events are fanned out to registered listeners (tests, dashboards) and logged
as one ``TELEMETRY {...}`` JSON line each.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from threading import RLock
from typing import Any, Callable, Dict, Iterator, List

logger = logging.getLogger("planit.telemetry")


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    payload: Dict[str, Any]


@dataclass
class RunRecorder:
    """Mutable bag of fields collected while a timed run is in progress."""

    fields: Dict[str, Any] = field(default_factory=dict)

    def record(self, **fields: Any) -> None:
        self.fields.update(fields)


_listeners: List[Callable[[TelemetryEvent], None]] = []
_lock = RLock()


def register_listener(listener: Callable[[TelemetryEvent], None]) -> None:
    with _lock:
        _listeners.append(listener)


def clear_listeners() -> None:
    with _lock:
        _listeners.clear()


def emit_event(name: str, **fields: Any) -> None:
    """Emit a structured telemetry event and fan it out to listeners."""
    payload = {key: _plain(value) for key, value in fields.items()}
    event = TelemetryEvent(name=name, payload=payload)

    with _lock:
        listeners = list(_listeners)

    for listener in listeners:
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener failed for %s", name)

    logger.info("TELEMETRY %s", json.dumps({"event": name, **payload}, default=str))


@contextmanager
def timed_run(name: str, **fields: Any) -> Iterator[RunRecorder]:
    """Time the enclosed block and emit ``name`` with a status and ``duration_ms``.

    Fields recorded on the yielded recorder are merged into the event. Errors
    are reported with ``status="error"`` and re-raised.
    """
    recorder = RunRecorder(dict(fields))
    start = time.perf_counter()
    try:
        yield recorder
    except Exception as exc:
        duration_ms = (time.perf_counter() - start) * 1000.0
        emit_event(
            name,
            status="error",
            duration_ms=round(duration_ms, 2),
            error=str(exc),
            exception_type=exc.__class__.__name__,
            **recorder.fields,
        )
        raise
    duration_ms = (time.perf_counter() - start) * 1000.0
    emit_event(name, status="success", duration_ms=round(duration_ms, 2), **recorder.fields)


def _plain(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


__all__ = [
    "RunRecorder",
    "TelemetryEvent",
    "clear_listeners",
    "emit_event",
    "register_listener",
    "timed_run",
]
