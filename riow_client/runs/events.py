"""Append-only stream of render job events."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

from ..utils import now_utc_iso, sanitize_payload

JOB_EVENT_TYPES = (
    "session_started",
    "job_submitted",
    "job_status",
    "poll_failed",
    "job_ready",
    "image_fetched",
    "job_failed",
)

_ENVELOPE_KEYS = ("type", "run_id", "ts", "job_id")


@dataclass(frozen=True)
class JobEvent:
    type: str
    run_id: str
    ts: str
    job_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "JobEvent":
        return cls(
            type=str(payload["type"]),
            run_id=str(payload["run_id"]),
            ts=str(payload["ts"]),
            job_id=payload.get("job_id"),
            data={key: value for key, value in payload.items() if key not in _ENVELOPE_KEYS},
        )

    @property
    def is_terminal(self) -> bool:
        return self.type in {"image_fetched", "job_failed"}


@dataclass
class EventWriter:
    """Writes one JSON line per job event.

    Every line carries ``type``, ``run_id``, ``ts`` and ``job_id`` (null until
    the service has assigned one). Unknown event types are refused.
    """

    path: Path
    run_id: str
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, init=False)

    def emit(self, event_type: str, *, job_id: str | None = None, **payload: Any) -> dict[str, Any]:
        if event_type not in JOB_EVENT_TYPES:
            raise ValueError(f"Unknown job event type: {event_type!r}")
        event = {
            "type": event_type,
            "run_id": self.run_id,
            "ts": now_utc_iso(),
            "job_id": job_id,
        }
        event.update(sanitize_payload(payload))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        line = f"{json.dumps(event)}\n"
        with self._lock:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line)
        return event


def read_events(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        return []
    events: list[dict[str, Any]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        events.append(json.loads(line))
    return events


def read_job_events(path: Path, job_id: str | None = None) -> list[JobEvent]:
    """Typed view of ``path``, optionally narrowed to one job."""
    events = [JobEvent.from_dict(item) for item in read_events(path)]
    if job_id is None:
        return events
    return [event for event in events if event.job_id == job_id]
