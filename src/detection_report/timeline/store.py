from __future__ import annotations

import bisect
import threading
from datetime import datetime, timezone
from typing import Any, Mapping

import pandas as pd

TIME_CREATED_PATH = ("Event", "System", "TimeCreated", "#attributes", "SystemTime")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def event_time(event_record: Mapping[str, Any]) -> datetime:
    """Return the UTC ``SystemTime`` of an event record."""
    node: Any = event_record
    for key in TIME_CREATED_PATH:
        if not isinstance(node, Mapping) or key not in node:
            raise ValueError(f"event record missing {'.'.join(TIME_CREATED_PATH)}")
        node = node[key]
    if not isinstance(node, str) or not node.strip():
        raise ValueError("event record SystemTime must be a non-empty string")
    try:
        parsed = pd.Timestamp(node.strip())
    except ValueError as exc:
        raise ValueError(f"invalid event record SystemTime: {node!r}") from exc
    if pd.isna(parsed):
        raise ValueError(f"invalid event record SystemTime: {node!r}")
    return _as_utc(parsed.to_pydatetime())


class TimelineStore:
    """Thread-safe multimap of UTC timestamp -> messages, kept in time order."""

    def __init__(self) -> None:
        self._times: list[datetime] = []
        self._messages: dict[datetime, list[str]] = {}
        self._lock = threading.Lock()

    def insert_at(self, time: datetime, message: str) -> None:
        key = _as_utc(time)
        with self._lock:
            bucket = self._messages.get(key)
            if bucket is None:
                bisect.insort(self._times, key)
                bucket = self._messages[key] = []
            bucket.append(message)

    def insert(self, event_record: Mapping[str, Any], message: str) -> None:
        self.insert_at(event_time(event_record), message)

    def items(self) -> list[tuple[datetime, list[str]]]:
        with self._lock:
            return [(time, list(self._messages[time])) for time in self._times]

    def drain(self) -> list[tuple[datetime, list[str]]]:
        with self._lock:
            drained = [(time, self._messages[time]) for time in self._times]
            self._times = []
            self._messages = {}
        return drained

    def __len__(self) -> int:
        with self._lock:
            return sum(len(messages) for messages in self._messages.values())
