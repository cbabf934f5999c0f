from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from detection_report.errors import ReportIOError
from detection_report.timeline.store import TimelineStore

LOGGER = logging.getLogger(__name__)

TIMELINE_COLUMNS = ["Time", "Message"]
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def timeline_frame(store: TimelineStore) -> pd.DataFrame:
    """One row per (timestamp, message) pair currently in ``store``."""
    rows = [
        (time.strftime(TIMESTAMP_FORMAT), message)
        for time, messages in store.items()
        for message in messages
    ]
    return pd.DataFrame(rows, columns=TIMELINE_COLUMNS, dtype=object)


def emit_csv(store: TimelineStore, path: Path | str) -> Path:
    path = Path(path)
    frame = timeline_frame(store)
    try:
        frame.to_csv(path, index=False, lineterminator="\n", encoding="utf-8")
    except OSError as exc:
        raise ReportIOError(f"Failed to write CSV timeline {path}: {exc}", path=path) from exc
    store.drain()
    LOGGER.info("CSV timeline written to %s (%d rows)", path, len(frame))
    return path
