from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class Detection:
    record: dict[str, Any]
    message: str


def _parse_detection(payload: Any, *, line_number: int) -> Detection:
    if not isinstance(payload, dict):
        raise ValueError(f"detection on line {line_number} must be a JSON object")
    record = payload.get("record")
    message = payload.get("message")
    if not isinstance(record, dict):
        raise ValueError(f"detection on line {line_number} is missing a 'record' object")
    if not isinstance(message, str):
        raise ValueError(f"detection on line {line_number} is missing a 'message' string")
    return Detection(record=record, message=message)


def load_detections(path: Path) -> list[Detection]:
    """Read JSON-lines detections: ``{"record": {...}, "message": "..."}`` per line."""
    detections: list[Detection] = []
    with path.open("r", encoding="utf-8-sig") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"invalid JSON on line {line_number} of {path}") from exc
            detections.append(_parse_detection(payload, line_number=line_number))
    return detections


def load_fragments(path: Path) -> dict[str, list[str]]:
    """Read a YAML mapping of section id -> list of markdown fragments."""
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"fragments file {path} must contain a mapping of section id to list")

    fragments: dict[str, list[str]] = {}
    for section_id, values in data.items():
        if values is None:
            values = []
        if isinstance(values, str):
            values = [values]
        if not isinstance(values, list):
            raise ValueError(f"fragments for section {section_id!r} must be a list of strings")
        fragments[str(section_id)] = [str(value) for value in values]
    return fragments
