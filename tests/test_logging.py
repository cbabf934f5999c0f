from __future__ import annotations

import pytest

from detection_report import logging as logging_module
from detection_report.logging import LOG_FORMAT, configure_logging


def _capture_basic_config(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    captured: dict[str, object] = {}
    monkeypatch.setattr(
        logging_module.logging, "basicConfig", lambda **kwargs: captured.update(kwargs)
    )
    return captured


def test_configure_logging_uses_explicit_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DETECTION_REPORT_LOG_LEVEL", raising=False)
    captured = _capture_basic_config(monkeypatch)

    configure_logging("debug")

    assert captured == {"level": "DEBUG", "format": LOG_FORMAT}


def test_configure_logging_prefers_environment_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DETECTION_REPORT_LOG_LEVEL", "warning")
    captured = _capture_basic_config(monkeypatch)

    configure_logging("INFO")

    assert captured["level"] == "WARNING"
