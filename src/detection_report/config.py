from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SECTIONS = [
    "General Overview {#general_overview}",
    "Results Summary {#results_summary}",
]


class ReportConfig(BaseModel):
    sections: list[str] = Field(default_factory=lambda: list(DEFAULT_SECTIONS))
    unknown_section_policy: Literal["warn", "extend"] = "warn"

    @field_validator("sections")
    @classmethod
    def _sections_are_unique(cls, value: list[str]) -> list[str]:
        cleaned = [section.strip() for section in value]
        if any(not section for section in cleaned):
            raise ValueError("report.sections entries must be non-empty strings")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("report.sections must not contain duplicates")
        return cleaned


class OutputsConfig(BaseModel):
    html_report: str | None = None
    csv_timeline: str | None = None


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report: ReportConfig = Field(default_factory=ReportConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path | None) -> AppConfig:
    """Load YAML config; ``None`` yields the built-in defaults."""
    if path is None:
        return AppConfig()

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.outputs.html_report = _resolve_optional_path(config.outputs.html_report, base_dir)
    config.outputs.csv_timeline = _resolve_optional_path(config.outputs.csv_timeline, base_dir)
    return config
