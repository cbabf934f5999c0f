from __future__ import annotations

from pathlib import Path


class ReportError(Exception):
    """Base class for failures while producing report deliverables."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ReportIOError(ReportError):
    """A destination file could not be created, written, or flushed."""


class ReportFilesystemError(ReportError):
    """An output directory could not be created."""
