from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from detection_report.errors import ReportFilesystemError, ReportIOError

LOGGER = logging.getLogger(__name__)

PAGE_TEMPLATE = "report_page.html.j2"
STYLESHEET_HREF = "./hayabusa_report.css"
ICON_HREF = "./favicon.png"
LOGO_SRC = "./logo.png"


@dataclass(frozen=True)
class PageWriteResult:
    path: Path
    created_parent: bool
    bytes_written: int


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def build_report_page(html_fragment: str) -> str:
    """Wrap a pre-rendered HTML fragment in the full report page."""
    template = _template_env().get_template(PAGE_TEMPLATE)
    return template.render(
        stylesheet_href=STYLESHEET_HREF,
        icon_href=ICON_HREF,
        logo_src=LOGO_SRC,
        body_html=html_fragment,
    )


def _ensure_parent(path: Path) -> bool:
    parent = path.parent
    if parent.is_dir():
        return False
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ReportFilesystemError(
            f"Failed to create report directory {parent}: {exc}", path=parent
        ) from exc
    return True


def write_report_page(html_fragment: str, output_path: Path | str) -> PageWriteResult:
    path = Path(output_path)
    created_parent = _ensure_parent(path)
    if created_parent:
        LOGGER.debug("Created report directory %s", path.parent)

    page = build_report_page(html_fragment) + "\n"
    try:
        with path.open("w", encoding="utf-8") as handle:
            handle.write(page)
    except OSError as exc:
        raise ReportIOError(f"Failed to write HTML report {path}: {exc}", path=path) from exc

    LOGGER.info("HTML report written to %s", path)
    return PageWriteResult(
        path=path,
        created_parent=created_parent,
        bytes_written=len(page.encode("utf-8")),
    )
