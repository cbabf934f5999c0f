from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Mapping, Sequence

from detection_report.config import DEFAULT_SECTIONS, AppConfig
from detection_report.io.read import Detection, load_detections
from detection_report.io.write import emit_csv
from detection_report.report.appender import Appender
from detection_report.report.document import Document
from detection_report.report.page import PageWriteResult, write_report_page
from detection_report.report.render import render_document
from detection_report.report.sections import SectionRegistry
from detection_report.timeline.store import TimelineStore

LOGGER = logging.getLogger(__name__)

GENERAL_OVERVIEW_SECTION, RESULTS_SUMMARY_SECTION = DEFAULT_SECTIONS
TOP_MESSAGES_LIMIT = 20


@dataclass
class ReportSession:
    """Everything one run writes into before the deliverables are produced."""

    document: Document
    appender: Appender
    timeline: TimelineStore

    @classmethod
    def from_config(cls, config: AppConfig) -> "ReportSession":
        document = Document(SectionRegistry(config.report.sections))
        return cls(
            document=document,
            appender=Appender(document, config.report.unknown_section_policy),
            timeline=TimelineStore(),
        )

    def render_html(self) -> str:
        return render_document(self.appender.render_order(), self.document.snapshot())


@dataclass(frozen=True)
class RunResult:
    detections: int
    csv_timeline: Path | None
    html_report: PageWriteResult | None


def format_elapsed(seconds: float) -> str:
    total_ms = int(round(seconds * 1000))
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def _escape_table_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def general_overview_fragments(
    detections: Sequence[Detection],
    timeline: TimelineStore,
    elapsed_seconds: float,
) -> list[str]:
    items = timeline.items()
    fragments = [
        f"- Detections: {len(detections)}",
        f"- Unique messages: {len({detection.message for detection in detections})}",
        f"- Distinct timestamps: {len(items)}",
    ]
    if items:
        fragments.append(f"- First timestamp: {items[0][0].strftime('%Y-%m-%dT%H:%M:%SZ')}")
        fragments.append(f"- Last timestamp: {items[-1][0].strftime('%Y-%m-%dT%H:%M:%SZ')}")
    fragments.append(f"- Elapsed Time: {format_elapsed(elapsed_seconds)}")
    fragments.append("")
    return fragments


def results_summary_fragments(detections: Sequence[Detection]) -> list[str]:
    if not detections:
        return []
    counts = Counter(detection.message for detection in detections)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    fragments = ["| Message | Count |", "| --- | ---: |"]
    fragments.extend(
        f"| {_escape_table_cell(message)} | {count} |"
        for message, count in ranked[:TOP_MESSAGES_LIMIT]
    )
    if len(ranked) > TOP_MESSAGES_LIMIT:
        fragments.append("")
        fragments.append(
            f"Showing the top {TOP_MESSAGES_LIMIT} of {len(ranked)} distinct messages."
        )
    fragments.append("")
    return fragments


def add_fragments(appender: Appender, fragments: Mapping[str, Sequence[str]]) -> None:
    for section_id, values in fragments.items():
        appender.add(section_id, values)


def run_all(
    detections_path: Path,
    config: AppConfig,
    *,
    csv_timeline: Path | None = None,
    html_report: Path | None = None,
) -> RunResult:
    started = perf_counter()
    csv_path = csv_timeline or (
        Path(config.outputs.csv_timeline) if config.outputs.csv_timeline else None
    )
    html_path = html_report or (
        Path(config.outputs.html_report) if config.outputs.html_report else None
    )

    session = ReportSession.from_config(config)
    detections = load_detections(detections_path)
    for detection in detections:
        session.timeline.insert(detection.record, detection.message)
    LOGGER.info("Loaded %d detections from %s", len(detections), detections_path)

    session.appender.add(
        GENERAL_OVERVIEW_SECTION,
        general_overview_fragments(detections, session.timeline, perf_counter() - started),
    )
    session.appender.add(RESULTS_SUMMARY_SECTION, results_summary_fragments(detections))

    page_result = None
    if html_path is not None:
        page_result = write_report_page(session.render_html(), html_path)

    written_csv = None
    if csv_path is not None:
        written_csv = emit_csv(session.timeline, csv_path)

    if csv_path is None and html_path is None:
        LOGGER.warning("No outputs requested; set --csv-timeline or --html-report")

    return RunResult(
        detections=len(detections),
        csv_timeline=written_csv,
        html_report=page_result,
    )
