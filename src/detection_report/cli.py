from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from detection_report.config import AppConfig, load_config
from detection_report.errors import ReportError
from detection_report.io.read import load_detections, load_fragments
from detection_report.io.write import emit_csv
from detection_report.logging import configure_logging
from detection_report.pipeline.run_all import ReportSession, add_fragments, run_all
from detection_report.report.page import write_report_page

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _fail(exc: Exception) -> NoReturn:
    typer.echo(str(exc), err=True)
    raise typer.Exit(code=1)


def _report_generated(path: Path) -> None:
    typer.echo(f"HTML Report was generated. Please check {path} for details.")
    typer.echo("")


@app.command()
def timeline(
    detections: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(..., resolve_path=True, help="Destination CSV file."),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Write the CSV timeline for a JSON-lines detections file."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    session = ReportSession.from_config(cfg)
    try:
        for detection in load_detections(detections):
            session.timeline.insert(detection.record, detection.message)
        emit_csv(session.timeline, out)
    except (ReportError, ValueError) as exc:
        _fail(exc)
    typer.echo(f"CSV timeline written to: {out}")


@app.command()
def report(
    fragments: Path = typer.Option(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="YAML mapping of section id to a list of markdown fragments.",
    ),
    out: Path = typer.Option(..., resolve_path=True, help="Destination HTML file."),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Render an HTML report from pre-built section fragments."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    session = ReportSession.from_config(cfg)
    try:
        add_fragments(session.appender, load_fragments(fragments))
        result = write_report_page(session.render_html(), out)
    except (ReportError, ValueError) as exc:
        _fail(exc)
    _report_generated(result.path)


@app.command("run-all")
def run_all_command(
    detections: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    csv_timeline: Path | None = typer.Option(None, resolve_path=True),
    html_report: Path | None = typer.Option(None, resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Load detections, then write the CSV timeline and HTML report."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    try:
        result = run_all(
            detections_path=detections,
            config=cfg,
            csv_timeline=csv_timeline,
            html_report=html_report,
        )
    except (ReportError, ValueError) as exc:
        _fail(exc)
    if result.csv_timeline is not None:
        typer.echo(f"CSV timeline written to: {result.csv_timeline}")
    if result.html_report is not None:
        _report_generated(result.html_report.path)
    typer.echo(f"Run complete. Detections: {result.detections}")


if __name__ == "__main__":  # pragma: no cover
    app()
