"""Render the static HTML performance report."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitewatch.perf_report.models.test_result import TestResult
from sitewatch.perf_report.report.chart import (
    SCORE_SUGGESTED_MAX,
    SCORE_SUGGESTED_MIN,
    ChartDataset,
    build_chart_dataset,
)
from sitewatch.perf_report.report.tables import HistoryTable, build_history_tables

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "report.html.j2"


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_report(
    tables: Sequence[HistoryTable],
    chart: ChartDataset,
    generated_at: datetime,
) -> str:
    """Render the report document.

    Args:
        tables: Per-URL history tables, rows already in display order
        chart: Chart series, points already in chronological order
        generated_at: Timestamp printed in the report header

    Returns:
        The complete HTML document

    """
    template = _template_env().get_template(TEMPLATE_NAME)
    return template.render(
        generated_at=generated_at.strftime("%a, %d %b %Y %H:%M:%S %Z"),
        tables=[table.model_dump() for table in tables],
        chart_data=chart.to_chartjs(),
        suggested_min=SCORE_SUGGESTED_MIN,
        suggested_max=SCORE_SUGGESTED_MAX,
    )


def build_report(
    results: Sequence[TestResult],
    descending: bool = False,
    generated_at: datetime | None = None,
) -> str:
    """Derive the chart and tables from the dataset and render them.

    Args:
        results: The full stored history
        descending: Order table rows newest first (chart is always oldest first)
        generated_at: Header timestamp, defaults to now

    """
    logger.info(f"Building report from {len(results)} result(s)...")
    tables = build_history_tables(results, descending=descending)
    chart = build_chart_dataset(results)
    return render_report(tables, chart, generated_at or datetime.now(UTC))


def write_report(output_file: Path, html: str) -> None:
    """Write the rendered document, creating parent directories."""
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(html, encoding="utf-8")
    logger.info(f"Report saved to: {output_file}")
