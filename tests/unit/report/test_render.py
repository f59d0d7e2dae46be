"""Tests for report rendering."""

import json
import re
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from sitewatch.perf_report.models.test_result import TestResult
from sitewatch.perf_report.report.grouping import group_by_url
from sitewatch.perf_report.report.render import build_report, write_report
from sitewatch.perf_report.report.tables import build_history_tables
from sitewatch.perf_report.store import merge

GENERATED_AT = datetime(2024, 1, 3, 12, 0, tzinfo=UTC)


def _chart_data(html: str) -> dict[str, object]:
    match = re.search(r"data: (\{.*?\}),\n\s*options:", html, re.DOTALL)
    assert match is not None
    data: dict[str, object] = json.loads(match.group(1))
    return data


def test_report_contains_chart_and_tables(mixed_results: list[TestResult]) -> None:
    """The document embeds the chart data and one table per URL."""
    html = build_report(mixed_results, generated_at=GENERATED_AT)

    assert html.startswith("<!DOCTYPE html>")
    assert "Generated on: Wed, 03 Jan 2024 12:00:00 UTC" in html
    assert html.count("<table") == 2
    assert "suggestedMin: 70" in html
    assert "suggestedMax: 100" in html

    data = _chart_data(html)
    labels = [s["label"] for s in data["datasets"]]  # type: ignore[attr-defined]
    assert labels == [
        "https://a.test (in)",
        "https://a.test (uk)",
        "https://b.test (jp)",
    ]


def test_report_is_idempotent(mixed_results: list[TestResult]) -> None:
    """Building twice from the same dataset gives byte-identical output."""
    first = build_report(mixed_results, generated_at=GENERATED_AT)
    second = build_report(mixed_results, generated_at=GENERATED_AT)

    assert first == second


def test_report_escapes_html(make_result: Callable[..., TestResult]) -> None:
    """Values from the dataset are escaped in the document."""
    results = [
        make_result("https://a.test/?q=<script>", "uk", "2024-01-01T00:00:00Z")
    ]

    html = build_report(results, generated_at=GENERATED_AT)

    assert "<script>\"" not in html
    assert "https://a.test/?q=&lt;script&gt;" in html


def test_report_with_no_results() -> None:
    """An empty dataset still renders a valid document."""
    html = build_report([], generated_at=GENERATED_AT)

    assert "<table" not in html
    assert _chart_data(html) == {"datasets": []}


def test_write_report_creates_directories(tmp_path: Path) -> None:
    """write_report creates missing parent directories."""
    output = tmp_path / "public" / "index.html"

    write_report(output, "<html></html>")

    assert output.read_text() == "<html></html>"


def test_merge_group_and_classify_scenario(
    make_result: Callable[..., TestResult],
) -> None:
    """A stored result plus a new one merge, group and classify as expected."""
    existing = [make_result("https://x.test", "uk", "2024-01-01T00:00:00Z", 95)]
    incoming = [make_result("https://x.test", "in", "2024-01-02T00:00:00Z", 60)]

    merged = merge(existing, incoming)
    groups = group_by_url(merged)
    tables = build_history_tables(merged)

    assert len(merged) == 2
    assert list(groups) == ["https://x.test"]
    assert [r.location for r in groups["https://x.test"]] == ["uk", "in"]
    assert [row.rating for row in tables[0].rows] == ["good", "needs improvement"]

    html = build_report(merged, generated_at=GENERATED_AT)
    assert "text-green-600\">95<" in html
    assert "text-yellow-600\">60<" in html
    assert 'class="rating-needs-improvement"' in html
