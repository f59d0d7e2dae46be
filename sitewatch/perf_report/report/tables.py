"""History tables for the report, one per URL."""

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel

from sitewatch.perf_report.models.test_result import TestResult
from sitewatch.perf_report.report.grouping import group_by_url

Rating = Literal["good", "needs improvement", "poor"]


def classify_score(score: float) -> Rating:
    """Classify a performance score for display."""
    if score >= 90:
        return "good"
    if score >= 50:
        return "needs improvement"
    return "poor"


def _format_number(value: float) -> str:
    return f"{value:g}"


class TableRow(BaseModel):
    """One formatted row of a history table."""

    date: str
    location: str
    score: str
    lcp: str
    fcp: str
    cls: str
    rating: Rating

    @property
    def rating_slug(self) -> str:
        """The rating as a CSS class suffix."""
        return self.rating.replace(" ", "-")

    @classmethod
    def from_result(cls, result: TestResult) -> "TableRow":
        """Format a stored result for display."""
        return cls(
            date=result.timestamp.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
            location=result.location,
            score=_format_number(result.performance),
            lcp=f"{_format_number(result.lcp)}s",
            fcp=f"{_format_number(result.fcp)}s",
            cls=_format_number(result.cls),
            rating=classify_score(result.performance),
        )


class HistoryTable(BaseModel):
    """All rows for one URL."""

    url: str
    rows: list[TableRow]


def build_history_tables(
    results: Sequence[TestResult], descending: bool = False
) -> list[HistoryTable]:
    """Build one table per URL, rows ordered by timestamp.

    Args:
        results: Stored results
        descending: Newest first when true, oldest first otherwise

    """
    return [
        HistoryTable(url=url, rows=[TableRow.from_result(r) for r in group])
        for url, group in group_by_url(results, descending=descending).items()
    ]
