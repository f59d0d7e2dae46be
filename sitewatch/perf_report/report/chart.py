"""Chart.js line chart data for performance scores over time."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from sitewatch.perf_report.models.test_result import TestResult
from sitewatch.perf_report.report.grouping import group_by_url_and_location

PALETTE: tuple[str, ...] = (
    "#3b82f6",
    "#ef4444",
    "#22c55e",
    "#eab308",
    "#8b5cf6",
    "#f97316",
    "#14b8a6",
    "#64748b",
)

# Suggested, not enforced: scores outside still plot.
SCORE_SUGGESTED_MIN = 70
SCORE_SUGGESTED_MAX = 100


class ChartPoint(BaseModel):
    """One plotted score."""

    x: str = Field(..., description="ISO-8601 timestamp")
    y: float = Field(..., description="Performance score")


class ChartSeries(BaseModel):
    """One line: a URL tested from one location."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    data: list[ChartPoint]
    border_color: str = Field(..., serialization_alias="borderColor")
    background_color: str = Field(..., serialization_alias="backgroundColor")
    tension: float = 0.1
    fill: bool = False


class ChartDataset(BaseModel):
    """The ``data`` object handed to Chart.js."""

    datasets: list[ChartSeries] = Field(default_factory=list)

    def to_chartjs(self) -> dict[str, object]:
        """Serialize with Chart.js key names."""
        return self.model_dump(mode="json", by_alias=True)


def color_for(index: int) -> str:
    """Pick a palette colour, cycling when there are more series than colours."""
    return PALETTE[index % len(PALETTE)]


def build_chart_dataset(results: Sequence[TestResult]) -> ChartDataset:
    """Build one chronologically ordered series per (URL, location)."""
    series: list[ChartSeries] = []
    groups = group_by_url_and_location(results)

    for index, ((url, location), group) in enumerate(groups.items()):
        color = color_for(index)
        series.append(
            ChartSeries(
                label=f"{url} ({location})",
                data=[
                    ChartPoint(x=r.timestamp.isoformat(), y=r.performance)
                    for r in group
                ],
                border_color=color,
                background_color=f"{color}33",
            )
        )

    return ChartDataset(datasets=series)
