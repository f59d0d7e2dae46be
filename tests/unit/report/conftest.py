"""Shared fixtures for report tests."""

from collections.abc import Callable

import pytest

from sitewatch.perf_report.models.test_result import TestResult


def _make_result(
    url: str, location: str, timestamp: str, performance: float = 90
) -> TestResult:
    return TestResult.model_validate(
        {
            "url": url,
            "location": location,
            "timestamp": timestamp,
            "performance": performance,
            "lcp": 1.2,
            "fcp": 0.8,
            "cls": 0.02,
        }
    )


@pytest.fixture
def make_result() -> Callable[..., TestResult]:
    """Build stored results with fixed metrics."""
    return _make_result


@pytest.fixture
def mixed_results() -> list[TestResult]:
    """Results for two URLs and several locations, out of order."""
    return [
        _make_result("https://a.test", "uk", "2024-01-03T00:00:00Z", 80),
        _make_result("https://b.test", "jp", "2024-01-02T00:00:00Z", 40),
        _make_result("https://a.test", "in", "2024-01-01T00:00:00Z", 92),
        _make_result("https://a.test", "uk", "2024-01-01T00:00:00Z", 95),
        _make_result("https://b.test", "jp", "2024-01-01T00:00:00Z", 55),
        _make_result("https://a.test", "uk", "2024-01-02T00:00:00Z", 85),
    ]
