"""Group stored results into per-URL and per-location series.

Groups are keyed in the order their first result appears in the dataset.
Sorting within a group is stable, so results with equal timestamps keep
their dataset order.
"""

from collections.abc import Iterable, Sequence

from sitewatch.perf_report.models.test_result import TestResult


def sort_chronologically(
    results: Iterable[TestResult], descending: bool = False
) -> list[TestResult]:
    """Return results sorted by timestamp, oldest first unless descending."""
    return sorted(results, key=lambda r: r.timestamp, reverse=descending)


def group_by_url(
    results: Sequence[TestResult], descending: bool = False
) -> dict[str, list[TestResult]]:
    """Partition results by URL, each group sorted by timestamp."""
    groups: dict[str, list[TestResult]] = {}
    for result in results:
        groups.setdefault(result.url, []).append(result)

    return {
        url: sort_chronologically(group, descending=descending)
        for url, group in groups.items()
    }


def group_by_url_and_location(
    results: Sequence[TestResult],
) -> dict[tuple[str, str], list[TestResult]]:
    """Partition results by (URL, location), each group oldest first.

    Locations are enumerated URL by URL, so all series of one URL are
    adjacent.
    """
    groups: dict[tuple[str, str], list[TestResult]] = {}
    for url, url_results in group_by_url(results).items():
        for result in url_results:
            groups.setdefault((url, result.location), []).append(result)
    return groups
