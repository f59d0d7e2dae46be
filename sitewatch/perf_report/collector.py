"""Collect completed results from the provider."""

import logging

from sitewatch.perf_report.models.test_result import TestResult
from sitewatch.perf_report.providers.base import PerformanceProvider

logger = logging.getLogger(__name__)


class ResultCollector:
    """Fetches results without ever failing the run."""

    def __init__(self, provider: PerformanceProvider) -> None:
        """Initialize collector with a provider."""
        self.provider = provider

    async def fetch_all(self) -> list[TestResult]:
        """Fetch every available result.

        Any transport or parse error is logged and treated as zero new
        results. Results are not deduplicated.
        """
        logger.info("Collector: Fetching results from provider...")
        try:
            results = await self.provider.fetch_results()
        except Exception as e:
            logger.error(
                f"Failed to fetch results: {type(e).__name__}: {e}",
                exc_info=e,
            )
            return []

        logger.info(f"Fetched {len(results)} result(s)")
        return results
