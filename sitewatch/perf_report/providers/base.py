"""Abstract base class for performance measurement providers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from sitewatch.perf_report.models.test_request import BatchTestRequest, TestRequest
from sitewatch.perf_report.models.test_result import ProviderAck, TestResult


class PerformanceProvider(ABC):
    """Abstract base for third-party page-speed measurement services."""

    @abstractmethod
    async def submit_test(self, request: TestRequest) -> ProviderAck:
        """Ask the provider to run one test.

        Args:
            request: URL, location, device and config overrides

        Returns:
            The provider's acknowledgement

        """

    @abstractmethod
    async def submit_batch(self, request: BatchTestRequest) -> ProviderAck:
        """Ask the provider to run a batch of tests.

        Args:
            request: URLs, locations and devices to combine

        Returns:
            The provider's acknowledgement

        """

    @abstractmethod
    async def fetch_results(self) -> list[TestResult]:
        """Fetch the results the provider currently holds.

        Returns:
            Normalized results

        Raises:
            Exception: Any transport or parse error

        """

    @staticmethod
    def parse_results(payload: object) -> list[TestResult]:
        """Normalize a fetch response into results.

        Accepts either a bare array of result objects or an object carrying
        them under ``results``.

        Raises:
            ValueError: If the payload has neither shape
            pydantic.ValidationError: If a result object is malformed

        """
        if isinstance(payload, Mapping):
            payload = payload.get("results")

        if not isinstance(payload, Sequence) or isinstance(payload, str | bytes):
            raise ValueError(
                f"Unexpected results payload: {type(payload).__name__}"
            )

        return [TestResult.model_validate(item) for item in payload]
