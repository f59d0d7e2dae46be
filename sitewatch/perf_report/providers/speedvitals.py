"""SpeedVitals API provider implementation."""

from collections.abc import Mapping

import aiohttp

from sitewatch.perf_report.errors import ProviderError
from sitewatch.perf_report.models.provider_config import SpeedVitalsConfig
from sitewatch.perf_report.models.test_request import BatchTestRequest, TestRequest
from sitewatch.perf_report.models.test_result import ProviderAck, TestResult
from sitewatch.perf_report.providers.base import PerformanceProvider


class SpeedVitalsProvider(PerformanceProvider):
    """SpeedVitals Lighthouse testing provider."""

    def __init__(self, config: SpeedVitalsConfig) -> None:
        """Initialize SpeedVitals provider with configuration."""
        self.config = config
        self.base_url = config.base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "X-API-KEY": self.config.api_key,
            "Content-Type": "application/json",
        }

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.config.request_timeout)

    async def submit_test(self, request: TestRequest) -> ProviderAck:
        """Create a single Lighthouse test."""
        url = f"{self.base_url}/lighthouse-tests"
        data = await self._post(url, request.to_payload())
        return ProviderAck.model_validate(data)

    async def submit_batch(self, request: BatchTestRequest) -> ProviderAck:
        """Create a batch of Lighthouse tests."""
        url = f"{self.base_url}/lighthouse-batch-tests"
        data = await self._post(url, request.to_payload())
        return ProviderAck.model_validate(data)

    async def fetch_results(self) -> list[TestResult]:
        """Fetch completed Lighthouse test results."""
        async with aiohttp.ClientSession(timeout=self._timeout()) as session:
            url = f"{self.base_url}/lighthouse-tests"

            async with session.get(url, headers=self._headers()) as response:
                if response.status != 200:
                    text = await response.text()
                    raise ProviderError(response.status, text)

                payload: object = await response.json()

        return self.parse_results(payload)

    async def _post(
        self, url: str, payload: Mapping[str, object]
    ) -> Mapping[str, object]:
        async with aiohttp.ClientSession(timeout=self._timeout()) as session:
            async with session.post(
                url, headers=self._headers(), json=payload
            ) as response:
                if response.status not in {200, 201, 202}:
                    text = await response.text()
                    raise ProviderError(response.status, text)

                data: object = await response.json()

        if not isinstance(data, Mapping):
            raise ValueError(f"Unexpected response from {url}: {data!r}")
        return data
