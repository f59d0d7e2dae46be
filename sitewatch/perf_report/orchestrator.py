"""Sequential, throttled submission of tests for every URL and location."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from sitewatch.perf_report.errors import ExhaustedRetriesError
from sitewatch.perf_report.models.provider_config import MonitorConfig
from sitewatch.perf_report.models.test_request import (
    Device,
    LocationCode,
    TestRequest,
)
from sitewatch.perf_report.models.test_result import ProviderAck, TestResult
from sitewatch.perf_report.retry import RetryingClient

logger = logging.getLogger(__name__)


class SubmissionOutcome(BaseModel):
    """What happened to one (URL, location, device) submission."""

    url: str
    location: str
    device: str
    status: Literal["submitted", "rejected", "failed"]
    message: str | None = Field(default=None)
    ack: ProviderAck | None = Field(default=None, exclude=True)
    request: TestRequest | None = Field(default=None, exclude=True)


class SubmissionOrchestrator:
    """Submits one test at a time, pausing between pairs.

    Requests are never issued in parallel. A failure on one pair is logged
    and the loop moves on to the next.
    """

    def __init__(
        self,
        client: RetryingClient,
        config: MonitorConfig,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize orchestrator with a retrying client and run settings."""
        self.client = client
        self.config = config
        self._sleep = sleep or asyncio.sleep

    async def submit_all(self) -> list[SubmissionOutcome]:
        """Submit every configured URL from every configured location."""
        pairs = len(self.config.urls) * len(self.config.locations)
        logger.info(
            f"Testing {len(self.config.urls)} URL(s) across "
            f"{len(self.config.locations)} location(s) ({pairs} pair(s))..."
        )

        outcomes: list[SubmissionOutcome] = []
        for url in self.config.urls:
            for location in self.config.locations:
                try:
                    for device in self.config.devices:
                        outcomes.append(
                            await self._submit_one(url, location, device)
                        )
                finally:
                    await self._sleep(self.config.throttle_seconds)

        submitted = sum(1 for o in outcomes if o.status == "submitted")
        logger.info(f"Submission finished: {submitted}/{len(outcomes)} submitted")
        return outcomes

    async def _submit_one(
        self, url: str, location: LocationCode, device: Device
    ) -> SubmissionOutcome:
        logger.info(f"-> Testing {url} from {location} ({device})")
        try:
            request = TestRequest(url=url, location=location, device=device)
        except ValidationError as e:
            logger.error(f"   - Invalid request for {url} from {location}: {e}")
            return SubmissionOutcome(
                url=url,
                location=location,
                device=device,
                status="failed",
                message=str(e),
            )

        try:
            ack = await self.client.submit(request)
        except ExhaustedRetriesError as e:
            logger.error(f"   - Error testing {url} from {location}: {e}")
            return SubmissionOutcome(
                url=url,
                location=location,
                device=device,
                status="failed",
                message=str(e),
                request=request,
            )

        if ack.status is not None and not ack.succeeded:
            message = ack.message or "Unknown API error"
            logger.error(f"   - Failed for {url} from {location}: {message}")
            return SubmissionOutcome(
                url=url,
                location=location,
                device=device,
                status="rejected",
                message=message,
                ack=ack,
                request=request,
            )

        logger.info(f"   - Submitted {url} from {location}")
        return SubmissionOutcome(
            url=url,
            location=location,
            device=device,
            status="submitted",
            message=ack.message,
            ack=ack,
            request=request,
        )


def results_from_outcomes(outcomes: list[SubmissionOutcome]) -> list[TestResult]:
    """Extract immediate measurements from successful acknowledgements.

    Outcomes without usable data contribute nothing; malformed data is
    logged and skipped.
    """
    results: list[TestResult] = []
    for outcome in outcomes:
        if outcome.ack is None or outcome.request is None:
            continue

        try:
            result = outcome.ack.to_result(outcome.request)
        except ValidationError as e:
            logger.error(
                f"Unusable measurement for {outcome.url} from "
                f"{outcome.location}: {e}"
            )
            continue

        if result is not None:
            logger.info(
                f"   - {outcome.url} from {outcome.location}: "
                f"score {result.performance:g}"
            )
            results.append(result)

    return results
