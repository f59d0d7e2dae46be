"""Data models for test requests, results and configuration."""

from sitewatch.perf_report.models.provider_config import (
    MonitorConfig,
    SpeedVitalsConfig,
)
from sitewatch.perf_report.models.test_request import (
    BatchTestRequest,
    TestConfig,
    TestRequest,
)
from sitewatch.perf_report.models.test_result import ProviderAck, TestResult

__all__ = [
    "BatchTestRequest",
    "MonitorConfig",
    "ProviderAck",
    "SpeedVitalsConfig",
    "TestConfig",
    "TestRequest",
    "TestResult",
]
