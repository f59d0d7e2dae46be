"""Configuration models for the provider and the monitoring run."""

from pydantic import BaseModel, Field, field_validator

from sitewatch.perf_report.models.test_request import (
    DEFAULT_LOCATIONS,
    Device,
    LocationCode,
    validate_page_url,
)

DEFAULT_URLS: tuple[str, ...] = ("https://www.sheffield.ac.uk",)


class SpeedVitalsConfig(BaseModel):
    """Configuration for the SpeedVitals API provider."""

    api_key: str = Field(..., min_length=1, description="SpeedVitals API key")
    base_url: str = Field(
        default="https://api.speedvitals.com/v1",
        description="SpeedVitals API base URL",
    )
    request_timeout: float = Field(
        default=60.0, gt=0, description="Per-request timeout in seconds"
    )


class MonitorConfig(BaseModel):
    """What to test and how hard to push the provider."""

    urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_URLS),
        min_length=1,
        description="Pages to test",
    )
    locations: list[LocationCode] = Field(
        default_factory=lambda: list(DEFAULT_LOCATIONS),
        min_length=1,
        description="Vantage points to test from",
    )
    devices: list[Device] = Field(
        default_factory=lambda: ["mobile"],
        min_length=1,
        description="Device types for per-pair submissions",
    )
    batch_devices: list[Device] = Field(
        default_factory=lambda: ["mobile", "desktop"],
        min_length=1,
        description="Device types for batch submissions",
    )
    max_attempts: int = Field(default=3, ge=1, description="Attempts per submission")
    base_delay: float = Field(
        default=1.0, ge=0, description="Backoff delay before the second attempt"
    )
    throttle_seconds: float = Field(
        default=2.0, ge=0, description="Pause after every (URL, location) pair"
    )

    @field_validator("urls")
    @classmethod
    def _check_urls(cls, value: list[str]) -> list[str]:
        return [validate_page_url(url) for url in value]
