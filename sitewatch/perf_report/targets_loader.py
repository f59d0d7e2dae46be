"""Load monitoring targets from a YAML file."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from sitewatch.perf_report.models.test_request import Device, LocationCode


class MonitorTargets(BaseModel):
    """Targets declared in a targets.yaml file.

    Unset lists leave the corresponding built-in default in place.
    """

    version: str = Field(..., description="Targets file schema version")
    urls: list[str] | None = Field(default=None, description="Pages to test")
    locations: list[LocationCode] | None = Field(
        default=None, description="Vantage point codes"
    )
    devices: list[Device] | None = Field(
        default=None, description="Device types for per-pair submissions"
    )
    batch_devices: list[Device] | None = Field(
        default=None, description="Device types for batch submissions"
    )


def load_targets(targets_file: Path) -> MonitorTargets:
    """Load monitoring targets.

    Args:
        targets_file: Path to the YAML targets file

    Returns:
        Parsed targets

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If YAML is invalid or doesn't match schema

    """
    if not targets_file.exists():
        raise FileNotFoundError(f"Targets file not found: {targets_file}")

    try:
        with targets_file.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {targets_file}: {e}") from e

    if data is None:
        raise ValueError(f"Empty targets file: {targets_file}")

    try:
        return MonitorTargets.model_validate(data)
    except Exception as e:
        raise ValueError(f"Invalid targets schema in {targets_file}: {e}") from e
