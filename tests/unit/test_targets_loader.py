"""Tests for targets file loader."""

from pathlib import Path

import pytest

from sitewatch.perf_report.targets_loader import load_targets


def test_load_targets_full(tmp_path: Path) -> None:
    """load_targets parses every supported key."""
    targets_file = tmp_path / "targets.yaml"
    targets_file.write_text(
        """
version: "1.0"
urls:
  - https://a.test
  - https://b.test
locations: [uk, jp]
devices: [desktop]
"""
    )

    targets = load_targets(targets_file)

    assert targets.version == "1.0"
    assert targets.urls == ["https://a.test", "https://b.test"]
    assert targets.locations == ["uk", "jp"]
    assert targets.devices == ["desktop"]
    assert targets.batch_devices is None


def test_load_targets_partial(tmp_path: Path) -> None:
    """Unset keys stay None."""
    targets_file = tmp_path / "targets.yaml"
    targets_file.write_text('version: "1.0"\nlocations: [us]\n')

    targets = load_targets(targets_file)

    assert targets.urls is None
    assert targets.locations == ["us"]


def test_load_targets_missing_file(tmp_path: Path) -> None:
    """load_targets raises FileNotFoundError for a missing file."""
    with pytest.raises(FileNotFoundError, match="Targets file not found"):
        load_targets(tmp_path / "missing.yaml")


def test_load_targets_invalid_yaml(tmp_path: Path) -> None:
    """load_targets raises ValueError for invalid YAML."""
    targets_file = tmp_path / "targets.yaml"
    targets_file.write_text("urls: [unclosed")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_targets(targets_file)


def test_load_targets_empty(tmp_path: Path) -> None:
    """load_targets raises ValueError for an empty file."""
    targets_file = tmp_path / "targets.yaml"
    targets_file.write_text("")

    with pytest.raises(ValueError, match="Empty targets file"):
        load_targets(targets_file)


def test_load_targets_unknown_location(tmp_path: Path) -> None:
    """load_targets raises ValueError for unsupported locations."""
    targets_file = tmp_path / "targets.yaml"
    targets_file.write_text('version: "1.0"\nlocations: [mars]\n')

    with pytest.raises(ValueError, match="Invalid targets schema"):
        load_targets(targets_file)
