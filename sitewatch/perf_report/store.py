"""Persistence of the append-only result history."""

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from sitewatch.perf_report.errors import ResultStoreError
from sitewatch.perf_report.models.test_result import TestResult

logger = logging.getLogger(__name__)

_RESULTS_ADAPTER = TypeAdapter(list[TestResult])


def merge(
    existing: Sequence[TestResult], incoming: Sequence[TestResult]
) -> list[TestResult]:
    """Append incoming results after the existing history.

    Nothing is removed, reordered or deduplicated.
    """
    return [*existing, *incoming]


class ResultStore:
    """A JSON file holding every result ever collected.

    Records read from the file are written back exactly as they were read,
    so a save never rewrites history that is already on disk.
    """

    def __init__(self, path: Path) -> None:
        """Initialize store backed by the given file."""
        self.path = path
        self._loaded: list[tuple[TestResult, dict[str, Any]]] = []

    def load(self) -> list[TestResult]:
        """Load the persisted history.

        Returns:
            All stored results, or an empty list if the file does not exist

        Raises:
            ResultStoreError: If the file exists but cannot be read or parsed

        """
        if not self.path.exists():
            logger.info(f"Results file {self.path} not found, creating a new one")
            self._loaded = []
            return []

        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ResultStoreError(f"Cannot read {self.path}: {e}") from e

        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise ResultStoreError(f"Invalid results file {self.path}: {e}") from e

        if not isinstance(records, list):
            raise ResultStoreError(
                f"Invalid results file {self.path}: expected a JSON array"
            )

        try:
            results = _RESULTS_ADAPTER.validate_python(records)
        except ValidationError as e:
            raise ResultStoreError(f"Invalid results file {self.path}: {e}") from e

        self._loaded = list(zip(results, records, strict=True))
        return results

    def save(self, results: Sequence[TestResult]) -> None:
        """Rewrite the whole file with the given results."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Loaded results are kept alive in _loaded, so their ids stay unique.
        on_disk = {id(loaded): record for loaded, record in self._loaded}
        data = [
            on_disk.get(id(result)) or result.model_dump(mode="json")
            for result in results
        ]

        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.info(f"Wrote {len(results)} result(s) to {self.path}")

    def update(self, incoming: Sequence[TestResult]) -> list[TestResult]:
        """Load the history, append incoming results and persist.

        Returns:
            The combined history

        Raises:
            ResultStoreError: If the existing history is unreadable

        """
        existing = self.load()
        combined = merge(existing, incoming)
        self.save(combined)
        logger.info(
            f"Dataset now holds {len(combined)} result(s) "
            f"({len(existing)} existing + {len(incoming)} new)"
        )
        return combined
