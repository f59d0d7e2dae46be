"""CLI entry point for the multi-location performance report."""

import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping
from enum import Enum
from pathlib import Path

import typer
from pydantic import ValidationError

from sitewatch.perf_report.collector import ResultCollector
from sitewatch.perf_report.errors import ExhaustedRetriesError, ResultStoreError
from sitewatch.perf_report.models.provider_config import (
    MonitorConfig,
    SpeedVitalsConfig,
)
from sitewatch.perf_report.models.test_request import BatchTestRequest
from sitewatch.perf_report.models.test_result import TestResult
from sitewatch.perf_report.orchestrator import (
    SubmissionOrchestrator,
    results_from_outcomes,
)
from sitewatch.perf_report.providers.speedvitals import SpeedVitalsProvider
from sitewatch.perf_report.report.render import build_report, write_report
from sitewatch.perf_report.retry import RetryingClient, RetryPolicy
from sitewatch.perf_report.store import ResultStore
from sitewatch.perf_report.targets_loader import load_targets

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,  # Force reconfiguration even if already set up
)
logger = logging.getLogger(__name__)

API_KEY_ENV = "SPEEDVITALS_API_KEY"
URLS_ENV = "URLS_TO_TEST_SECRET"
API_URL_ENV = "SPEEDVITALS_API_URL"

DEFAULT_DATA_FILE = Path("data/results.json")
DEFAULT_OUTPUT_FILE = Path("public/index.html")

app = typer.Typer()


class TableOrder(str, Enum):
    """Row order of the history tables."""

    asc = "asc"
    desc = "desc"


def parse_url_list(value: str) -> list[str]:
    """Split a comma-separated URL list, dropping blanks."""
    return [url.strip() for url in value.split(",") if url.strip()]


def load_provider_config(environ: Mapping[str, str]) -> SpeedVitalsConfig:
    """Build provider configuration from the environment.

    Raises:
        ValueError: If the API key is not set

    """
    api_key = environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        raise ValueError(f"{API_KEY_ENV} environment variable not set")

    config = SpeedVitalsConfig(api_key=api_key)
    if environ.get(API_URL_ENV):
        config.base_url = environ[API_URL_ENV]
    return config


def load_monitor_config(
    environ: Mapping[str, str], targets_file: Path | None = None
) -> MonitorConfig:
    """Build run configuration from defaults, a targets file and the environment.

    The URL override from the environment wins over the targets file.

    Raises:
        ValueError: If the targets file or any URL is invalid

    """
    overrides: dict[str, object] = {}
    if targets_file is not None:
        targets = load_targets(targets_file)
        overrides.update(
            targets.model_dump(exclude_none=True, exclude={"version"})
        )

    urls = parse_url_list(environ.get(URLS_ENV, ""))
    if urls:
        overrides["urls"] = urls

    try:
        return MonitorConfig(**overrides)
    except ValidationError as e:
        raise ValueError(f"Invalid monitor configuration: {e}") from e


def _fail(message: str) -> typer.Exit:
    logger.error(message)
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def _create_provider(environ: Mapping[str, str]) -> SpeedVitalsProvider:
    """Create the provider from the credential in the environment."""
    try:
        provider_config = load_provider_config(environ)
    except ValueError as e:
        raise _fail(f"FATAL: {e}")

    return SpeedVitalsProvider(provider_config)


def _create_client(
    environ: Mapping[str, str], monitor: MonitorConfig
) -> RetryingClient:
    """Create the provider wrapped in the run's retry policy."""
    provider = _create_provider(environ)
    policy = RetryPolicy(
        max_attempts=monitor.max_attempts, base_delay=monitor.base_delay
    )
    return RetryingClient(provider, policy)


def _load_monitor(targets_file: Path | None) -> MonitorConfig:
    try:
        return load_monitor_config(os.environ, targets_file)
    except (OSError, ValueError) as e:
        raise _fail(f"Cannot load monitor configuration: {e}")


def _persist_and_render(
    new_results: list[TestResult],
    data_file: Path,
    output: Path,
    descending: bool,
) -> None:
    """Append new results to the dataset and rebuild the report."""
    if not new_results:
        logger.info("No new results were fetched. Exiting.")
        return

    try:
        all_results = ResultStore(data_file).update(new_results)
    except ResultStoreError as e:
        raise _fail(f"Refusing to overwrite history: {e}")

    write_report(output, build_report(all_results, descending=descending))
    logger.info("Performance analysis and report generation complete!")


TargetsOption = typer.Option(
    None, help="YAML file listing urls, locations and devices"
)
DataFileOption = typer.Option(DEFAULT_DATA_FILE, help="Persisted results JSON")
OutputOption = typer.Option(DEFAULT_OUTPUT_FILE, help="Rendered HTML report")


@app.command()
def submit(
    targets_file: Path | None = TargetsOption,  # noqa: B008
) -> None:
    """Submit one test per URL and location, sequentially and throttled."""
    monitor = _load_monitor(targets_file)
    client = _create_client(os.environ, monitor)

    try:
        outcomes = asyncio.run(SubmissionOrchestrator(client, monitor).submit_all())
    except Exception as e:
        logger.exception("Submission failed")
        raise _fail(f"Error submitting tests: {e}")

    output = {
        "total": len(outcomes),
        "submitted": sum(1 for o in outcomes if o.status == "submitted"),
        "failed": sum(1 for o in outcomes if o.status != "submitted"),
        "outcomes": [o.model_dump() for o in outcomes],
    }
    typer.echo(json.dumps(output, indent=2))


@app.command("submit-batch")
def submit_batch(
    targets_file: Path | None = TargetsOption,  # noqa: B008
) -> None:
    """Trigger one batch of tests covering every URL, location and device."""
    monitor = _load_monitor(targets_file)
    client = _create_client(os.environ, monitor)

    request = BatchTestRequest(
        urls=monitor.urls,
        locations=monitor.locations,
        devices=monitor.batch_devices,
    )
    logger.info(
        f"Triggering batch for {len(request.urls)} URL(s) x "
        f"{len(request.locations)} location(s) x {len(request.devices)} device(s)"
    )

    try:
        ack = asyncio.run(client.submit_batch(request))
    except ExhaustedRetriesError as e:
        raise _fail(f"Failed to trigger tests: {e}")

    logger.info(f"Triggered tests: status={ack.status}")
    typer.echo(json.dumps(ack.model_dump(mode="json"), indent=2))


@app.command()
def collect(
    data_file: Path = DataFileOption,  # noqa: B008
    output: Path = OutputOption,  # noqa: B008
) -> None:
    """Fetch completed results, append them to the dataset and rebuild the report."""
    provider = _create_provider(os.environ)

    try:
        new_results = asyncio.run(ResultCollector(provider).fetch_all())
        _persist_and_render(new_results, data_file, output, descending=False)
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception("Collection failed")
        raise _fail(f"An unexpected error occurred: {e}")


@app.command()
def run(
    data_file: Path = DataFileOption,  # noqa: B008
    output: Path = OutputOption,  # noqa: B008
    targets_file: Path | None = TargetsOption,  # noqa: B008
) -> None:
    """Test every URL from every location and report immediate results."""
    logger.info("Starting multi-location performance analysis...")
    monitor = _load_monitor(targets_file)
    client = _create_client(os.environ, monitor)

    try:
        outcomes = asyncio.run(SubmissionOrchestrator(client, monitor).submit_all())
        new_results = results_from_outcomes(outcomes)
        _persist_and_render(new_results, data_file, output, descending=True)
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception("Run failed")
        raise _fail(f"An unexpected error occurred: {e}")


@app.command("build-report")
def build_report_command(
    data_file: Path = DataFileOption,  # noqa: B008
    output: Path = OutputOption,  # noqa: B008
    order: TableOrder = typer.Option(  # noqa: B008
        TableOrder.desc, help="History table row order"
    ),
) -> None:
    """Rebuild the report from the persisted dataset without any network calls."""
    try:
        results = ResultStore(data_file).load()
        html = build_report(results, descending=order is TableOrder.desc)
        write_report(output, html)
    except ResultStoreError as e:
        raise _fail(str(e))
    except Exception as e:
        logger.exception("Report build failed")
        raise _fail(f"An unexpected error occurred: {e}")


if __name__ == "__main__":  # pragma: no cover
    app()
