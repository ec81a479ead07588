"""Observability and run metrics for the story retrieval pipeline.

This module provides data structures and functions for tracking pipeline
execution metrics, logging stage counts, and writing run logs.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


@dataclass
class RunMetrics:
    """Metrics collected during a pipeline run.

    Attributes:
        mode: Retrieval mode value ("hottest" or "latest")
        requested_count: Number of stories the user asked for
        listed_count: Number of ids returned by the listing endpoint
        attempted_count: Number of detail fetches attempted
        fetched_count: Number of details fetched successfully
        failures_by_kind: Count of skipped items per error class name
        errors: Error messages encountered during the run
        run_timestamp: Timestamp when the run started
    """
    mode: str = ""
    requested_count: int = 0
    listed_count: int = 0
    attempted_count: int = 0
    fetched_count: int = 0
    failures_by_kind: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    run_timestamp: datetime = field(default_factory=datetime.now)

    @property
    def failed_count(self) -> int:
        return sum(self.failures_by_kind.values())

    def record_failure(self, error: Exception) -> None:
        """Count a skipped item under its exception class name."""
        kind = type(error).__name__
        self.failures_by_kind[kind] = self.failures_by_kind.get(kind, 0) + 1
        self.errors.append(str(error))


def create_run_metrics(
    mode: str = "",
    requested_count: int = 0,
    listed_count: int = 0,
    attempted_count: int = 0,
    fetched_count: int = 0,
    failures_by_kind: dict[str, int] | None = None,
    errors: list[str] | None = None,
    run_timestamp: datetime | None = None,
) -> RunMetrics:
    """Create a RunMetrics instance with proper defaults for optional fields.

    Example:
        >>> metrics = create_run_metrics(mode="hottest", requested_count=3, fetched_count=2)
        >>> metrics.fetched_count
        2
    """
    return RunMetrics(
        mode=mode,
        requested_count=requested_count,
        listed_count=listed_count,
        attempted_count=attempted_count,
        fetched_count=fetched_count,
        failures_by_kind=failures_by_kind or {},
        errors=errors or [],
        run_timestamp=run_timestamp or datetime.now(),
    )


def write_run_log(metrics: RunMetrics, output_dir: str | Path) -> str:
    """Write run metrics to a JSON log file.

    Creates run_log_YYYYMMDD_HHMMSS.json in output_dir, creating the
    directory if needed.

    Args:
        metrics: RunMetrics instance to write
        output_dir: Directory path for the output file

    Returns:
        The filepath of the written JSON file

    Raises:
        OSError: If the output directory cannot be created or file cannot be written
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    timestamp = metrics.run_timestamp.strftime('%Y%m%d_%H%M%S')
    filepath = output_path / f"run_log_{timestamp}.json"

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(_metrics_to_dict(metrics), f, indent=2, ensure_ascii=False)

    logger.info(f"Run log written to {filepath}")
    return str(filepath)


def _metrics_to_dict(metrics: RunMetrics) -> dict[str, Any]:
    """Convert RunMetrics to a JSON-serializable dictionary."""
    return {
        "mode": metrics.mode,
        "requested_count": metrics.requested_count,
        "listed_count": metrics.listed_count,
        "attempted_count": metrics.attempted_count,
        "fetched_count": metrics.fetched_count,
        "failed_count": metrics.failed_count,
        "failures_by_kind": metrics.failures_by_kind,
        "errors": metrics.errors,
        "run_timestamp": metrics.run_timestamp.isoformat(),
    }


def log_stage_counts(stage: str, count: int) -> None:
    """Log the count for a pipeline stage.

    Example:
        >>> log_stage_counts("listed", 500)
        # Logs: "Pipeline stage 'listed': 500 stories"
    """
    logger.info(f"Pipeline stage '{stage}': {count} stories")
