"""Retrieval pipeline for Hacker News stories.

This module turns a ranked list of story ids into an ordered list of story
details. The listing call must succeed; individual detail fetches may fail
and are skipped without aborting the run.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol, runtime_checkable

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hnfetch.config.settings import Settings
from hnfetch.engines.errors import HackerNewsError, NetworkError
from hnfetch.engines.observability import (
    RunMetrics,
    create_run_metrics,
    log_stage_counts,
)
from hnfetch.engines.progress import NullProgressReporter, ProgressReporter
from hnfetch.engines.story_models import RetrievalMode, StoryDetail, validate_count


logger = logging.getLogger(__name__)


@runtime_checkable
class StorySource(Protocol):
    """Protocol for the API the pipeline reads from."""

    def list_ids(self, mode: RetrievalMode) -> list[int]:
        """Return story ids in ranking order for a mode."""
        ...

    def fetch_detail(self, story_id: int) -> StoryDetail:
        """Return the detail record for one story id."""
        ...


@dataclass
class PipelineResult:
    """Result of a pipeline run.

    Attributes:
        stories: Successfully fetched stories in listing order
        metrics: Counts collected during the run
    """
    stories: list[StoryDetail]
    metrics: RunMetrics


# (story id, detail or None, error or None)
_Outcome = tuple[int, StoryDetail | None, HackerNewsError | None]


def _notify(callback: Callable[..., None], *args) -> None:
    """Call a reporter method, dropping any error it raises."""
    try:
        callback(*args)
    except Exception as e:
        logger.debug(f"Progress reporter failed: {e}")


def _build_fetcher(
    source: StorySource,
    max_retries: int,
) -> Callable[[int], StoryDetail]:
    """Return the detail fetch function, wrapped in retry when enabled.

    Only NetworkError is retried; NotFound and DecodeError will not change
    on a second request.
    """
    if max_retries <= 0:
        return source.fetch_detail

    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=0.5, max=5),
        retry=retry_if_exception_type(NetworkError),
        reraise=True,
    )(source.fetch_detail)


def _unique_in_order(story_ids: list[int]) -> list[int]:
    """Drop repeated ids, keeping the first (highest ranked) occurrence."""
    seen: set[int] = set()
    unique: list[int] = []
    for story_id in story_ids:
        if story_id not in seen:
            seen.add(story_id)
            unique.append(story_id)
    return unique


def _attempt(fetch: Callable[[int], StoryDetail], story_id: int) -> _Outcome:
    try:
        return story_id, fetch(story_id), None
    except HackerNewsError as e:
        logger.debug(f"Skipping story {story_id}: {e}")
        return story_id, None, e


def _fetch_sequential(
    fetch: Callable[[int], StoryDetail],
    story_ids: list[int],
    reporter: ProgressReporter,
) -> list[_Outcome]:
    outcomes: list[_Outcome] = []
    for story_id in story_ids:
        outcomes.append(_attempt(fetch, story_id))
        _notify(reporter.advance)
    return outcomes


def _fetch_parallel(
    fetch: Callable[[int], StoryDetail],
    story_ids: list[int],
    reporter: ProgressReporter,
    max_workers: int,
) -> list[_Outcome]:
    """Fetch details on a thread pool.

    executor.map yields results in input order, so outcomes line up with
    story_ids regardless of completion order.
    """
    def task(story_id: int) -> _Outcome:
        outcome = _attempt(fetch, story_id)
        _notify(reporter.advance)
        return outcome

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="hnfetch") as executor:
        return list(executor.map(task, story_ids))


def run_pipeline(
    source: StorySource,
    mode: RetrievalMode,
    count: int,
    reporter: ProgressReporter | None = None,
    settings: Settings | None = None,
) -> PipelineResult:
    """Retrieve up to `count` story details for a retrieval mode.

    Steps:
    1. Validate count and fetch the ranked id list (failure aborts the run)
    2. Drop repeated ids and truncate to `count`, keeping their order
    3. Fetch each detail, skipping items that fail
    4. Return successes in listing order

    Args:
        source: API to read from (normally a HackerNewsClient)
        mode: Which ranking to list
        count: Maximum number of stories, in [1, 500]
        reporter: Progress sink notified once per attempt
        settings: Worker and retry settings; defaults apply when None

    Returns:
        PipelineResult with the ordered stories and run metrics

    Raises:
        ValidationError: If count is out of range (before any request)
        NetworkError: If the listing request fails
        DecodeError: If the listing body is malformed
    """
    validate_count(count)
    settings = settings or Settings()
    reporter = reporter or NullProgressReporter()
    metrics = create_run_metrics(
        mode=mode.value,
        requested_count=count,
        run_timestamp=datetime.now(),
    )

    story_ids = source.list_ids(mode)
    metrics.listed_count = len(story_ids)
    log_stage_counts("listed", len(story_ids))

    target_ids = _unique_in_order(story_ids)[:count]
    fetch = _build_fetcher(source, settings.max_retries)

    _notify(reporter.start, len(target_ids))
    try:
        if settings.max_workers > 1 and len(target_ids) > 1:
            outcomes = _fetch_parallel(fetch, target_ids, reporter, settings.max_workers)
        else:
            outcomes = _fetch_sequential(fetch, target_ids, reporter)
    finally:
        _notify(reporter.finish)

    stories: list[StoryDetail] = []
    for _, story, error in outcomes:
        if story is not None:
            stories.append(story)
        elif error is not None:
            metrics.record_failure(error)

    metrics.attempted_count = len(outcomes)
    metrics.fetched_count = len(stories)
    log_stage_counts("fetched", len(stories))
    if metrics.failed_count:
        logger.info(f"Skipped {metrics.failed_count} stories: {metrics.failures_by_kind}")

    return PipelineResult(stories=stories, metrics=metrics)
