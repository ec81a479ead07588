"""Runner module for the hnfetch client.

This module wires together settings, the API client, the retrieval pipeline
and the presenter, and maps failures to exit codes.
"""

import dataclasses
import logging
import sys

from hnfetch.agent.workflow import run_pipeline
from hnfetch.config.settings import ConfigurationError, load_settings
from hnfetch.connectors.hn_api import HackerNewsClient
from hnfetch.engines.errors import DecodeError, NetworkError, ValidationError
from hnfetch.engines.observability import write_run_log
from hnfetch.engines.presenter import render_footer, render_header, render_stories
from hnfetch.engines.progress import create_reporter
from hnfetch.engines.story_models import RetrievalMode, validate_count


# Exit codes
EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_LISTING_ERROR = 2
EXIT_INTERRUPTED = 130


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Logs go to stderr so that stdout carries only the story listing.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _report_fatal(stage: str, error: Exception) -> None:
    print(f"Error ({stage}): {error}", file=sys.stderr)


def run(
    sort: str = "hottest",
    count: int | None = None,
    workers: int | None = None,
    show_progress: bool = True,
    verbose: bool = False,
    run_log_dir: str | None = None,
) -> int:
    """Fetch and print a story listing.

    Args:
        sort: Retrieval mode name ("hottest" or "latest")
        count: Number of stories; None uses the configured default
        workers: Detail fetch workers; None uses the configured value
        show_progress: If False, never draw a progress bar
        verbose: If True, enable debug logging
        run_log_dir: If set, write a JSON run log into this directory

    Returns:
        Exit code:
        - 0: Success, including an empty listing
        - 1: Validation or configuration error
        - 2: The listing request failed
        - 130: Interrupted
    """
    _setup_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(validate=True)
        if workers is not None:
            settings = dataclasses.replace(settings, max_workers=workers)
            settings.validate()
        mode = RetrievalMode.parse(sort)
        count = validate_count(settings.default_count if count is None else count)
    except (ConfigurationError, ValidationError) as e:
        _report_fatal("validation", e)
        return EXIT_VALIDATION_ERROR

    logger.debug(f"Fetching {count} {mode.value} stories with {settings.max_workers} worker(s)")

    try:
        with HackerNewsClient(settings) as client:
            result = run_pipeline(
                client,
                mode,
                count,
                reporter=create_reporter(enabled=show_progress),
                settings=settings,
            )
    except (NetworkError, DecodeError) as e:
        _report_fatal("listing", e)
        return EXIT_LISTING_ERROR
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    output = (
        render_header(mode, count)
        + "\n"
        + render_stories(result.stories, settings.item_page_url)
        + render_footer(len(result.stories), count)
    )
    sys.stdout.write(output)

    if run_log_dir:
        try:
            write_run_log(result.metrics, run_log_dir)
        except OSError as e:
            logger.error(f"Failed to write run log: {e}")

    return EXIT_SUCCESS
