#!/usr/bin/env python3
"""Main entry point for hnfetch.

This module provides the CLI interface for listing Hacker News stories.

Usage:
    hnfetch                       # Top 30 stories
    hnfetch -s latest -c 10       # Ten newest stories
    hnfetch -c 100 -w 8           # Fetch details with eight workers
    python -m hnfetch.main -v     # Run with verbose logging
"""

import argparse
import sys

from hnfetch import __version__
from hnfetch.agent.runner import run
from hnfetch.config.settings import MAX_COUNT, MIN_COUNT, MAX_WORKERS_LIMIT
from hnfetch.engines.story_models import RetrievalMode


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="hnfetch",
        description="Fetch and list Hacker News stories",
    )

    parser.add_argument(
        "-s", "--sort",
        choices=[mode.value for mode in RetrievalMode],
        default=RetrievalMode.HOTTEST.value,
        help="'hottest' for top stories, 'latest' for new stories (default: hottest)",
    )

    parser.add_argument(
        "-c", "--count",
        type=int,
        default=None,
        help=f"Number of stories to show, {MIN_COUNT}-{MAX_COUNT} (default: 30)",
    )

    parser.add_argument(
        "-w", "--workers",
        type=int,
        default=None,
        help=f"Parallel detail fetches, 1-{MAX_WORKERS_LIMIT} (default: 1)",
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not draw a progress bar",
    )

    parser.add_argument(
        "--run-log",
        metavar="DIR",
        default=None,
        help="Write a JSON run log into DIR",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """Main entry point for hnfetch.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parsed = parse_args(args)
    return run(
        sort=parsed.sort,
        count=parsed.count,
        workers=parsed.workers,
        show_progress=not parsed.no_progress,
        verbose=parsed.verbose,
        run_log_dir=parsed.run_log,
    )


if __name__ == "__main__":
    sys.exit(main())
