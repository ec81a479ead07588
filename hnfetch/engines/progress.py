"""Progress reporting for story detail fetches.

Reporters only observe the pipeline. They must never raise into it, so
rendering failures are logged and dropped.
"""

import logging
import threading
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressReporter(Protocol):
    """Protocol for objects notified as the pipeline fetches stories."""

    def start(self, total: int) -> None:
        """Begin tracking `total` planned fetches."""
        ...

    def advance(self) -> None:
        """Record one completed attempt, successful or not."""
        ...

    def finish(self) -> None:
        """Stop tracking; called once after the last attempt."""
        ...


class NullProgressReporter:
    """Reporter that ignores every notification."""

    def start(self, total: int) -> None:
        pass

    def advance(self) -> None:
        pass

    def finish(self) -> None:
        pass


class RichProgressReporter:
    """Progress bar rendered with rich on stderr.

    The bar is transient and disappears on finish, leaving the terminal clean
    for the story listing. advance() may be called from worker threads.
    """

    def __init__(self, console: Console | None = None, description: str = "Fetching stories"):
        self._console = console or Console(stderr=True)
        self._description = description
        self._lock = threading.Lock()
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def start(self, total: int) -> None:
        try:
            self._progress = Progress(
                SpinnerColumn(style="green"),
                TimeElapsedColumn(),
                BarColumn(bar_width=40, style="blue", complete_style="cyan"),
                MofNCompleteColumn(),
                TimeRemainingColumn(),
                console=self._console,
                transient=True,
            )
            self._task_id = self._progress.add_task(self._description, total=total)
            self._progress.start()
        except Exception as e:
            logger.debug(f"Progress bar could not start: {e}")
            self._progress = None

    def advance(self) -> None:
        with self._lock:
            if self._progress is None or self._task_id is None:
                return
            try:
                self._progress.advance(self._task_id)
            except Exception as e:
                logger.debug(f"Progress bar update failed: {e}")

    def finish(self) -> None:
        with self._lock:
            if self._progress is None:
                return
            try:
                self._progress.stop()
            except Exception as e:
                logger.debug(f"Progress bar could not stop cleanly: {e}")
            finally:
                self._progress = None
                self._task_id = None


def create_reporter(enabled: bool = True, console: Console | None = None) -> ProgressReporter:
    """Return a rich progress bar when enabled and attached to a terminal.

    Args:
        enabled: False forces the no-op reporter
        console: Console to draw on (defaults to stderr)

    Returns:
        A ProgressReporter instance
    """
    console = console or Console(stderr=True)
    if not enabled or not console.is_terminal:
        return NullProgressReporter()
    return RichProgressReporter(console=console)
