"""progress display for catalog lookups and archive downloads."""

import sys
from contextlib import contextmanager
from typing import Optional
from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn,
    TaskID,
)


class ProgressManager:
    """renders spinners and download bars, or plain lines when not on a tty."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._enabled = self._should_show_progress()

    def _should_show_progress(self) -> bool:
        # build logs and piped output get plain lines instead of live bars
        return sys.stdout.isatty() and not sys.stdout.closed

    def print(self, *args, **kwargs):
        self.console.print(*args, **kwargs)

    @contextmanager
    def spinner(self, description: str, transient: bool = True):
        """
        show an indeterminate spinner while the block runs.

        yields:
            task id of the spinner, or None in non-interactive mode
        """
        if not self._enabled:
            self.console.print(f"{description}...")
            yield None
            return

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=transient,
        ) as progress:
            task_id = progress.add_task(description, total=None)
            yield task_id

    @contextmanager
    def download_progress(self, description: str, total: Optional[int] = None):
        """
        track a single download.

        args:
            description: text shown next to the bar
            total: expected size in bytes, if the server announced one

        yields:
            tuple of (Progress instance, task_id)
        """
        if not self._enabled:
            self.console.print(f"{description}...")
            yield _DummyProgress(), None
            return

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task_id = progress.add_task(description, total=total)
            yield progress, task_id


class _DummyProgress:
    """stands in for Progress in non-interactive mode."""

    def advance(self, task_id: Optional[TaskID], advance: float = 1):
        pass
