"""Terminal output for the CLI: status lines, tables and the scan progress bar.

Human-oriented output goes to stderr through one shared rich console, so
``--format json`` / ``--json`` output on stdout can be piped as is.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

# Scans over fewer files than this finish before a bar is worth drawing
_PROGRESS_THRESHOLD = 100

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_live = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_live, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Hold back console log records while a live display is drawn."""
    _live.active = True
    try:
        yield
    finally:
        _live.active = False


class ConsoleSuppressingFilter(logging.Filter):
    """Attached to console log handlers; file handlers never get it."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        return not is_console_suppressed()


def _is_tty() -> bool:
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def get_console() -> Console:
    return _console


def status(message: str, *, style: str = "info") -> None:
    """One styled line on stderr, e.g. ``✓ Generated 3, unchanged 0``."""
    _console.print(f"{_STYLES.get(style, '')}{message}", highlight=False)


def progress[T](iterable: Iterable[T], *, desc: str = "Processing") -> Iterator[T]:
    """Yield from ``iterable``, drawing a transient bar for long sized scans on a TTY."""
    try:
        total: int | None = len(iterable)  # type: ignore[arg-type]
    except TypeError:
        total = None

    if total is None or total <= _PROGRESS_THRESHOLD or not _is_tty():
        yield from iterable
        return

    bar = Progress(
        TextColumn("  {task.description}"),
        BarColumn(bar_width=30),
        MofNCompleteColumn(),
        console=_console,
        transient=True,
    )
    with suppress_console_logs(), bar:
        task_id = bar.add_task(desc, total=total)
        for item in iterable:
            yield item
            bar.advance(task_id)


def make_count_table(title: str, counts: dict[str, int], *, label: str) -> Table:
    """Two-column table of name -> count, largest first."""
    table = Table(title=title, title_justify="left", show_edge=False)
    table.add_column(label, style="cyan")
    table.add_column("Issues", justify="right")
    for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        table.add_row(name, str(count))
    return table
