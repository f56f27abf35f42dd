"""Console output shared by the CLI: logging setup and progress bars."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

console = Console(stderr=True)

LOGGER_NAME = "hdmat"


def configure_logging(verbose: bool = True, *, show_time: bool = False) -> logging.Logger:
    """Attach a Rich handler to the package logger.

    Args:
        verbose: ``INFO`` messages when ``True``, only warnings otherwise.
        show_time: Prefix each record with a timestamp.

    Returns:
        The configured ``hdmat`` logger.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console, show_time=show_time, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@contextmanager
def quiet_logging(enabled: bool = True) -> Iterator[None]:
    """Hold the package logger at ``WARNING`` or above while the block runs."""

    if not enabled:
        yield
        return
    logger = logging.getLogger(LOGGER_NAME)
    previous = logger.level
    logger.setLevel(max(previous, logging.WARNING))
    try:
        yield
    finally:
        logger.setLevel(previous)


@contextmanager
def column_progress(
    description: str, enabled: bool = True
) -> Iterator[Callable[[int, int], None] | None]:
    """Yield a ``progress(done, total)`` callback backed by a Rich bar.

    Yields ``None`` when ``enabled`` is ``False`` so callers can pass the
    result straight to :func:`~hdmat.conversion.materializer.materialize`.
    """

    if not enabled:
        yield None
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(bar_width=None),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=False,
    )
    with progress:
        task_id = progress.add_task(description, total=None)

        def _callback(done: int, total: int) -> None:
            progress.update(task_id, total=total, completed=done)

        yield _callback
