"""
Logging configuration for Commit Activity.

All log records go to stderr. stdout is reserved for command output such
as ``reconcile --json``, which is meant to be piped.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "commit_activity"

# Third-party loggers that log every HTTP request or connection event.
# They are capped so that -v shows our page-by-page progress, not theirs.
CHATTY_LOGGERS = {
    "httpx": logging.INFO,
    "httpcore": logging.WARNING,
}

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route logging through a rich handler on stderr.

    ``quiet`` wins over ``verbose``. Rich markup is disabled in log
    messages: author names and repository paths are logged verbatim and
    may contain square brackets.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path; records are appended in plain text

    Returns:
        The ``commit_activity`` logger
    """
    level = _level_for(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # Replaces handlers installed by any earlier call.
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    for name, floor in CHATTY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, floor))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``commit_activity`` namespace.

    ``get_logger(__name__)`` inside the package returns the module logger
    unchanged; other names are nested under ``commit_activity``.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
