"""Logging for the sanctifier CLI and library.

Everything logs under the ``sanctifier`` namespace. Detector failures that
``run_recoverable`` contains are logged at DEBUG, so ``--verbose`` is the
way to see why a detector came back empty for a file.

Log records always go to stderr: ``analyze --format json`` writes its
report to stdout and that stream must stay parseable.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "sanctifier"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    # quiet wins over verbose
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """Install the stderr handler (and optionally a file handler).

    Safe to call once per command invocation; earlier handlers are replaced,
    so running several commands in one process does not duplicate output.

    Args:
        verbose: DEBUG level, with source paths and tracebacks with locals
        quiet: Only errors (takes precedence over ``verbose``)
        log_file: Also append plain-text records to this file

    Returns:
        The ``sanctifier`` logger
    """
    level = _level(verbose, quiet)

    # Contract sources end up in messages; brackets there are not Rich markup
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name`` inside the ``sanctifier`` namespace.

    ``get_logger(__name__)`` inside the package returns the module logger
    unchanged; a bare name such as ``"cli"`` becomes ``sanctifier.cli``.
    """
    if name is None or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
