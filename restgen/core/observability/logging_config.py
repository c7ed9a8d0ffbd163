"""
Process-wide logging for the restgen CLI.

``main.cli`` calls :func:`setup_logging` once; library modules only ever
do ``logging.getLogger(__name__)``. The console level comes from the
global flags, then ``RESTGEN_LOG_LEVEL``, then WARNING. Setting
``RESTGEN_LOG_FILE`` adds a file handler whose level is
``RESTGEN_LOG_FILE_LEVEL`` (default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV = "RESTGEN_LOG_LEVEL"
FILE_ENV = "RESTGEN_LOG_FILE"
FILE_LEVEL_ENV = "RESTGEN_LOG_FILE_LEVEL"

# Console layout by the most verbose level it lets through; quieter
# consoles print the bare message, like build output.
_CONSOLE_LAYOUTS = (
    (logging.DEBUG, "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s"),
)
_FILE_LAYOUT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def level_number(name: str | None, default: int = logging.WARNING) -> int:
    """Numeric level for a name such as ``"info"``; unknown names give default."""
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else default


def cli_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level name implied by the global CLI flags."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV, "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, layout in _CONSOLE_LAYOUTS:
        if level <= threshold:
            return logging.Formatter(layout, datefmt="%H:%M:%S")
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root handlers with a stderr handler and an optional file handler."""
    console_level = level_number(level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    handlers: list[logging.Handler] = [console]

    if log_file:
        to_file = logging.FileHandler(log_file, encoding="utf-8")
        to_file.setLevel(level_number(log_file_level, default=console_level))
        to_file.setFormatter(logging.Formatter(_FILE_LAYOUT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(to_file)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))

    # stderr may already be closed when late records arrive
    logging.raiseExceptions = False
