"""Logging helpers for the tlctrips CLI and API server."""

from __future__ import annotations

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "bold_cyan",
    "INFO": "bold_green",
    "WARNING": "bold_yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red,bg_white",
}

_DATEFMT = "%Y-%m-%d %H:%M:%S"

# filelock logs every acquire/release at DEBUG, which drowns our own messages.
_NOISY_LOGGERS = ("filelock", "urllib3")


def _use_color() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def _make_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    if _use_color():
        handler.setFormatter(
            colorlog.ColoredFormatter(
                fmt="%(log_color)s[%(asctime)s] <%(name)s> %(levelname)s:%(reset)s %(message)s",
                log_colors=LOG_COLORS,
                datefmt=_DATEFMT,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="[%(asctime)s] <%(name)s> %(levelname)s: %(message)s",
                datefmt=_DATEFMT,
            )
        )
    return handler


def configure_logging(verbose: bool) -> None:
    """
    Configure the root logger for the CLI.

    The uvicorn loggers are reset to propagate to the root logger, so the
    server started by `tlctrips serve` logs using the same format.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, handlers=[_make_handler()], force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvlog = logging.getLogger(name)
        uvlog.handlers.clear()
        uvlog.propagate = True
