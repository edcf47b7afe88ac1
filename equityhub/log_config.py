"""Logging setup for the ``equityhub`` command.

Log lines go to stderr so they never interleave with command output on
stdout. The sidecar does not call ``setup()``: its stdout carries
protocol messages and its callers own stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LEVEL_ENV = "EQUITYHUB_LOG_LEVEL"

_LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def resolve_level(*, verbose: bool = False, environ: Mapping[str, str] | None = None) -> int:
    """Root log level: ``--verbose`` first, then EQUITYHUB_LOG_LEVEL, then WARNING.

    Raises:
        ValueError: If EQUITYHUB_LOG_LEVEL is not a logging level name.

    """
    if verbose:
        return logging.DEBUG
    env = os.environ if environ is None else environ
    name = env.get(LEVEL_ENV, "").strip().upper()
    if not name:
        return logging.WARNING
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        msg = f"{LEVEL_ENV} must be a logging level name, got {name!r}"
        raise ValueError(msg)
    return level


def setup(*, verbose: bool = False) -> None:
    """Configure the root logger with ISO-8601 timestamps on stderr."""
    logging.basicConfig(
        level=resolve_level(verbose=verbose),
        format=_LOG_FORMAT,
        datefmt=_DATE_FORMAT,
        stream=sys.stderr,
    )
