from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_HANDLERS: list[logging.Handler] = []

_STREAM_FORMAT = "%(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_path: Optional[Path] = None,
) -> None:
    """Route ``dotlayers.*`` loggers to stderr (and optionally a file).

    Idempotent per-process: handlers installed by a previous call are
    replaced, handlers installed by anyone else are left alone.
    """
    logger = logging.getLogger("dotlayers")
    reset_logging_for_tests()

    level = _level(verbose, quiet)
    logger.setLevel(logging.DEBUG if log_path is not None else level)
    logger.propagate = False

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(level)
    stream.setFormatter(logging.Formatter(_STREAM_FORMAT))
    logger.addHandler(stream)
    _HANDLERS.append(stream)

    if log_path is not None:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)
        _HANDLERS.append(fh)


def reset_logging_for_tests() -> None:
    """Remove handlers installed by :func:`configure_logging`."""
    logger = logging.getLogger("dotlayers")
    while _HANDLERS:
        handler = _HANDLERS.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


__all__ = ["configure_logging", "reset_logging_for_tests"]
