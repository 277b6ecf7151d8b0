"""Logging for render runs.

Verbosity 0 reports errors only; 1 adds one line per output target; 2 adds
every written file and async job; 3 adds routing and renderer state changes.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, TextIO

PROGRESS_LEVEL = 25  # one line per target
DETAIL_LEVEL = 15  # one line per file or job

logging.addLevelName(PROGRESS_LEVEL, "PROGRESS")
logging.addLevelName(DETAIL_LEVEL, "DETAIL")

# --verbose value -> logger level
VERBOSITY_LEVELS = (logging.ERROR, PROGRESS_LEVEL, DETAIL_LEVEL, logging.DEBUG)


class QuireLogger(logging.Logger):
    """Logger with the levels and messages a render run reports."""

    def progress(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(PROGRESS_LEVEL):
            self._log(PROGRESS_LEVEL, msg, args, **kwargs)

    def detail(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(DETAIL_LEVEL):
            self._log(DETAIL_LEVEL, msg, args, **kwargs)

    def target_started(self, backend: str, path: Path) -> None:
        self.progress(f"Rendering {backend} output to {path}")

    def target_finished(self, written: int, path: Path) -> None:
        self.progress(f"Wrote {written} documents to {path}")

    def file_written(self, path: Path | str) -> None:
        self.detail(f"Wrote {path}")

    def write_failed(self, path: Path | str, error: BaseException) -> None:
        """Report a file that could not be written; the run carries on."""
        self.error(f"Could not write {path}: {error}")


def get_logger() -> QuireLogger:
    """The shared ``quire`` logger. Configure it with setup_logger()."""
    logging.setLoggerClass(QuireLogger)
    logger = logging.getLogger("quire")
    assert isinstance(logger, QuireLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the logger for a --verbose value.

    Can be called again to reconfigure; values above 3 behave like 3.

    Args:
        verbosity: 0=errors only, 1=targets, 2=files and jobs, 3=debug
        stream: Output stream, sys.stderr by default
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(VERBOSITY_LEVELS[max(0, min(verbosity, len(VERBOSITY_LEVELS) - 1))])

    # Plain messages, no level prefix
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and go back to errors only, e.g. between tests."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
    logger.propagate = True
