"""Process-wide CLI state shared between the callback and commands."""

from __future__ import annotations

from pathlib import Path


class _Context:
    """Holds options set by the global CLI callback."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.verbosity: int = 0


_context = _Context()


def get_config_path() -> Path | None:
    """Get the config path given with --config, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the config path given with --config."""
    _context.config_path = path


def get_verbosity() -> int:
    """Get the verbosity given with --verbose."""
    return _context.verbosity


def set_verbosity(verbosity: int) -> None:
    """Set the verbosity given with --verbose."""
    _context.verbosity = verbosity
