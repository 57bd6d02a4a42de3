"""
Error kinds raised by the preload core.

Every error derives from ``PreloadError`` so entrypoints can catch the
whole family at once and report it.
"""

from __future__ import annotations


class PreloadError(Exception):
    """Base class for all preload failures."""


class ConfigurationError(PreloadError):
    """Raised when the preload configuration is missing or invalid."""


class InvalidPathError(PreloadError):
    """Raised when a configured file or directory is missing or the wrong kind."""


class PreloadIOError(PreloadError, OSError):
    """Raised when a template cannot be read or the output cannot be written."""


class StateError(PreloadError, RuntimeError):
    """Raised when a derived result is queried before it exists."""
