"""Exception types raised by tracker write operations and log interchange."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for tracker errors."""


class ValidationError(TrackerError, ValueError):
    """User input to a write operation was rejected; the log is unchanged."""


class FormatError(TrackerError, ValueError):
    """Imported or stored log data could not be decoded; the log is unchanged."""


__all__ = ["FormatError", "TrackerError", "ValidationError"]
