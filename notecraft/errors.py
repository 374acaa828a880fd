"""
Exception hierarchy for notecraft.

Drivers convert transform and stall failures into a DriverResult with a
short notice; only configuration and busy errors reach the caller.
"""
from __future__ import annotations


class NotecraftError(Exception):
    """Base class for all notecraft errors."""


class ConfigurationError(NotecraftError):
    """Missing credential or invalid setting, raised before any chunking work."""


class TransformError(NotecraftError):
    """A single transform call failed."""


class TransformFailedError(NotecraftError):
    """The transform returned nothing usable after every attempt."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class ProcessingStalledError(NotecraftError):
    """The cursor stopped advancing or the iteration ceiling was reached."""

    def __init__(self, message: str, cursor: int, iteration: int):
        super().__init__(message)
        self.cursor = cursor
        self.iteration = iteration


class DriverBusyError(NotecraftError):
    """A driver was invoked while it is already running."""
