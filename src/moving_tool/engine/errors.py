"""
Exception types raised by the engine and the services built on it.
"""
from typing import Optional


class MovingToolError(Exception):
    """Base class for all moving tool errors."""


class InvalidInputError(MovingToolError, ValueError):
    """Malformed or out-of-range input. The call is aborted with no partial result."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(MovingToolError, LookupError):
    """A job, employee, crew or receipt id that does not exist."""


class StateLoadError(MovingToolError):
    """A persisted state slot could not be read."""

    def __init__(self, slot: str, reason: str):
        super().__init__(f"Could not load state slot '{slot}': {reason}")
        self.slot = slot
