"""Time travel domain specific exceptions."""

from classroom_bank.core.errors import NotFoundError, ValidationError


class ShadowProfileNotFoundError(NotFoundError):
    """Raised when no shadow profile exists and none can be cloned."""


class InvalidSimulationError(ValidationError):
    """Raised when a simulation span is not a positive number of days."""
