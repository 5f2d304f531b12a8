"""Roster domain specific exceptions."""

from classroom_bank.core.errors import ConflictError, NotFoundError


class ProfileNotFoundError(NotFoundError):
    """Raised when no profile exists for a member name."""


class ProfileAlreadyExistsError(ConflictError):
    """Raised when attempting to create a profile with a duplicate member name."""
