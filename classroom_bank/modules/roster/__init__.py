"""Roster domain exports"""

from .exceptions import ProfileAlreadyExistsError, ProfileNotFoundError
from .models import Profile

__all__ = [
    "Profile",
    "ProfileAlreadyExistsError",
    "ProfileNotFoundError",
]
