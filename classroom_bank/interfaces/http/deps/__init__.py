"""Reusable FastAPI dependencies."""

from .container import get_container, get_presence
from .database import get_db_session

__all__ = [
    "get_container",
    "get_db_session",
    "get_presence",
]
