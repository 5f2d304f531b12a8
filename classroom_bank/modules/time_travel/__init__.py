"""Time travel domain exports"""

from .exceptions import InvalidSimulationError, ShadowProfileNotFoundError

__all__ = ["InvalidSimulationError", "ShadowProfileNotFoundError"]
