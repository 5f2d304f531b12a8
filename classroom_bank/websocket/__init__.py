"""Real-time presence and fan-out."""

from .presence import Connection, PresenceRouter, encode_frame

__all__ = ["Connection", "PresenceRouter", "encode_frame"]
