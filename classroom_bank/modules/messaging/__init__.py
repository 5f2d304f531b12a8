"""Messaging domain exports"""

from .models import CLASS_THREAD, PRIVATE_THREAD, Message, Thread

__all__ = ["CLASS_THREAD", "PRIVATE_THREAD", "Message", "Thread"]
