"""Repository protocol for message threads."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .models import Message, Thread


class ThreadRepository(Protocol):
    async def get_thread(self, thread_id: str) -> Thread | None:
        ...

    async def create_thread(self, thread_id: str, *, type: str, participants: Sequence[str]) -> Thread:
        ...

    async def append_message(self, thread_id: str, message: Message) -> Thread:
        ...

    async def list_threads(self, identity: str, extra_thread_ids: Iterable[str] = ()) -> Sequence[Thread]:
        ...
