"""SQLAlchemy implementation for message threads"""

from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import desc, or_, select

from classroom_bank.infrastructure.database.models import MessageThread, ThreadParticipant
from classroom_bank.modules.messaging.models import Message, Thread
from classroom_bank.modules.messaging.repository import ThreadRepository

from .base import TimedSqlRepository


class SqlThreadRepository(TimedSqlRepository, ThreadRepository):
    async def _get_model(self, thread_id: str) -> MessageThread | None:
        stmt = select(MessageThread).where(MessageThread.thread_id == thread_id)
        result = await self._execute(stmt)
        return result.scalars().first()

    async def get_thread(self, thread_id: str) -> Thread | None:
        return self._to_domain(await self._get_model(thread_id))

    async def create_thread(self, thread_id: str, *, type: str, participants: Sequence[str]) -> Thread:
        model = MessageThread(
            thread_id=thread_id,
            type=type,
            participants=list(participants),
            messages=[],
        )
        model.members = [ThreadParticipant(identity=identity) for identity in participants]
        self._session.add(model)
        await self._flush()
        return self._to_domain(model)

    async def append_message(self, thread_id: str, message: Message) -> Thread:
        model = await self._get_model(thread_id)
        if model is None:
            raise LookupError(thread_id)
        model.messages = [*model.messages, message.to_document()]
        model.last_message_timestamp = message.timestamp
        await self._flush()
        return self._to_domain(model)

    async def list_threads(self, identity: str, extra_thread_ids: Iterable[str] = ()) -> Sequence[Thread]:
        member_of = select(ThreadParticipant.thread_id).where(ThreadParticipant.identity == identity)
        stmt = (
            select(MessageThread)
            .where(
                or_(
                    MessageThread.thread_id.in_(member_of),
                    MessageThread.thread_id.in_(list(extra_thread_ids)),
                )
            )
            .order_by(desc(MessageThread.last_message_timestamp))
        )
        result = await self._execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: MessageThread | None) -> Thread | None:
        if model is None:
            return None
        return Thread(
            thread_id=model.thread_id,
            type=model.type,
            participants=list(model.participants or []),
            messages=[Message.from_document(doc) for doc in model.messages or []],
            last_message_timestamp=model.last_message_timestamp,
        )
