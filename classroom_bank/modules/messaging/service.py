"""Messaging domain service: durable threads plus real-time fan-out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.core.errors import ValidationError
from classroom_bank.infrastructure.database.repositories.base import DEFAULT_TIMEOUT
from classroom_bank.infrastructure.database.repositories.profile_repository import SqlProfileRepository
from classroom_bank.infrastructure.database.repositories.thread_repository import SqlThreadRepository
from classroom_bank.modules.roster.repository import ProfileRepository
from classroom_bank.websocket.presence import PresenceRouter

from .models import CLASS_THREAD, PRIVATE_THREAD, Message, Thread
from .repository import ThreadRepository

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "newMessage"
DEFAULT_CLASS_TARGET_PREFIX = "class-message-"


@dataclass(slots=True, frozen=True)
class PostedMessage:
    thread_id: str
    message: Message
    teacher_name: Optional[str] = None

    @property
    def is_class_message(self) -> bool:
        return self.message.is_class_message


class MessagingService:
    def __init__(
        self,
        repository: ThreadRepository,
        roster: ProfileRepository,
        presence: PresenceRouter,
        class_target_prefix: str = DEFAULT_CLASS_TARGET_PREFIX,
    ) -> None:
        self._repository = repository
        self._roster = roster
        self._presence = presence
        self._class_target_prefix = class_target_prefix

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        presence: PresenceRouter,
        class_target_prefix: str = DEFAULT_CLASS_TARGET_PREFIX,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "MessagingService":
        return cls(
            SqlThreadRepository(session, timeout),
            SqlProfileRepository(session, timeout),
            presence,
            class_target_prefix,
        )

    def class_target(self, teacher_name: str) -> str:
        return f"{self._class_target_prefix}{teacher_name}"

    def teacher_for_target(self, recipient_id: str) -> Optional[str]:
        if recipient_id.startswith(self._class_target_prefix):
            return recipient_id[len(self._class_target_prefix):]
        return None

    def thread_id_for(self, sender_id: str, recipient_id: str) -> str:
        if self.teacher_for_target(recipient_id) is not None:
            return recipient_id
        return "_".join(sorted((sender_id, recipient_id)))

    async def post_message(self, sender_id: str, recipient_id: str, content: str, now: datetime) -> PostedMessage:
        """Append a message to its thread, creating the thread on first use."""
        if not sender_id or not recipient_id or not content:
            raise ValidationError("senderId, recipientId and messageContent are required")
        if sender_id == recipient_id:
            raise ValidationError("cannot send a message to yourself")

        teacher_name = self.teacher_for_target(recipient_id)
        thread_id = self.thread_id_for(sender_id, recipient_id)
        if await self._repository.get_thread(thread_id) is None:
            if teacher_name is not None:
                await self._repository.create_thread(
                    thread_id, type=CLASS_THREAD, participants=[recipient_id, sender_id]
                )
            else:
                await self._repository.create_thread(
                    thread_id, type=PRIVATE_THREAD, participants=sorted((sender_id, recipient_id))
                )
            logger.info("Created thread %s", thread_id)

        message = Message(
            sender_id=sender_id,
            recipient_id=recipient_id,
            content=content,
            timestamp=now,
            is_class_message=teacher_name is not None,
        )
        await self._repository.append_message(thread_id, message)
        return PostedMessage(thread_id=thread_id, message=message, teacher_name=teacher_name)

    async def deliver(self, posted: PostedMessage) -> int:
        """Fan a recorded message out to whoever is online; misses are not errors."""
        payload = {"threadId": posted.thread_id, **posted.message.to_document()}
        if posted.teacher_name is None:
            recipients = [posted.message.recipient_id, posted.message.sender_id]
            return await self._presence.send_to_many(recipients, NEW_MESSAGE_EVENT, payload)

        # roster is resolved now, not when the thread was created
        students = await self._roster.list_by_teacher(posted.teacher_name)
        delivered = 0
        for student in students:
            if await self._presence.send_to(
                student.member_name,
                NEW_MESSAGE_EVENT,
                {**payload, "recipientId": student.member_name},
            ):
                delivered += 1
        if await self._presence.send_to(posted.message.sender_id, NEW_MESSAGE_EVENT, payload):
            delivered += 1
        logger.info(
            "Class message from %s delivered to %d of %d students",
            posted.message.sender_id,
            delivered,
            len(students),
        )
        return delivered

    async def list_threads(self, user_id: str) -> Sequence[Thread]:
        extra: list[str] = []
        profile = await self._roster.get_by_name(user_id)
        if profile is not None and profile.teacher_name:
            extra.append(self.class_target(profile.teacher_name))
        return await self._repository.list_threads(user_id, extra)
