"""Messaging endpoints (HTTP twin of the ``sendMessage`` socket event)."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.core.container import ApplicationContainer
from classroom_bank.core.errors import ClassroomBankError
from classroom_bank.interfaces.http.common import to_http_exception
from classroom_bank.interfaces.http.deps import get_container, get_db_session
from classroom_bank.modules.messaging.service import MessagingService
from classroom_bank.schemas import (
    SendMessageRequest,
    SendMessageResponse,
    ThreadListResponse,
    ThreadResponse,
)

router = APIRouter()


def _service(db: AsyncSession, container: ApplicationContainer) -> MessagingService:
    return MessagingService.with_session(
        db,
        container.presence,
        container.settings.messaging.class_target_prefix,
        container.db_timeout,
    )


@router.post(
    "/messages",
    response_model=SendMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a private or class-wide message",
)
async def post_message(
    payload: SendMessageRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> SendMessageResponse:
    service = _service(db, container)
    try:
        posted = await service.post_message(
            payload.sender_id,
            payload.recipient_id,
            payload.message_content,
            container.clock(),
        )
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    await service.deliver(posted)
    return SendMessageResponse(thread_id=posted.thread_id)


@router.get("/messages/{user_id}", response_model=ThreadListResponse, summary="List a user's threads")
async def list_threads(
    user_id: str,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> ThreadListResponse:
    threads = await _service(db, container).list_threads(user_id)
    return ThreadListResponse(
        threads=[
            ThreadResponse(
                thread_id=thread.thread_id,
                type=thread.type,
                participants=thread.participants,
                messages=[message.to_document() for message in thread.messages],
                last_message_timestamp=thread.last_message_timestamp,
            )
            for thread in threads
        ]
    )
