"""Lesson management notifications.

Lesson content lives elsewhere; these endpoints only fan notifications out to
connected teachers and students.
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from classroom_bank.interfaces.http.deps import get_presence
from classroom_bank.schemas import (
    LessonManagementRefreshRequest,
    LessonManagementUpdateRequest,
    SuccessResponse,
)
from classroom_bank.websocket.presence import PresenceRouter

router = APIRouter()

LESSON_MANAGEMENT_UPDATE_EVENT = "lessonManagementUpdate"
LESSON_MANAGEMENT_REFRESH_EVENT = "lessonManagementCompleteRefresh"


def lesson_management_group(teacher_name: str) -> str:
    return f"lessonManagement-{teacher_name}"


@router.post("/lesson-management-update", response_model=SuccessResponse)
async def lesson_management_update(
    payload: LessonManagementUpdateRequest,
    presence: PresenceRouter = Depends(get_presence),
) -> SuccessResponse:
    event = {
        "teacherName": payload.teacher_name,
        "action": payload.action,
        "data": payload.data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    await presence.broadcast_all(LESSON_MANAGEMENT_UPDATE_EVENT, event)
    await presence.send_to(payload.teacher_name, LESSON_MANAGEMENT_UPDATE_EVENT, event)
    return SuccessResponse(message="Lesson management update sent successfully.")


@router.post("/refresh-lesson-management", response_model=SuccessResponse)
async def refresh_lesson_management(
    payload: LessonManagementRefreshRequest,
    presence: PresenceRouter = Depends(get_presence),
) -> SuccessResponse:
    event = {
        "teacherName": payload.teacher_name,
        "units": payload.units,
        "lessons": payload.lessons,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    await presence.broadcast_all(LESSON_MANAGEMENT_REFRESH_EVENT, event)
    await presence.send_to_group(lesson_management_group(payload.teacher_name), LESSON_MANAGEMENT_REFRESH_EVENT, event)
    return SuccessResponse(message="Lesson management refreshed successfully.")
