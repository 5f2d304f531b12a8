"""WebSocket endpoint for students and teachers."""
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from classroom_bank.core.container import ApplicationContainer
from classroom_bank.core.errors import ClassroomBankError
from classroom_bank.interfaces.http.routers.lessons import lesson_management_group
from classroom_bank.modules.messaging.service import MessagingService
from classroom_bank.websocket.presence import encode_frame

logger = logging.getLogger(__name__)

router = APIRouter()

MESSAGE_IDENTIFY = "identify"
MESSAGE_IDENTIFIED = "identified"
MESSAGE_JOIN_LESSON_MANAGEMENT = "joinLessonManagement"
MESSAGE_LESSON_MANAGEMENT_JOINED = "lessonManagementJoined"
MESSAGE_SEND = "sendMessage"
MESSAGE_SEND_ACK = "sendMessageAck"
MESSAGE_ERROR = "error"


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
    container: ApplicationContainer = websocket.app.state.container
    presence = container.presence
    await websocket.accept()
    presence.attach(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            await _handle_message(websocket, container, raw)
    except WebSocketDisconnect:
        logger.info("Socket disconnected")
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Socket error: %s", exc)
    finally:
        presence.remove(websocket)


def _parse_json(raw: str) -> dict:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON payload: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}


async def _send(websocket: WebSocket, event: str, payload: dict[str, Any]) -> None:
    await websocket.send_text(encode_frame(event, payload))


async def _handle_message(websocket: WebSocket, container: ApplicationContainer, raw: str) -> None:
    data = _parse_json(raw)
    msg_type = data.get("type")
    payload = data.get("data") or {}

    if not msg_type:
        await _send(websocket, MESSAGE_ERROR, {"message": "message missing type"})
        return

    if msg_type == MESSAGE_IDENTIFY:
        user_id = payload.get("userId")
        if not user_id:
            await _send(websocket, MESSAGE_ERROR, {"message": "Failed to identify user"})
            return
        container.presence.identify(user_id, websocket)
        await _send(websocket, MESSAGE_IDENTIFIED, {"success": True})
        return

    if msg_type == MESSAGE_JOIN_LESSON_MANAGEMENT:
        teacher_name = payload.get("teacherName")
        if not teacher_name:
            await _send(websocket, MESSAGE_ERROR, {"message": "Failed to join lesson management"})
            return
        container.presence.join_group(lesson_management_group(teacher_name), websocket)
        await _send(websocket, MESSAGE_LESSON_MANAGEMENT_JOINED, {"success": True, "teacherName": teacher_name})
        return

    if msg_type == MESSAGE_SEND:
        await _handle_send_message(websocket, container, payload)
        return

    logger.warning("Unknown websocket message type: %s", msg_type)
    await _send(websocket, MESSAGE_ERROR, {"message": f"unknown message type: {msg_type}"})


async def _handle_send_message(websocket: WebSocket, container: ApplicationContainer, payload: dict) -> None:
    ack: dict[str, Any] = {"ackId": payload.get("ackId")}
    async with container.session_factory() as session:
        service = MessagingService.with_session(
            session,
            container.presence,
            container.settings.messaging.class_target_prefix,
            container.db_timeout,
        )
        try:
            posted = await service.post_message(
                payload.get("senderId") or "",
                payload.get("recipientId") or "",
                payload.get("messageContent") or "",
                container.clock(),
            )
            await session.commit()
        except ClassroomBankError as exc:
            await session.rollback()
            await _send(websocket, MESSAGE_SEND_ACK, {**ack, "success": False, "error": str(exc)})
            return
        except Exception as exc:  # pylint: disable=broad-except
            await session.rollback()
            logger.error("Failed to store message: %s", exc)
            await _send(websocket, MESSAGE_SEND_ACK, {**ack, "success": False, "error": "Failed to send message"})
            return

        await service.deliver(posted)
    await _send(websocket, MESSAGE_SEND_ACK, {**ack, "success": True, "threadId": posted.thread_id})
