"""Domain models for conversation threads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

PRIVATE_THREAD = "private"
CLASS_THREAD = "class"


@dataclass(slots=True, frozen=True)
class Message:
    sender_id: str
    recipient_id: str
    content: str
    timestamp: datetime
    is_class_message: bool = False

    def to_document(self) -> dict[str, Any]:
        return {
            "senderId": self.sender_id,
            "recipientId": self.recipient_id,
            "messageContent": self.content,
            "timestamp": self.timestamp.isoformat(),
            "isClassMessage": self.is_class_message,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Message":
        return cls(
            sender_id=document["senderId"],
            recipient_id=document["recipientId"],
            content=document["messageContent"],
            timestamp=datetime.fromisoformat(document["timestamp"]),
            is_class_message=bool(document.get("isClassMessage", False)),
        )


@dataclass(slots=True)
class Thread:
    thread_id: str
    type: str
    participants: list[str]
    messages: list[Message] = field(default_factory=list)
    last_message_timestamp: Optional[datetime] = None
