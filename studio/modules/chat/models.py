"""Domain model for support chat messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

SENT = "sent"
DELIVERED = "delivered"
SEEN = "seen"

ATTACHMENT_TYPES = frozenset({"image", "audio"})


@dataclass(frozen=True, slots=True)
class Attachment:
    type: str
    data: str  # data URL


@dataclass(slots=True)
class ChatMessage:
    id: str
    conversation_key: str
    sender_name: str
    text: str
    is_from_admin: bool
    status: str
    created_at: datetime
    attachment: Optional[Attachment] = None


@dataclass(slots=True)
class Conversation:
    key: str
    messages: list[ChatMessage] = field(default_factory=list)

    @property
    def last_message(self) -> Optional[ChatMessage]:
        return self.messages[-1] if self.messages else None

    @property
    def awaiting_admin(self) -> bool:
        last = self.last_message
        return last is not None and not last.is_from_admin and last.status != SEEN

    def unread_for(self, admin: bool) -> int:
        return sum(1 for m in self.messages if m.is_from_admin != admin and m.status != SEEN)
