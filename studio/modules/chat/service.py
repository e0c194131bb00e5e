"""Support chat relay between customers and admins.

Each customer has one conversation keyed by their account id. Messages move
``sent -> delivered -> seen``; statuses only ever move forward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.config import ChatSettings, get_settings
from studio.infrastructure.database.repositories.chat_repository import SqlChatRepository
from studio.modules.generation.exceptions import InvalidImageError
from studio.modules.generation.imaging import split_data_url

from .exceptions import AttachmentTooLargeError, EmptyMessageError, InvalidAttachmentError
from .models import ATTACHMENT_TYPES, DELIVERED, SEEN, SENT, Attachment, ChatMessage, Conversation
from .repository import ChatRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChatService:
    repository: ChatRepository
    settings: ChatSettings = field(default_factory=lambda: get_settings().chat)

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ChatService":
        return cls(SqlChatRepository(session))

    async def post_message(
        self,
        conversation_key: str,
        sender_name: str,
        text: str = "",
        *,
        is_from_admin: bool = False,
        attachment: Attachment | None = None,
    ) -> ChatMessage:
        text = (text or "").strip()
        if not text and attachment is None:
            raise EmptyMessageError("message needs text or an attachment")
        if attachment is not None:
            self._check_attachment(attachment)

        message = await self.repository.add(
            conversation_key=conversation_key,
            sender_name=sender_name,
            text=text,
            is_from_admin=is_from_admin,
            attachment=attachment,
        )
        logger.debug("Chat message %s posted to %s", message.id, conversation_key)
        return message

    async def mark_seen(self, conversation_key: str, *, by_admin: bool) -> int:
        """Mark the counterpart's unseen messages as seen. Safe to repeat."""
        return await self.repository.update_status(
            conversation_key=conversation_key,
            from_admin=not by_admin,
            current=(SENT, DELIVERED),
            new_status=SEEN,
        )

    async def mark_delivered(self, conversation_key: str | None, *, by_admin: bool) -> int:
        """Mark the counterpart's ``sent`` messages as delivered.

        Admins poll every conversation at once, so ``None`` covers them all.
        """
        return await self.repository.update_status(
            conversation_key=conversation_key,
            from_admin=not by_admin,
            current=(SENT,),
            new_status=DELIVERED,
        )

    async def list_conversation(self, conversation_key: str) -> list[ChatMessage]:
        return list(await self.repository.list_conversation(conversation_key))

    async def list_conversations(self) -> list[Conversation]:
        """All conversations, the one with the latest message first."""
        grouped: dict[str, Conversation] = {}
        for message in await self.repository.list_all():
            grouped.setdefault(message.conversation_key, Conversation(message.conversation_key)).messages.append(message)
        return sorted(grouped.values(), key=lambda c: c.last_message.created_at, reverse=True)

    async def count_pending(self) -> int:
        return sum(1 for c in await self.list_conversations() if c.awaiting_admin)

    def _check_attachment(self, attachment: Attachment) -> None:
        if attachment.type not in ATTACHMENT_TYPES:
            raise InvalidAttachmentError(f"unsupported attachment type: {attachment.type}")
        try:
            _, raw = split_data_url(attachment.data)
        except InvalidImageError as exc:
            raise InvalidAttachmentError("attachment is not a valid data URL") from exc
        if len(raw) > self.settings.max_attachment_bytes:
            raise AttachmentTooLargeError(len(raw), self.settings.max_attachment_bytes)
