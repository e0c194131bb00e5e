"""Repository protocol for chat messages."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .models import Attachment, ChatMessage


class ChatRepository(Protocol):
    async def add(
        self,
        *,
        conversation_key: str,
        sender_name: str,
        text: str,
        is_from_admin: bool,
        attachment: Attachment | None,
    ) -> ChatMessage:
        ...

    async def list_conversation(self, conversation_key: str) -> Sequence[ChatMessage]:
        """Messages oldest first."""
        ...

    async def list_all(self) -> Sequence[ChatMessage]:
        """Every message, oldest first."""
        ...

    async def update_status(
        self,
        *,
        conversation_key: str | None,
        from_admin: bool,
        current: Iterable[str],
        new_status: str,
    ) -> int:
        """Move matching messages to *new_status*; ``None`` key means every conversation."""
        ...
