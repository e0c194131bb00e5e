"""SQLAlchemy implementation for support chat"""

from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studio.db.models import SupportMessage
from studio.modules.chat.models import SENT, Attachment, ChatMessage


class SqlChatRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        conversation_key: str,
        sender_name: str,
        text: str,
        is_from_admin: bool,
        attachment: Attachment | None,
    ) -> ChatMessage:
        model = SupportMessage(
            conversation_key=conversation_key,
            sender_name=sender_name,
            text=text,
            is_from_admin=is_from_admin,
            attachment_type=attachment.type if attachment else None,
            attachment_data=attachment.data if attachment else None,
            status=SENT,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def list_conversation(self, conversation_key: str) -> Sequence[ChatMessage]:
        stmt = (
            select(SupportMessage)
            .where(SupportMessage.conversation_key == conversation_key)
            .order_by(SupportMessage.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def list_all(self) -> Sequence[ChatMessage]:
        stmt = select(SupportMessage).order_by(SupportMessage.created_at)
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def update_status(
        self,
        *,
        conversation_key: str | None,
        from_admin: bool,
        current: Iterable[str],
        new_status: str,
    ) -> int:
        stmt = (
            update(SupportMessage)
            .where(SupportMessage.is_from_admin.is_(from_admin))
            .where(SupportMessage.status.in_(list(current)))
            .values(status=new_status)
            .execution_options(synchronize_session="fetch")
        )
        if conversation_key is not None:
            stmt = stmt.where(SupportMessage.conversation_key == conversation_key)
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    @staticmethod
    def _to_domain(model: SupportMessage) -> ChatMessage:
        attachment = None
        if model.attachment_type and model.attachment_data:
            attachment = Attachment(type=model.attachment_type, data=model.attachment_data)
        return ChatMessage(
            id=model.id,
            conversation_key=model.conversation_key,
            sender_name=model.sender_name,
            text=model.text or "",
            is_from_admin=bool(model.is_from_admin),
            status=model.status,
            created_at=model.created_at,
            attachment=attachment,
        )
