"""Whole-database dump and replace for admin backups"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from studio.db.models import (
    Account,
    GeneratedImage,
    RechargeRequest,
    SupportMessage,
    WalletTransaction,
    utcnow,
)
from studio.modules.backup.models import (
    AttachmentRecord,
    BackupDocument,
    ChatMessageRecord,
    GeneratedImageRecord,
    RechargeRecord,
    TransactionRecord,
    UserRecord,
)


class SqlBackupRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def dump(self) -> BackupDocument:
        users = await self._all(Account, Account.created_at)
        requests = await self._all(RechargeRequest, RechargeRequest.created_at)
        transactions = await self._all(WalletTransaction, WalletTransaction.created_at)
        images = await self._all(GeneratedImage, GeneratedImage.created_at)
        messages = await self._all(SupportMessage, SupportMessage.created_at)

        chat: dict[str, list[ChatMessageRecord]] = {}
        for m in messages:
            attachment = None
            if m.attachment_type and m.attachment_data:
                attachment = AttachmentRecord(type=m.attachment_type, data=m.attachment_data)
            chat.setdefault(m.conversation_key, []).append(
                ChatMessageRecord(
                    id=m.id,
                    sender_name=m.sender_name,
                    text=m.text or "",
                    is_from_admin=bool(m.is_from_admin),
                    attachment=attachment,
                    status=m.status,
                    timestamp=m.created_at,
                )
            )

        return BackupDocument(
            timestamp=utcnow(),
            users=[
                UserRecord(
                    id=u.id,
                    username=u.username,
                    name=u.name,
                    role=u.role,
                    avatar=u.avatar,
                    balance=u.balance,
                    password_hash=u.password_hash,
                    is_active=bool(u.is_active),
                    created_at=u.created_at,
                )
                for u in users
            ],
            requests=[
                RechargeRecord(
                    id=r.id,
                    user_id=r.account_id,
                    user_name=r.user_name,
                    amount=r.amount,
                    sender_number=r.sender_number,
                    trx_id=r.trx_id,
                    method=r.method,
                    status=r.status,
                    timestamp=r.created_at,
                    resolved_at=r.resolved_at,
                )
                for r in requests
            ],
            transactions=[
                TransactionRecord(
                    id=t.id,
                    user_id=t.account_id,
                    amount=t.amount,
                    type=t.type,
                    description=t.description,
                    reference_id=t.reference_id,
                    timestamp=t.created_at,
                )
                for t in transactions
            ],
            generated_images=[
                GeneratedImageRecord(
                    id=g.id,
                    user_id=g.account_id,
                    user_name=g.user_name,
                    image_data=g.image_data,
                    settings_summary=g.settings_summary or "",
                    session_key=g.session_key,
                    source_digest=g.source_digest,
                    charged=bool(g.charged),
                    width=g.width,
                    height=g.height,
                    timestamp=g.created_at,
                )
                for g in images
            ],
            chat_messages=chat,
        )

    async def replace(self, document: BackupDocument, password_hashes: dict[str, str]) -> None:
        """Replace every collection present in *document*.

        ``password_hashes`` maps user id to the hash to store for that user.
        Dependent tables are cleared before users so foreign keys stay valid.
        """
        self.session.expunge_all()
        if document.chat_messages is not None:
            await self.session.execute(delete(SupportMessage))
        if document.generated_images is not None:
            await self.session.execute(delete(GeneratedImage))
        if document.transactions is not None:
            await self.session.execute(delete(WalletTransaction))
        if document.requests is not None:
            await self.session.execute(delete(RechargeRequest))
        if document.users is not None:
            await self.session.execute(delete(Account))
            self.session.add_all(
                Account(
                    id=u.id,
                    username=u.username.strip(),
                    name=u.name,
                    role=u.role,
                    avatar=u.avatar,
                    balance=u.balance,
                    password_hash=password_hashes[u.id],
                    is_active=u.is_active,
                    created_at=u.created_at or utcnow(),
                )
                for u in document.users
            )
            await self.session.flush()

        if document.requests is not None:
            self.session.add_all(
                RechargeRequest(
                    id=r.id,
                    account_id=r.user_id,
                    user_name=r.user_name,
                    amount=r.amount,
                    method=r.method,
                    sender_number=r.sender_number,
                    trx_id=r.trx_id,
                    status=r.status,
                    created_at=r.timestamp,
                    resolved_at=r.resolved_at,
                )
                for r in document.requests
            )
        if document.transactions is not None:
            self.session.add_all(
                WalletTransaction(
                    id=t.id,
                    account_id=t.user_id,
                    amount=t.amount,
                    type=t.type,
                    description=t.description,
                    reference_id=t.reference_id,
                    created_at=t.timestamp,
                )
                for t in document.transactions
            )
        if document.generated_images is not None:
            self.session.add_all(
                GeneratedImage(
                    id=g.id,
                    account_id=g.user_id,
                    user_name=g.user_name,
                    image_data=g.image_data,
                    settings_summary=g.settings_summary,
                    session_key=g.session_key,
                    source_digest=g.source_digest,
                    charged=g.charged,
                    width=g.width,
                    height=g.height,
                    created_at=g.timestamp,
                )
                for g in document.generated_images
            )
        if document.chat_messages is not None:
            self.session.add_all(
                SupportMessage(
                    id=m.id,
                    conversation_key=key,
                    sender_name=m.sender_name,
                    text=m.text,
                    is_from_admin=m.is_from_admin,
                    attachment_type=m.attachment.type if m.attachment else None,
                    attachment_data=m.attachment.data if m.attachment else None,
                    status=m.status,
                    created_at=m.timestamp,
                )
                for key, messages in document.chat_messages.items()
                for m in messages
            )
        await self.session.flush()
        # identity map may still hold rows from before the restore
        self.session.expunge_all()

    async def _all(self, model, order_by):
        result = await self.session.execute(select(model).order_by(order_by))
        return list(result.scalars().all())
