"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import relationship

from studio.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # microsecond precision keeps "most recent first" ordering stable on sqlite
    return datetime.now(timezone.utc)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    avatar = Column(String(500))
    balance = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    last_login_at = Column(DateTime(timezone=True))

    transactions = relationship("WalletTransaction", back_populates="account")

    # usernames are unique regardless of case
    __table_args__ = (Index("uq_accounts_username_lower", func.lower(username), unique=True),)


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    type = Column(String(10), nullable=False)  # credit, debit
    description = Column(String(255), nullable=False)
    reference_id = Column(String(36), index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    account = relationship("Account", back_populates="transactions")


class RechargeRequest(Base):
    __tablename__ = "recharge_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)
    amount = Column(Integer, nullable=False)
    method = Column(String(20), nullable=False, default="bkash")
    sender_number = Column(String(30), nullable=False)
    trx_id = Column(String(64), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, approved, rejected
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    resolved_at = Column(DateTime(timezone=True))


class GeneratedImage(Base):
    __tablename__ = "generated_images"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)
    image_data = Column(Text, nullable=False)
    settings_summary = Column(String(255), nullable=False, default="")
    session_key = Column(String(64), index=True)
    source_digest = Column(String(64))  # sha256 of the uploaded photo
    charged = Column(Boolean, nullable=False, default=False)
    width = Column(Integer)
    height = Column(Integer)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class SupportMessage(Base):
    __tablename__ = "support_messages"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    conversation_key = Column(String(36), nullable=False, index=True)
    sender_name = Column(String(100), nullable=False)
    text = Column(Text, nullable=False, default="")
    is_from_admin = Column(Boolean, nullable=False, default=False)
    attachment_type = Column(String(10))  # image, audio
    attachment_data = Column(Text)
    status = Column(String(10), nullable=False, default="sent")  # sent, delivered, seen
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
