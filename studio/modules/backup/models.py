"""Portable backup records (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CURRENT_VERSION = "2.0"
LEGACY_VERSION = "1.0"
SUPPORTED_VERSIONS = frozenset({CURRENT_VERSION, LEGACY_VERSION})


class BackupRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class UserRecord(BackupRecord):
    id: str
    username: str
    name: str
    role: Literal["user", "admin"] = "user"
    avatar: Optional[str] = None
    balance: int = Field(default=0, ge=0)
    password_hash: Optional[str] = None
    # legacy backups carry the plaintext password
    password: Optional[str] = Field(default=None, exclude=True)
    is_active: bool = True
    created_at: Optional[datetime] = None


class RechargeRecord(BackupRecord):
    id: str
    user_id: str
    user_name: str
    amount: int = Field(gt=0)
    sender_number: str
    trx_id: str
    method: Literal["bkash", "nagad"] = "bkash"
    status: Literal["pending", "approved", "rejected"]
    timestamp: datetime
    resolved_at: Optional[datetime] = None


class TransactionRecord(BackupRecord):
    id: str
    user_id: str
    amount: int = Field(gt=0)
    type: Literal["credit", "debit"]
    description: str
    reference_id: Optional[str] = None
    timestamp: datetime


class GeneratedImageRecord(BackupRecord):
    id: str
    user_id: str
    user_name: str
    image_data: str
    settings_summary: str = ""
    session_key: Optional[str] = None
    source_digest: Optional[str] = None
    charged: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    timestamp: datetime


class AttachmentRecord(BackupRecord):
    type: Literal["image", "audio"]
    data: str


class ChatMessageRecord(BackupRecord):
    id: str
    sender_name: str
    text: str = ""
    is_from_admin: bool = False
    attachment: Optional[AttachmentRecord] = None
    status: Literal["sent", "delivered", "seen"] = "sent"
    timestamp: datetime


class BackupDocument(BackupRecord):
    """A full backup. Collections left as ``None`` are not touched on restore."""

    version: str = CURRENT_VERSION
    timestamp: Optional[datetime] = None
    users: Optional[list[UserRecord]] = None
    requests: Optional[list[RechargeRecord]] = None
    transactions: Optional[list[TransactionRecord]] = None
    generated_images: Optional[list[GeneratedImageRecord]] = None
    chat_messages: Optional[dict[str, list[ChatMessageRecord]]] = None
