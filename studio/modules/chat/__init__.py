"""Chat relay exports"""

from .exceptions import AttachmentTooLargeError, ChatError, EmptyMessageError, InvalidAttachmentError
from .models import ATTACHMENT_TYPES, DELIVERED, SEEN, SENT, Attachment, ChatMessage, Conversation

__all__ = [
    "ATTACHMENT_TYPES",
    "DELIVERED",
    "SEEN",
    "SENT",
    "Attachment",
    "ChatMessage",
    "Conversation",
    "ChatError",
    "EmptyMessageError",
    "InvalidAttachmentError",
    "AttachmentTooLargeError",
]
