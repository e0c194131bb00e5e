"""Status codes for domain errors shared by several routers."""
from fastapi import status

from studio.modules.chat import AttachmentTooLargeError, ChatError


def chat_error_status(exc: ChatError) -> int:
    if isinstance(exc, AttachmentTooLargeError):
        return 413
    return status.HTTP_400_BAD_REQUEST
