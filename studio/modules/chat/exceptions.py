"""Chat relay errors."""


class ChatError(Exception):
    """Base class for chat errors."""


class EmptyMessageError(ChatError):
    """A message needs text or an attachment."""


class InvalidAttachmentError(ChatError):
    """Unknown attachment type or undecodable payload."""


class AttachmentTooLargeError(ChatError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"attachment is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit
