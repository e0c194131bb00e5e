"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .account import get_account_service
from .generation import get_generation_client, get_support_assistant

__all__ = [
    "get_db_session",
    "get_account_service",
    "get_generation_client",
    "get_support_assistant",
]
