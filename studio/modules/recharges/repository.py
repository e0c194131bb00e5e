"""Repository interface for recharge requests."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import RechargeRequest


class RechargeRepository(Protocol):
    async def create(
        self,
        *,
        account_id: str,
        user_name: str,
        amount: int,
        method: str,
        sender_number: str,
        trx_id: str,
    ) -> RechargeRequest:
        ...

    async def get(self, request_id: str) -> RechargeRequest | None:
        ...

    async def transition(
        self, request_id: str, *, status: str, resolved_at: datetime
    ) -> RechargeRequest | None:
        """Move a *pending* request to *status*; ``None`` if it was not pending."""
        ...

    async def list_for_account(self, account_id: str, limit: int, offset: int) -> Sequence[RechargeRequest]:
        ...

    async def list_all(self, *, status: str | None, limit: int, offset: int) -> Sequence[RechargeRequest]:
        ...

    async def count(self, *, account_id: str | None = None, status: str | None = None) -> int:
        ...

    async def count_pending(self) -> int:
        ...
