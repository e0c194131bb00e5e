"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Protocol, Sequence

from studio.modules.accounts.models import Account

from .models import TransactionRecord


class WalletRepository(Protocol):
    async def apply_delta(self, account_id: str, delta: int) -> Account | None:
        """Atomically add *delta* to the balance.

        Returns ``None`` for an unknown account and raises
        ``InsufficientBalanceError`` when the result would be negative.
        """
        ...

    async def add_transaction(
        self,
        *,
        account_id: str,
        amount: int,
        type: str,
        description: str,
        reference_id: str | None,
    ) -> TransactionRecord:
        ...

    async def list_transactions(
        self, account_id: str, limit: int | None, offset: int
    ) -> Sequence[TransactionRecord]:
        ...

    async def list_by_reference(self, reference_id: str) -> Sequence[TransactionRecord]:
        ...

    async def ledger_total(self, account_id: str) -> int:
        ...
