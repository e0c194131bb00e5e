"""Wallet domain service.

Every balance change goes through :meth:`WalletService.adjust_balance`, which
writes the balance update and its ledger entry in the caller's database
transaction. Committing (or rolling back) is left to the caller so that
multi-step workflows such as recharge approval stay atomic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from studio.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from studio.modules.accounts.models import Account

from .models import CREDIT, DEBIT, LedgerCheck, TransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)

ADMIN_CREDIT_DESCRIPTION = "Admin Added Balance"
ADMIN_DEBIT_DESCRIPTION = "Admin Deducted Balance"


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session))

    async def adjust_balance(
        self,
        account_id: str,
        signed_amount: int,
        description: str,
        *,
        reference_id: str | None = None,
    ) -> Account | None:
        """Credit (positive) or debit (negative) an account.

        Returns the updated account, or ``None`` when the account does not
        exist. Raises ``InsufficientBalanceError`` if a debit would make the
        balance negative; nothing is written in that case.
        """
        if signed_amount == 0:
            raise ValueError("amount must be non-zero")

        account = await self.repository.apply_delta(account_id, signed_amount)
        if account is None:
            logger.warning("Balance adjustment for unknown account %s ignored", account_id)
            return None

        await self.repository.add_transaction(
            account_id=account_id,
            amount=abs(signed_amount),
            type=CREDIT if signed_amount > 0 else DEBIT,
            description=description,
            reference_id=reference_id,
        )
        logger.info(
            "Account %s %s %d (%s), balance now %d",
            account_id,
            "credited" if signed_amount > 0 else "debited",
            abs(signed_amount),
            description,
            account.balance,
        )
        return account

    async def admin_adjust(self, account_id: str, amount: int, action: str) -> Account | None:
        """Manual adjustment from the admin panel; *amount* is always positive."""
        if amount <= 0:
            raise ValueError("amount must be positive")
        if action == "add":
            return await self.adjust_balance(account_id, amount, ADMIN_CREDIT_DESCRIPTION)
        if action == "deduct":
            return await self.adjust_balance(account_id, -amount, ADMIN_DEBIT_DESCRIPTION)
        raise ValueError(f"unknown balance action: {action}")

    async def list_transactions(
        self, account_id: str, limit: int | None = None, offset: int = 0
    ) -> list[TransactionRecord]:
        return list(await self.repository.list_transactions(account_id, limit, offset))

    async def transactions_for_reference(self, reference_id: str) -> list[TransactionRecord]:
        return list(await self.repository.list_by_reference(reference_id))

    async def verify_ledger(self, account: Account) -> LedgerCheck:
        total = await self.repository.ledger_total(account.id)
        return LedgerCheck(account_id=account.id, balance=account.balance, ledger_total=total)
