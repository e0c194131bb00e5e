"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import case, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studio.db.models import Account as AccountModel, WalletTransaction
from studio.modules.accounts.models import Account
from studio.modules.wallets.exceptions import InsufficientBalanceError
from studio.modules.wallets.models import CREDIT, TransactionRecord

from .account_repository import account_to_domain


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def apply_delta(self, account_id: str, delta: int) -> Account | None:
        # single conditional UPDATE: concurrent debits cannot overdraw
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .where(AccountModel.balance + delta >= 0)
            .values(balance=AccountModel.balance + delta)
            .execution_options(synchronize_session="fetch")
            .returning(AccountModel.id)
        )
        result = await self.session.execute(stmt)
        updated_id = result.scalar_one_or_none()
        if updated_id is None:
            current = await self.session.get(AccountModel, account_id, populate_existing=True)
            if current is None:
                return None
            raise InsufficientBalanceError(account_id, int(current.balance or 0), -delta)

        model = await self.session.get(AccountModel, updated_id, populate_existing=True)
        return account_to_domain(model)

    async def add_transaction(
        self,
        *,
        account_id: str,
        amount: int,
        type: str,
        description: str,
        reference_id: str | None,
    ) -> TransactionRecord:
        tx = WalletTransaction(
            account_id=account_id,
            amount=amount,
            type=type,
            description=description,
            reference_id=reference_id,
        )
        self.session.add(tx)
        await self.session.flush()
        return self._to_record(tx)

    async def list_transactions(
        self, account_id: str, limit: int | None, offset: int
    ) -> list[TransactionRecord]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.account_id == account_id)
            .order_by(desc(WalletTransaction.created_at))
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_record(row) for row in result.scalars().all()]

    async def list_by_reference(self, reference_id: str) -> list[TransactionRecord]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.reference_id == reference_id)
            .order_by(WalletTransaction.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_record(row) for row in result.scalars().all()]

    async def ledger_total(self, account_id: str) -> int:
        signed = case(
            (WalletTransaction.type == CREDIT, WalletTransaction.amount),
            else_=-WalletTransaction.amount,
        )
        stmt = select(func.coalesce(func.sum(signed), 0)).where(
            WalletTransaction.account_id == account_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    def _to_record(model: WalletTransaction) -> TransactionRecord:
        return TransactionRecord(
            id=model.id,
            account_id=model.account_id,
            amount=model.amount,
            type=model.type,
            description=model.description,
            reference_id=model.reference_id,
            created_at=model.created_at,
        )
