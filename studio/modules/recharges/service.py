"""Manual recharge workflow: pending -> approved | rejected."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.config import BillingSettings, get_settings
from studio.infrastructure.database.repositories.recharge_repository import SqlRechargeRepository
from studio.modules.accounts.models import Account
from studio.modules.wallets.service import WalletService

from .exceptions import (
    RechargeAccountMissingError,
    RechargeAlreadyProcessedError,
    RechargeAmountTooLowError,
    RechargeNotFoundError,
)
from .models import APPROVED, DECISIONS, METHOD_LABELS, METHODS, RechargeRequest
from .repository import RechargeRepository

logger = logging.getLogger(__name__)


def recharge_description(request: RechargeRequest) -> str:
    return f"{METHOD_LABELS.get(request.method, request.method)} Recharge #{request.id} (TrxID: {request.trx_id})"


@dataclass(slots=True)
class RechargeService:
    repository: RechargeRepository
    wallet: WalletService
    billing: BillingSettings = field(default_factory=lambda: get_settings().billing)

    @classmethod
    def with_session(cls, session: AsyncSession) -> "RechargeService":
        return cls(SqlRechargeRepository(session), WalletService.with_session(session))

    async def submit(
        self,
        account: Account,
        *,
        amount: int,
        sender_number: str,
        trx_id: str,
        method: str = "bkash",
    ) -> RechargeRequest:
        if amount < self.billing.min_recharge:
            raise RechargeAmountTooLowError(amount, self.billing.min_recharge)
        if method not in METHODS:
            raise ValueError(f"unsupported payment method: {method}")
        sender_number = sender_number.strip()
        trx_id = trx_id.strip()
        if not sender_number or not trx_id:
            raise ValueError("sender number and TrxID are required")

        request = await self.repository.create(
            account_id=account.id,
            user_name=account.name,
            amount=amount,
            method=method,
            sender_number=sender_number,
            trx_id=trx_id,
        )
        logger.info("Recharge %s submitted by %s for %d", request.id, account.id, amount)
        return request

    async def resolve(self, request_id: str, decision: str) -> RechargeRequest:
        """Approve or reject a pending request.

        Approval credits the wallet before the status is moved, both inside
        the caller's transaction. The caller must roll back on any error so a
        failed transition never leaves a stray credit behind.
        """
        if decision not in DECISIONS:
            raise ValueError(f"unknown decision: {decision}")

        request = await self.repository.get(request_id)
        if request is None:
            raise RechargeNotFoundError(request_id)
        if not request.is_pending:
            raise RechargeAlreadyProcessedError(request_id)

        if decision == APPROVED:
            credited = await self.wallet.adjust_balance(
                request.account_id,
                request.amount,
                recharge_description(request),
                reference_id=request.id,
            )
            if credited is None:
                logger.error("Recharge %s references missing account %s", request.id, request.account_id)
                raise RechargeAccountMissingError(request.account_id)

        resolved = await self.repository.transition(
            request_id, status=decision, resolved_at=datetime.now(timezone.utc)
        )
        if resolved is None:
            # another reviewer got there first
            raise RechargeAlreadyProcessedError(request_id)
        logger.info("Recharge %s %s", request_id, decision)
        return resolved

    async def get(self, request_id: str) -> RechargeRequest | None:
        return await self.repository.get(request_id)

    async def list_for_account(self, account_id: str, limit: int = 50, offset: int = 0) -> list[RechargeRequest]:
        return list(await self.repository.list_for_account(account_id, limit, offset))

    async def list_all(self, status: str | None = None, limit: int = 100, offset: int = 0) -> list[RechargeRequest]:
        return list(await self.repository.list_all(status=status, limit=limit, offset=offset))

    async def count_for_account(self, account_id: str) -> int:
        return await self.repository.count(account_id=account_id)

    async def count_all(self, status: str | None = None) -> int:
        return await self.repository.count(status=status)

    async def count_pending(self) -> int:
        return await self.repository.count_pending()
