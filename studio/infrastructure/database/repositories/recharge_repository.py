"""SQLAlchemy implementation for recharge requests"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studio.db.models import RechargeRequest as RechargeRequestModel
from studio.modules.recharges.models import PENDING, RechargeRequest


class SqlRechargeRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

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
        model = RechargeRequestModel(
            account_id=account_id,
            user_name=user_name,
            amount=amount,
            method=method,
            sender_number=sender_number,
            trx_id=trx_id,
            status=PENDING,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def get(self, request_id: str) -> RechargeRequest | None:
        model = await self.session.get(RechargeRequestModel, request_id, populate_existing=True)
        return self._to_domain(model) if model else None

    async def transition(
        self, request_id: str, *, status: str, resolved_at: datetime
    ) -> RechargeRequest | None:
        stmt = (
            update(RechargeRequestModel)
            .where(RechargeRequestModel.id == request_id)
            .where(RechargeRequestModel.status == PENDING)
            .values(status=status, resolved_at=resolved_at)
            .execution_options(synchronize_session="fetch")
            .returning(RechargeRequestModel.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None
        return await self.get(request_id)

    async def list_for_account(
        self, account_id: str, limit: int, offset: int
    ) -> Sequence[RechargeRequest]:
        stmt = (
            select(RechargeRequestModel)
            .where(RechargeRequestModel.account_id == account_id)
            .order_by(desc(RechargeRequestModel.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def list_all(
        self,
        *,
        status: str | None,
        limit: int,
        offset: int,
    ) -> Sequence[RechargeRequest]:
        stmt = self._filtered(select(RechargeRequestModel), status=status)
        stmt = stmt.order_by(desc(RechargeRequestModel.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def count(self, *, account_id: str | None = None, status: str | None = None) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(RechargeRequestModel), account_id=account_id, status=status
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_pending(self) -> int:
        return await self.count(status=PENDING)

    @staticmethod
    def _filtered(stmt, *, account_id: str | None = None, status: str | None = None):
        if account_id is not None:
            stmt = stmt.where(RechargeRequestModel.account_id == account_id)
        if status and status != "all":
            stmt = stmt.where(RechargeRequestModel.status == status)
        return stmt

    @staticmethod
    def _to_domain(model: RechargeRequestModel) -> RechargeRequest:
        return RechargeRequest(
            id=model.id,
            account_id=model.account_id,
            user_name=model.user_name,
            amount=model.amount,
            method=model.method,
            sender_number=model.sender_number,
            trx_id=model.trx_id,
            status=model.status,
            created_at=model.created_at,
            resolved_at=model.resolved_at,
        )
