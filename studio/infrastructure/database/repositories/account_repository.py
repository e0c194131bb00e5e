"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studio.db.models import Account as AccountModel
from studio.modules.accounts.models import Account


def account_to_domain(model: AccountModel) -> Account:
    return Account(
        id=str(model.id),
        username=model.username,
        name=model.name,
        role=model.role or "user",
        balance=int(model.balance or 0),
        is_active=bool(model.is_active),
        password_hash=model.password_hash,
        avatar=model.avatar,
        created_at=model.created_at,
        updated_at=model.updated_at,
        last_login_at=model.last_login_at,
    )


class SqlAccountRepository:
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        model = await self._session.get(AccountModel, account_id, populate_existing=True)
        return account_to_domain(model) if model else None

    async def get_by_username(self, username: str) -> Account | None:
        stmt = select(AccountModel).where(func.lower(AccountModel.username) == username.lower())
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return account_to_domain(model) if model else None

    async def list_accounts(self) -> Sequence[Account]:
        stmt = select(AccountModel).order_by(AccountModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [account_to_domain(model) for model in result.scalars().all()]

    async def create_account(
        self,
        *,
        username: str,
        name: str,
        password_hash: str,
        role: str,
        avatar: str | None,
        is_active: bool,
    ) -> Account:
        model = AccountModel(
            username=username,
            name=name,
            password_hash=password_hash,
            role=role,
            avatar=avatar,
            balance=0,
            is_active=is_active,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return account_to_domain(model)

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(last_login_at=timestamp)
        )
        await self._session.execute(stmt)
