"""Domain services for account management."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.config import BillingSettings, get_settings
from studio.core.crypto import hash_password, verify_password
from studio.infrastructure.database.repositories.account_repository import SqlAccountRepository
from studio.modules.wallets.service import WalletService

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import ROLES, Account, AccountCreateInput, default_avatar
from .repository import AccountRepository

logger = logging.getLogger(__name__)

WELCOME_BONUS_DESCRIPTION = "Welcome Bonus"
OPENING_BALANCE_DESCRIPTION = "Opening Balance"


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(
        self,
        repository: AccountRepository,
        wallet: WalletService,
        billing: BillingSettings | None = None,
    ) -> None:
        self._repository = repository
        self._wallet = wallet
        self._billing = billing or get_settings().billing

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        return cls(SqlAccountRepository(session), WalletService.with_session(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    async def get_by_username(self, username: str) -> Account | None:
        return await self._repository.get_by_username(username.strip())

    async def list_accounts(self) -> Sequence[Account]:
        return await self._repository.list_accounts()

    async def authenticate(self, username: str, password: str) -> Account | None:
        """Return the account for valid credentials, ``None`` otherwise.

        Unknown usernames and wrong passwords are deliberately indistinguishable.
        """
        account = await self._repository.get_by_username(username.strip())
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def register(self, payload: AccountCreateInput) -> Account:
        """Create an account and credit the welcome bonus (plus any opening balance)."""
        username = payload.username.strip()
        if not username:
            raise ValueError("username must not be blank")
        if payload.role not in ROLES:
            raise ValueError(f"unknown role: {payload.role}")
        if payload.opening_balance < 0:
            raise ValueError("opening balance must not be negative")

        existing = await self._repository.get_by_username(username)
        if existing is not None:
            raise AccountAlreadyExistsError(f"username already taken: {username}")

        name = payload.name.strip() or username
        try:
            account = await self._repository.create_account(
                username=username,
                name=name,
                password_hash=hash_password(payload.password),
                role=payload.role,
                avatar=default_avatar(name),
                is_active=payload.is_active,
            )
        except IntegrityError as exc:
            # a concurrent registration won the race past the lookup above
            raise AccountAlreadyExistsError(f"username already taken: {username}") from exc
        logger.info("Account %s (%s) registered", account.id, username)

        if payload.role == "user" and self._billing.welcome_bonus > 0:
            account = await self._credit(account.id, self._billing.welcome_bonus, WELCOME_BONUS_DESCRIPTION)
        if payload.opening_balance > 0:
            account = await self._credit(account.id, payload.opening_balance, OPENING_BALANCE_DESCRIPTION)
        return account

    async def set_last_login(self, account_id: str) -> None:
        await self._repository.set_last_login(account_id, datetime.now(timezone.utc))

    async def _credit(self, account_id: str, amount: int, description: str) -> Account:
        updated = await self._wallet.adjust_balance(account_id, amount, description)
        if updated is None:
            raise AccountNotFoundError(account_id)
        return updated
