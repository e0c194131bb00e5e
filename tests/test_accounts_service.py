import pytest

from studio.infrastructure.database.repositories.account_repository import SqlAccountRepository
from studio.modules.accounts import AccountAlreadyExistsError, AccountCreateInput
from studio.modules.accounts.service import AccountService
from studio.modules.wallets.service import WalletService


async def test_register_credits_welcome_bonus_as_ledger_entry(session, register):
    account = await register()

    assert account.balance == 10
    assert account.role == "user"
    assert account.avatar.startswith("https://ui-avatars.com/api/?name=Rahim+Uddin")

    wallet = WalletService.with_session(session)
    transactions = await wallet.list_transactions(account.id)
    assert [(t.type, t.amount, t.description) for t in transactions] == [("credit", 10, "Welcome Bonus")]
    assert (await wallet.verify_ledger(account)).consistent


async def test_duplicate_username_is_case_insensitive(session, register):
    await register(username="Karim")

    service = AccountService.with_session(session)
    with pytest.raises(AccountAlreadyExistsError):
        await service.register(AccountCreateInput(username="  karim ", password="x", name="Other"))


async def test_admin_created_account_gets_opening_balance(session):
    service = AccountService.with_session(session)
    account = await service.register(
        AccountCreateInput(username="shop", password="pw", name="Shop", opening_balance=100)
    )
    await session.commit()

    assert account.balance == 110
    descriptions = [t.description for t in await WalletService.with_session(session).list_transactions(account.id)]
    assert sorted(descriptions) == ["Opening Balance", "Welcome Bonus"]


async def test_admin_accounts_get_no_welcome_bonus(session):
    service = AccountService.with_session(session)
    admin = await service.register(AccountCreateInput(username="boss", password="pw", name="Boss", role="admin"))

    assert admin.balance == 0
    assert await WalletService.with_session(session).list_transactions(admin.id) == []


async def test_authenticate_trims_and_ignores_username_case(session, register):
    await register(username="nadia", password="pass123")
    service = AccountService.with_session(session)

    assert (await service.authenticate("  NADIA ", " pass123 ")) is not None
    assert await service.authenticate("nadia", "wrong") is None
    assert await service.authenticate("nobody", "pass123") is None


async def test_inactive_account_cannot_authenticate(session, register):
    await register(username="ghost", password="pw", is_active=False)
    service = AccountService.with_session(session)

    assert await service.authenticate("ghost", "pw") is None


class _RacingAccountRepository(SqlAccountRepository):
    """Lookup misses, as when another request inserts between lookup and insert."""

    async def get_by_username(self, username):
        return None


async def test_concurrent_duplicate_registration_is_a_conflict(session, register):
    await register(username="Bob", name="Bob")

    service = AccountService(_RacingAccountRepository(session), WalletService.with_session(session))
    with pytest.raises(AccountAlreadyExistsError):
        await service.register(AccountCreateInput(username="bob", password="x", name="Other Bob"))
    await session.rollback()

    accounts = await AccountService.with_session(session).list_accounts()
    assert [a.username for a in accounts] == ["Bob"]
