import pytest

from studio.modules.wallets import InsufficientBalanceError
from studio.modules.wallets.service import WalletService


async def test_credit_and_debit_append_one_transaction_each(session, register):
    account = await register()
    wallet = WalletService.with_session(session)

    credited = await wallet.adjust_balance(account.id, 50, "Manual top up")
    debited = await wallet.adjust_balance(account.id, -3, "Passport Photo Generation")

    assert credited.balance == 60
    assert debited.balance == 57
    latest = (await wallet.list_transactions(account.id))[0]
    assert (latest.type, latest.amount, latest.signed_amount) == ("debit", 3, -3)
    assert (await wallet.verify_ledger(debited)).consistent


async def test_zero_amount_is_rejected(session, register):
    account = await register()
    with pytest.raises(ValueError):
        await WalletService.with_session(session).adjust_balance(account.id, 0, "noop")


async def test_unknown_account_returns_none_and_writes_nothing(session):
    wallet = WalletService.with_session(session)

    assert await wallet.adjust_balance("missing", 5, "x") is None
    assert await wallet.list_transactions("missing") == []


async def test_debit_below_zero_raises_and_leaves_balance(session, register):
    account = await register()
    wallet = WalletService.with_session(session)

    with pytest.raises(InsufficientBalanceError) as excinfo:
        await wallet.adjust_balance(account.id, -11, "too much")

    assert excinfo.value.balance == 10
    assert excinfo.value.required == 11
    assert len(await wallet.list_transactions(account.id)) == 1
    refreshed = await wallet.adjust_balance(account.id, -10, "exact")
    assert refreshed.balance == 0


async def test_admin_adjust_uses_fixed_descriptions(session, register):
    account = await register()
    wallet = WalletService.with_session(session)

    await wallet.admin_adjust(account.id, 20, "add")
    await wallet.admin_adjust(account.id, 5, "deduct")

    descriptions = [t.description for t in await wallet.list_transactions(account.id)]
    assert descriptions[:2] == ["Admin Deducted Balance", "Admin Added Balance"]
    with pytest.raises(ValueError):
        await wallet.admin_adjust(account.id, 5, "steal")


async def test_transactions_are_listed_newest_first_with_paging(session, register):
    account = await register()
    wallet = WalletService.with_session(session)
    for amount in (1, 2, 3):
        await wallet.adjust_balance(account.id, amount, f"credit {amount}")

    page = await wallet.list_transactions(account.id, limit=2, offset=0)
    assert [t.description for t in page] == ["credit 3", "credit 2"]
    rest = await wallet.list_transactions(account.id, limit=10, offset=2)
    assert [t.description for t in rest] == ["credit 1", "Welcome Bonus"]
