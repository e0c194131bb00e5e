import pytest

from studio.core.config import BillingSettings
from studio.modules.recharges import (
    RechargeAlreadyProcessedError,
    RechargeAmountTooLowError,
    RechargeNotFoundError,
)
from studio.modules.recharges.service import RechargeService
from studio.modules.wallets.service import WalletService


async def _submit(session, account, amount=100, trx_id="8N7A6B5C4D"):
    service = RechargeService.with_session(session)
    return await service.submit(account, amount=amount, sender_number="01711000000", trx_id=trx_id)


async def test_submit_creates_pending_request(session, register):
    account = await register()
    request = await _submit(session, account)

    assert request.status == "pending"
    assert request.user_name == "Rahim Uddin"
    assert request.method == "bkash"
    assert await RechargeService.with_session(session).count_pending() == 1


async def test_minimum_amount_is_enforced(session, register):
    account = await register()
    with pytest.raises(RechargeAmountTooLowError) as excinfo:
        await _submit(session, account, amount=49)
    assert excinfo.value.minimum == 50


async def test_custom_minimum_from_billing_settings(session, register):
    account = await register()
    service = RechargeService(
        RechargeService.with_session(session).repository,
        WalletService.with_session(session),
        BillingSettings(min_recharge=20),
    )
    request = await service.submit(account, amount=20, sender_number="017", trx_id="T1")
    assert request.amount == 20


async def test_blank_sender_or_trx_is_rejected(session, register):
    account = await register()
    service = RechargeService.with_session(session)
    with pytest.raises(ValueError):
        await service.submit(account, amount=100, sender_number="   ", trx_id="T1")
    with pytest.raises(ValueError):
        await service.submit(account, amount=100, sender_number="017", trx_id="")


async def test_approval_credits_once_with_reference(session, register):
    account = await register()
    request = await _submit(session, account, amount=200, trx_id="ABC123")
    service = RechargeService.with_session(session)
    wallet = WalletService.with_session(session)

    resolved = await service.resolve(request.id, "approved")
    await session.commit()

    assert resolved.status == "approved"
    assert resolved.resolved_at is not None
    credits = await wallet.transactions_for_reference(request.id)
    assert len(credits) == 1
    assert credits[0].amount == 200
    assert credits[0].description == f"bKash Recharge #{request.id} (TrxID: ABC123)"

    with pytest.raises(RechargeAlreadyProcessedError):
        await service.resolve(request.id, "approved")
    with pytest.raises(RechargeAlreadyProcessedError):
        await service.resolve(request.id, "rejected")
    assert len(await wallet.transactions_for_reference(request.id)) == 1

    transactions = await wallet.list_transactions(account.id)
    assert sum(t.signed_amount for t in transactions) == 210


async def test_rejection_changes_status_only(session, register):
    account = await register()
    request = await _submit(session, account)
    service = RechargeService.with_session(session)

    resolved = await service.resolve(request.id, "rejected")

    assert resolved.status == "rejected"
    assert await WalletService.with_session(session).transactions_for_reference(request.id) == []
    assert await service.count_pending() == 0


async def test_unknown_request_and_decision(session, register):
    service = RechargeService.with_session(session)
    with pytest.raises(RechargeNotFoundError):
        await service.resolve("nope", "approved")

    account = await register()
    request = await _submit(session, account)
    with pytest.raises(ValueError):
        await service.resolve(request.id, "pending")


async def test_listing_filters_by_status(session, register):
    account = await register()
    first = await _submit(session, account, trx_id="T1")
    await _submit(session, account, trx_id="T2")
    service = RechargeService.with_session(session)
    await service.resolve(first.id, "approved")

    assert [r.trx_id for r in await service.list_for_account(account.id)] == ["T2", "T1"]
    assert [r.trx_id for r in await service.list_all(status="pending")] == ["T2"]
    assert len(await service.list_all(status="all")) == 2
