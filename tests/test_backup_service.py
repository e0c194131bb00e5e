import json

import pytest

from studio.core.crypto import verify_password
from studio.modules.accounts.service import AccountService
from studio.modules.backup import InvalidBackupError
from studio.modules.backup.service import BackupService
from studio.modules.chat.service import ChatService
from studio.modules.recharges.service import RechargeService
from studio.modules.wallets.service import WalletService


async def test_export_restore_round_trip(session, register):
    account = await register()
    request = await RechargeService.with_session(session).submit(
        account, amount=100, sender_number="017", trx_id="TRX1"
    )
    await RechargeService.with_session(session).resolve(request.id, "approved")
    await ChatService.with_session(session).post_message(account.id, account.name, "hello")
    await session.commit()

    service = BackupService.with_session(session)
    exported = await service.export_database()

    assert exported["version"] == "2.0"
    assert set(exported) >= {"users", "requests", "transactions", "generatedImages", "chatMessages", "timestamp"}
    user = exported["users"][0]
    assert user["passwordHash"].startswith("$2")
    assert "password" not in user
    assert exported["requests"][0]["trxId"] == "TRX1"
    assert exported["chatMessages"][account.id][0]["text"] == "hello"

    counts = await service.restore_database(json.dumps(exported))
    await session.commit()

    assert counts["users"] == 1
    assert counts["transactions"] == 2
    restored = await AccountService.with_session(session).get_by_id(account.id)
    assert restored.balance == 110
    assert (await WalletService.with_session(session).verify_ledger(restored)).consistent
    assert await AccountService.with_session(session).authenticate("rahim", "secret") is not None


async def test_legacy_backup_hashes_plaintext_passwords(session):
    legacy = {
        "version": "1.0",
        "timestamp": 1718000000000,
        "users": [
            {"id": "1", "username": "admin", "password": "admin", "name": "Super Admin", "role": "admin", "balance": 1000},
            {"id": "2", "username": "user", "password": "1234", "name": "Regular User", "role": "user", "balance": 50},
        ],
        "requests": [
            {
                "id": "r1",
                "userId": "2",
                "userName": "Regular User",
                "amount": 50,
                "senderNumber": "01700000000",
                "trxId": "OLD1",
                "status": "pending",
                "timestamp": 1718000000000,
            }
        ],
    }

    counts = await BackupService.with_session(session).restore_database(legacy)
    await session.commit()

    assert counts["users"] == 2
    user = await AccountService.with_session(session).get_by_username("user")
    assert user.balance == 50
    assert user.password_hash != "1234"
    assert verify_password("1234", user.password_hash)
    assert await RechargeService.with_session(session).count_pending() == 1


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[]",
        {"version": "3.0", "users": []},
        {"version": "2.0", "users": {"id": "1"}},
        {"version": "2.0", "users": [{"id": "1", "username": "x", "name": "X"}]},
        {"version": "2.0", "requests": [{"id": "r1"}]},
        {"version": "2.0", "chatMessages": []},
    ],
)
async def test_malformed_backups_are_rejected_without_writes(session, register, payload):
    account = await register()

    with pytest.raises(InvalidBackupError):
        await BackupService.with_session(session).restore_database(payload)

    assert await AccountService.with_session(session).get_by_id(account.id) is not None
