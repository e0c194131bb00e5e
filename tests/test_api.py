import httpx

from studio.modules.accounts import AccountCreateInput
from studio.modules.accounts.service import AccountService

from .fakes import data_url, make_jpeg, text_response


async def _create_admin(session_factory):
    async with session_factory() as session:
        await AccountService.with_session(session).register(
            AccountCreateInput(username="admin", password="admin", name="Super Admin", role="admin")
        )
        await session.commit()


async def _register_customer(client, username="rahim", password="secret", name="Rahim Uddin"):
    response = await client.post(
        "/api/auth/register", json={"username": username, "password": password, "name": name}
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body, {"Authorization": f"Bearer {body['access_token']}"}


async def test_register_login_and_me(client):
    body, headers = await _register_customer(client)

    assert body["account"]["balance"] == 10
    assert body["ws_url"].endswith(f"/ws?token={body['access_token']}")

    login = await client.post("/api/auth/login", json={"username": " RAHIM ", "password": "secret "})
    assert login.status_code == 200

    me = await client.get("/api/auth/me", headers=headers)
    assert me.json()["username"] == "rahim"

    duplicate = await client.post("/api/auth/register", json={"username": "Rahim", "password": "x", "name": "R"})
    assert duplicate.status_code == 409

    bad = await client.post("/api/auth/login", json={"username": "rahim", "password": "nope"})
    assert bad.status_code == 401


async def test_requests_without_token_are_rejected(client):
    response = await client.get("/api/customer/me")
    assert response.status_code in (401, 403)


async def test_recharge_approval_flow(client, session_factory, auth_headers):
    await _create_admin(session_factory)
    _, user_headers = await _register_customer(client)
    admin_headers = await auth_headers("admin", "admin")

    too_low = await client.post(
        "/api/customer/recharges",
        json={"amount": 20, "sender_number": "01711", "trx_id": "T0"},
        headers=user_headers,
    )
    assert too_low.status_code == 400

    created = await client.post(
        "/api/customer/recharges",
        json={"amount": 100, "sender_number": "01711", "trx_id": "TRX9"},
        headers=user_headers,
    )
    assert created.status_code == 201
    request_id = created.json()["id"]

    counts = await client.get("/api/admin/notifications", headers=admin_headers)
    assert counts.json()["pending_recharges"] == 1

    forbidden = await client.post(
        f"/api/admin/recharges/{request_id}/review", json={"decision": "approved"}, headers=user_headers
    )
    assert forbidden.status_code == 403

    approved = await client.post(
        f"/api/admin/recharges/{request_id}/review", json={"decision": "approved"}, headers=admin_headers
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    again = await client.post(
        f"/api/admin/recharges/{request_id}/review", json={"decision": "approved"}, headers=admin_headers
    )
    assert again.status_code == 409

    me = await client.get("/api/customer/me", headers=user_headers)
    assert me.json()["balance"] == 110

    history = await client.get("/api/customer/wallet/transactions", headers=user_headers)
    descriptions = [t["description"] for t in history.json()["transactions"]]
    assert descriptions[0] == f"bKash Recharge #{request_id} (TrxID: TRX9)"


async def test_generation_endpoint_charges_and_refuses(client, fake_genai):
    _, headers = await _register_customer(client)
    payload = {
        "image": data_url(make_jpeg()),
        "options": {
            "background": "#ADD8E6",
            "clothing": {"kind": "preset", "garment": "formal saree"},
            "size": {"kind": "custom", "width": 400, "height": 500},
        },
        "session_key": "abc",
    }

    first = await client.post("/api/customer/photos/generate", json=payload, headers=headers)
    assert first.status_code == 200, first.text
    body = first.json()
    assert (body["width"], body["height"], body["charged"], body["balance"]) == (400, 500, True, 7)

    gallery = await client.get("/api/customer/photos", headers=headers)
    assert gallery.json()["total"] == 1
    assert gallery.json()["images"][0]["settings_summary"] == "custom, #ADD8E6"

    fake_genai.models.responses.append(text_response("Sorry, I cannot edit this photo."))
    refused = await client.post(
        "/api/customer/photos/generate", json={**payload, "session_key": "other"}, headers=headers
    )
    assert refused.status_code == 422
    assert refused.json()["detail"] == "Sorry, I cannot edit this photo."

    me = await client.get("/api/customer/me", headers=headers)
    assert me.json()["balance"] == 7


async def test_generation_with_insufficient_balance_is_402(client, session_factory, auth_headers, fake_genai):
    await _create_admin(session_factory)
    body, headers = await _register_customer(client)
    admin_headers = await auth_headers("admin", "admin")

    deducted = await client.post(
        f"/api/admin/users/{body['account']['id']}/balance",
        json={"amount": 9, "action": "deduct"},
        headers=admin_headers,
    )
    assert deducted.json()["balance"] == 1

    response = await client.post(
        "/api/customer/photos/generate", json={"image": data_url(make_jpeg())}, headers=headers
    )
    assert response.status_code == 402
    assert fake_genai.models.calls == []

    ledger = await client.get(f"/api/admin/users/{body['account']['id']}/transactions", headers=admin_headers)
    assert ledger.json()["ledger"]["consistent"] is True


async def test_unknown_option_variant_is_a_validation_error(client):
    _, headers = await _register_customer(client)
    response = await client.post(
        "/api/customer/photos/generate",
        json={"image": data_url(make_jpeg()), "options": {"clothing": {"kind": "tuxedo"}}},
        headers=headers,
    )
    assert response.status_code == 422


async def test_support_chat_between_customer_and_admin(client, session_factory, auth_headers):
    await _create_admin(session_factory)
    body, user_headers = await _register_customer(client)
    admin_headers = await auth_headers("admin", "admin")
    key = body["account"]["id"]

    sent = await client.post("/api/customer/chat/messages", json={"text": "Balance not added"}, headers=user_headers)
    assert sent.status_code == 201

    empty = await client.post("/api/customer/chat/messages", json={"text": ""}, headers=user_headers)
    assert empty.status_code == 400

    listing = await client.get("/api/admin/chats", headers=admin_headers)
    conversation = listing.json()["conversations"][0]
    assert conversation["conversation_key"] == key
    assert conversation["user_name"] == "Rahim Uddin"
    assert conversation["awaiting_reply"] is True
    assert conversation["last_message"]["status"] == "delivered"

    opened = await client.get(f"/api/admin/chats/{key}", headers=admin_headers)
    assert opened.json()["messages"][0]["status"] == "seen"

    reply = await client.post(f"/api/admin/chats/{key}/messages", json={"text": "Checking"}, headers=admin_headers)
    assert reply.json()["is_from_admin"] is True

    counts = await client.get("/api/admin/notifications", headers=admin_headers)
    assert counts.json()["pending_chats"] == 0

    mine = await client.get("/api/customer/chat/messages", headers=user_headers)
    assert [m["status"] for m in mine.json()["messages"]] == ["seen", "seen"]


async def test_assistant_endpoint(client):
    _, headers = await _register_customer(client)
    response = await client.post(
        "/api/customer/assistant",
        json={"message": "How do I recharge?", "history": [{"role": "user", "text": "hi"}]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["reply"] == "Send Money to the bKash number."


async def test_admin_gallery_filters_and_backup(client, session_factory, auth_headers):
    await _create_admin(session_factory)
    _, headers = await _register_customer(client)
    admin_headers = await auth_headers("admin", "admin")
    await client.post("/api/customer/photos/generate", json={"image": data_url(make_jpeg())}, headers=headers)

    found = await client.get("/api/admin/gallery", params={"user": "rahim"}, headers=admin_headers)
    assert found.json()["total"] == 1
    missing = await client.get("/api/admin/gallery", params={"date": "2001-01-01"}, headers=admin_headers)
    assert missing.json()["total"] == 0

    backup = await client.get("/api/admin/backup", headers=admin_headers)
    assert backup.status_code == 200
    assert backup.headers["content-disposition"].startswith("attachment;")
    data = backup.json()
    assert len(data["generatedImages"]) == 1

    restored = await client.post("/api/admin/backup/restore", json=data, headers=admin_headers)
    assert restored.status_code == 200
    assert restored.json()["restored"]["users"] == 2

    rejected = await client.post("/api/admin/backup/restore", json={"version": "9"}, headers=admin_headers)
    assert rejected.status_code == 400


async def test_model_transport_failure_is_a_bad_gateway(client, fake_genai):
    _, headers = await _register_customer(client)
    fake_genai.models.responses.append(httpx.ConnectTimeout("timed out"))

    response = await client.post(
        "/api/customer/photos/generate", json={"image": data_url(make_jpeg())}, headers=headers
    )
    assert response.status_code == 502

    me = await client.get("/api/customer/me", headers=headers)
    assert me.json()["balance"] == 10


async def test_list_totals_count_every_row_not_just_the_page(client, session_factory, auth_headers):
    await _create_admin(session_factory)
    _, headers = await _register_customer(client)
    admin_headers = await auth_headers("admin", "admin")
    for color in ("red", "green"):
        await client.post(
            "/api/customer/photos/generate", json={"image": data_url(make_jpeg(color=color))}, headers=headers
        )
    for trx_id in ("T1", "T2"):
        await client.post(
            "/api/customer/recharges",
            json={"amount": 50, "sender_number": "01711", "trx_id": trx_id},
            headers=headers,
        )

    photos = (await client.get("/api/customer/photos", params={"limit": 1}, headers=headers)).json()
    assert (photos["total"], len(photos["images"])) == (2, 1)

    recharges = (await client.get("/api/customer/recharges", params={"limit": 1}, headers=headers)).json()
    assert (recharges["total"], len(recharges["requests"])) == (2, 1)

    pending = (
        await client.get("/api/admin/recharges", params={"status": "pending", "limit": 1}, headers=admin_headers)
    ).json()
    assert (pending["total"], len(pending["requests"])) == (2, 1)

    gallery = (
        await client.get("/api/admin/gallery", params={"user": "rahim", "limit": 1}, headers=admin_headers)
    ).json()
    assert (gallery["total"], len(gallery["images"])) == (2, 1)
