from types import SimpleNamespace

import pytest

from studio.modules.accounts.service import AccountService
from studio.modules.generation import GenerationRefused, PhotoOptions, SquareSize
from studio.modules.generation.imaging import ViewportTransform, open_image, split_data_url
from studio.modules.generation.service import GENERATION_DESCRIPTION, GenerationService
from studio.modules.wallets import InsufficientBalanceError
from studio.modules.wallets.service import WalletService

from .fakes import data_url, make_jpeg, text_response


async def _fresh(session, account_id):
    return await AccountService.with_session(session).get_by_id(account_id)


async def test_generation_debits_and_stores_resized_photo(session, register, generation_client, fake_genai):
    account = await register()
    service = GenerationService.with_session(session, generation_client)

    result = await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions(), session_key="s1")
    await session.commit()

    assert result.charged
    assert result.balance == 7
    assert result.data_url.startswith("data:image/jpeg;base64,")
    _, raw = split_data_url(result.data_url)
    assert open_image(raw).size == (472, 591)
    assert result.image.settings_summary == "passport, #ffffff"

    wallet = WalletService.with_session(session)
    latest = (await wallet.list_transactions(account.id))[0]
    assert (latest.type, latest.amount, latest.description) == ("debit", 3, GENERATION_DESCRIPTION)
    assert (await wallet.verify_ledger(await _fresh(session, account.id))).consistent


async def test_regenerating_a_paid_session_is_free(session, register, generation_client):
    account = await register()
    service = GenerationService.with_session(session, generation_client)

    await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions(), session_key="s1")
    account = await _fresh(session, account.id)
    again = await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions(), session_key="s1")
    other = await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions(), session_key="s2")

    assert not again.charged
    assert again.balance == 7
    assert other.charged
    assert other.balance == 4


async def test_reusing_a_paid_session_with_another_photo_is_charged(session, register, generation_client):
    account = await register()
    service = GenerationService.with_session(session, generation_client)

    first = await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions(), session_key="k")
    balance = first.balance
    for offset in range(2):
        account = await _fresh(session, account.id)
        photo = data_url(make_jpeg(301 + offset, 400, "blue"))
        result = await service.generate_for_account(account, photo, PhotoOptions(), session_key="k")
        assert result.charged
        assert result.balance == balance - 3
        balance = result.balance

    assert (await _fresh(session, account.id)).balance == 1


async def test_insufficient_balance_is_refused_before_the_model_call(session, register, generation_client, fake_genai):
    account = await register()
    await WalletService.with_session(session).adjust_balance(account.id, -9, "spent")
    account = await _fresh(session, account.id)
    service = GenerationService.with_session(session, generation_client)

    with pytest.raises(InsufficientBalanceError):
        await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions())

    assert fake_genai.models.calls == []
    assert [t.description for t in await WalletService.with_session(session).list_transactions(account.id)] == [
        "spent",
        "Welcome Bonus",
    ]


async def test_refusal_charges_nothing(session, register, generation_client, fake_genai):
    account = await register()
    fake_genai.models.responses.append(text_response("Cannot process this image."))
    service = GenerationService.with_session(session, generation_client)

    with pytest.raises(GenerationRefused):
        await service.generate_for_account(account, data_url(make_jpeg()), PhotoOptions())

    assert (await _fresh(session, account.id)).balance == 10
    assert await service.gallery.list_for_account(account.id) == []


async def test_viewport_is_rendered_before_generation(session, register, generation_client, fake_genai):
    account = await register()
    service = GenerationService.with_session(session, generation_client)
    transform = ViewportTransform(container_width=300, container_height=400, scale=1.2, rotation=5)

    result = await service.generate_for_account(
        account,
        data_url(make_jpeg(1000, 1000)),
        PhotoOptions(size=SquareSize()),
        transform=transform,
    )

    sent = fake_genai.models.calls[0]["contents"][0]
    assert sent.inline_data.mime_type == "image/jpeg"
    assert open_image(sent.inline_data.data).size == (800, 1067)
    assert (result.image.width, result.image.height) == (300, 300)


async def test_analyze_decodes_data_url(session, generation_client, fake_genai):
    fake_genai.models.responses.append(SimpleNamespace(text='{"rollAngle": 2, "faceBox": [1, 2, 3, 4]}'))
    service = GenerationService.with_session(session, generation_client)

    analysis = await service.analyze(data_url(make_jpeg(), "image/png"))

    assert analysis.roll_angle == 2
    assert fake_genai.models.calls[0]["contents"][0].inline_data.mime_type == "image/png"
