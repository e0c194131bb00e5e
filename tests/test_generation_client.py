import json
from types import SimpleNamespace

import pytest

from studio.modules.generation import GenerationEmpty, GenerationRefused, PhotoOptions, SquareSize
from studio.modules.generation.assistant import UNAVAILABLE_REPLY, ChatTurn

from .fakes import empty_response, image_response, make_jpeg, text_response


async def test_inline_image_wins_over_text(generation_client, fake_genai):
    produced = make_jpeg(10, 10)
    fake_genai.models.responses.append(image_response(produced, text="Here is your photo"))

    result = await generation_client.generate_photo(make_jpeg(), "image/jpeg", PhotoOptions())

    assert result == produced
    call = fake_genai.models.calls[0]
    assert call["model"] == "gemini-2.5-flash-image"
    assert call["config"].image_config.aspect_ratio == "3:4"


async def test_aspect_ratio_follows_output_size(generation_client, fake_genai):
    await generation_client.generate_photo(make_jpeg(), "image/jpeg", PhotoOptions(size=SquareSize()))
    assert fake_genai.models.calls[0]["config"].image_config.aspect_ratio == "1:1"


async def test_text_only_answer_is_a_refusal_with_excerpt(generation_client, fake_genai):
    fake_genai.models.responses.append(text_response("I can't help with that. " * 20))

    with pytest.raises(GenerationRefused) as excinfo:
        await generation_client.generate_photo(make_jpeg(), "image/jpeg", PhotoOptions())

    assert len(excinfo.value.excerpt) == 203
    assert excinfo.value.excerpt.endswith("...")


async def test_short_refusal_is_not_truncated(generation_client, fake_genai):
    fake_genai.models.responses.append(text_response("No faces found."))

    with pytest.raises(GenerationRefused) as excinfo:
        await generation_client.generate_photo(make_jpeg(), "image/jpeg", PhotoOptions())
    assert excinfo.value.excerpt == "No faces found."


async def test_empty_answer(generation_client, fake_genai):
    fake_genai.models.responses.append(empty_response())

    with pytest.raises(GenerationEmpty) as excinfo:
        await generation_client.generate_photo(make_jpeg(), "image/jpeg", PhotoOptions())
    assert str(excinfo.value) == "No image generated. Please try a different photo or setting."


async def test_analyze_face_parses_json(generation_client, fake_genai):
    payload = {"rollAngle": -4.5, "faceBox": [100, 200, 700, 800]}
    fake_genai.models.responses.append(SimpleNamespace(text=json.dumps(payload)))

    analysis = await generation_client.analyze_face(make_jpeg(), "image/jpeg")

    assert analysis.roll_angle == -4.5
    assert (analysis.face_box.ymin, analysis.face_box.xmax) == (100, 800)
    assert fake_genai.models.calls[0]["config"].response_mime_type == "application/json"


@pytest.mark.parametrize(
    "response",
    [
        RuntimeError("quota exceeded"),
        SimpleNamespace(text="not json"),
        SimpleNamespace(text=None),
        SimpleNamespace(text=json.dumps({"rollAngle": 3})),
    ],
)
async def test_analyze_face_degrades_to_neutral(generation_client, fake_genai, response):
    fake_genai.models.responses.append(response)

    analysis = await generation_client.analyze_face(make_jpeg(), "image/jpeg")

    assert analysis.face_box is None
    assert analysis.roll_angle in (0, 3)


async def test_assistant_passes_history_and_policy(support_assistant, fake_genai):
    reply = await support_assistant.reply([ChatTurn("user", "hello"), ChatTurn("model", "hi")], "How to recharge?")

    assert reply == "Send Money to the bKash number."
    created = fake_genai.chats.created[0]
    instruction = created["config"].system_instruction
    assert "01540-013418" in instruction
    assert "Minimum recharge is 50 BDT" in instruction
    assert [c.role for c in created["history"]] == ["user", "model"]
    assert fake_genai.chats.sent == ["How to recharge?"]


async def test_assistant_apologises_on_failure(support_assistant, fake_genai):
    fake_genai.chats.reply = RuntimeError("boom")
    assert await support_assistant.reply([], "hi") == UNAVAILABLE_REPLY
