"""Automated support assistant backed by the chat model."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from google import genai
from google.genai import types

from studio.core.config import BillingSettings, GenerationSettings

logger = logging.getLogger(__name__)

NOT_UNDERSTOOD_REPLY = "দুঃখিত, আমি বুঝতে পারিনি।"
UNAVAILABLE_REPLY = "সার্ভারে সমস্যা হচ্ছে, কিছুক্ষণ পর আবার চেষ্টা করুন।"


@dataclass(frozen=True, slots=True)
class ChatTurn:
    role: str  # "user" or "model"
    text: str


def system_instruction(billing: BillingSettings) -> str:
    return f"""
You are a helpful and polite support assistant for a passport photo making application.

KEY INFORMATION:
1. Service: We create professional passport photos using AI.
2. Pricing: Each photo generation costs {billing.generation_cost} {billing.currency}.
3. Payment/Recharge: Users must send money via 'Send Money' to {billing.payment_number} ({billing.payment_channel}). Minimum recharge is {billing.min_recharge} {billing.currency}.
4. Issues: If balance is not added, users should provide their TrxID and Sender Number.
5. New Account Bonus: New users get {billing.welcome_bonus} {billing.currency} free balance.

RULES:
- Answer in Bengali (Bangla) primarily.
- Keep answers concise.
""".strip()


class SupportAssistant:
    def __init__(self, client: genai.Client, settings: GenerationSettings, billing: BillingSettings) -> None:
        self._client = client
        self._settings = settings
        self._billing = billing

    async def reply(self, history: list[ChatTurn], message: str) -> str:
        chat = self._client.aio.chats.create(
            model=self._settings.assistant_model,
            config=types.GenerateContentConfig(system_instruction=system_instruction(self._billing)),
            history=[
                types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
                for turn in history
            ],
        )
        try:
            response = await chat.send_message(message)
        except Exception as exc:  # noqa: BLE001
            logger.error("Assistant call failed: %s", exc)
            return UNAVAILABLE_REPLY
        return response.text or NOT_UNDERSTOOD_REPLY
