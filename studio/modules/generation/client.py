"""Thin wrapper around the external image model."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from google import genai
from google.genai import types

from studio.core.config import GenerationSettings

from .exceptions import GenerationEmpty, GenerationRefused, GenerationUnavailable
from .options import PhotoOptions, aspect_ratio_for, build_instruction

logger = logging.getLogger(__name__)

REFUSAL_EXCERPT_LIMIT = 200

FACE_ANALYSIS_PROMPT = """
Analyze this passport photo candidate.
1. Detect the main face box [ymin, xmin, ymax, xmax] (0-1000 scale).
2. Estimate head tilt roll angle in degrees to make eyes level.
Return JSON: { "rollAngle": number, "faceBox": [ymin, xmin, ymax, xmax] }
""".strip()

FACE_ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "rollAngle": types.Schema(
            type=types.Type.NUMBER,
            description="The estimated head tilt roll angle in degrees.",
        ),
        "faceBox": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.NUMBER),
            description="Face bounding box coordinates [ymin, xmin, ymax, xmax] on a 0-1000 scale.",
        ),
    },
    required=["rollAngle", "faceBox"],
)


@dataclass(frozen=True, slots=True)
class FaceBox:
    ymin: float
    xmin: float
    ymax: float
    xmax: float


@dataclass(frozen=True, slots=True)
class FaceAnalysis:
    roll_angle: float = 0.0
    face_box: Optional[FaceBox] = None


def excerpt(text: str, limit: int = REFUSAL_EXCERPT_LIMIT) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_genai_client(settings: GenerationSettings) -> genai.Client:
    if not settings.api_key:
        raise GenerationUnavailable("image generation is not configured")
    return genai.Client(api_key=settings.api_key)


def _response_parts(response: Any) -> list[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


class GenerationClient:
    """Image generation and face analysis calls. No retries, no timeouts."""

    def __init__(self, client: genai.Client, settings: GenerationSettings) -> None:
        self._client = client
        self._settings = settings

    @classmethod
    def from_settings(cls, settings: GenerationSettings) -> "GenerationClient":
        return cls(build_genai_client(settings), settings)

    @property
    def genai(self) -> genai.Client:
        return self._client

    async def generate_photo(self, image: bytes, mime_type: str, options: PhotoOptions) -> bytes:
        """Return the generated image bytes.

        Inline image data wins even when the model also sent text. A text-only
        answer raises :class:`GenerationRefused`; no content at all raises
        :class:`GenerationEmpty`.
        """
        instruction = build_instruction(options)
        response = await self._client.aio.models.generate_content(
            model=self._settings.image_model,
            contents=[
                types.Part.from_bytes(data=image, mime_type=mime_type),
                types.Part.from_text(text=instruction),
            ],
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio_for(options.size)),
            ),
        )

        texts: list[str] = []
        for part in _response_parts(response):
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return inline.data
            if getattr(part, "text", None):
                texts.append(part.text)

        text = "".join(texts).strip()
        if text:
            logger.warning("Image model refused: %s", excerpt(text))
            raise GenerationRefused(excerpt(text))
        raise GenerationEmpty()

    async def analyze_face(self, image: bytes, mime_type: str) -> FaceAnalysis:
        """Best-effort face box and roll angle; any failure yields the neutral result."""
        try:
            response = await self._client.aio.models.generate_content(
                model=self._settings.analysis_model,
                contents=[
                    types.Part.from_bytes(data=image, mime_type=mime_type),
                    types.Part.from_text(text=FACE_ANALYSIS_PROMPT),
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=FACE_ANALYSIS_SCHEMA,
                ),
            )
            if not response.text:
                return FaceAnalysis()
            data = json.loads(response.text)
            box = data.get("faceBox")
            face_box = FaceBox(*(float(v) for v in box[:4])) if box and len(box) >= 4 else None
            return FaceAnalysis(roll_angle=float(data.get("rollAngle") or 0), face_box=face_box)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Face analysis failed: %s", exc)
            return FaceAnalysis()
