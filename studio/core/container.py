"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from google import genai

from studio.core.config import Settings, get_settings
from studio.infrastructure.database.session import get_engine
from studio.modules.generation.assistant import SupportAssistant
from studio.modules.generation.client import GenerationClient, build_genai_client


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    _genai: Optional[genai.Client] = field(default=None, repr=False)

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, etc.) are initialised."""
        get_engine()

    def genai_client(self) -> genai.Client:
        """Shared model client; raises ``GenerationUnavailable`` without an API key."""
        if self._genai is None:
            self._genai = build_genai_client(self.settings.generation)
        return self._genai

    def generation_client(self) -> GenerationClient:
        return GenerationClient(self.genai_client(), self.settings.generation)

    def support_assistant(self) -> SupportAssistant:
        return SupportAssistant(self.genai_client(), self.settings.generation, self.settings.billing)


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer(settings=get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]
