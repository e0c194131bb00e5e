"""Providers for the external model wrappers."""

from fastapi import HTTPException, status

from studio.core.container import get_container
from studio.modules.generation.assistant import SupportAssistant
from studio.modules.generation.client import GenerationClient
from studio.modules.generation.exceptions import GenerationUnavailable


def get_generation_client() -> GenerationClient:
    try:
        return get_container().generation_client()
    except GenerationUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_support_assistant() -> SupportAssistant:
    try:
        return get_container().support_assistant()
    except GenerationUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


__all__ = ["get_generation_client", "get_support_assistant"]
