from __future__ import annotations

from typing import TYPE_CHECKING

from .client import ChatGPTClient
from .mock import MockOpenAITransport

if TYPE_CHECKING:
    from chatgpt_helper.config import Settings


def build_client(settings: Settings) -> ChatGPTClient:
    backend = settings.backend
    common = {
        "base_url": settings.base_url,
        "model": settings.model,
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
        "timeout_s": settings.timeout_s,
    }
    if backend == "mock":
        return ChatGPTClient("mock", transport=MockOpenAITransport(), **common)
    if backend == "openai":
        if not settings.api_key:
            raise RuntimeError("OPENAI_API_KEY is not set but CHATGPT_BACKEND=openai")
        return ChatGPTClient(settings.api_key, **common)
    raise ValueError(f"Unknown CHATGPT_BACKEND={backend!r}, expected: openai|mock")
