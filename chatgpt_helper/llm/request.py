from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .base import ChatMessage, GenerationConfig

DEFAULT_IMAGE_SIZE = "1024x1024"


def build_chat_request(
    messages: Iterable[ChatMessage],
    config: GenerationConfig,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Payload for POST /chat/completions.

    Caller overrides win over the base fields and may add extra keys
    (e.g. "top_p"). Nothing is validated here: the config clamps on set.
    """
    payload: dict[str, Any] = {
        "model": config.model,
        "messages": [m.to_dict() for m in messages],
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
    }
    if overrides:
        payload.update(overrides)
    return payload


def build_image_request(prompt: str, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "prompt": prompt,
        "n": 1,
        "size": DEFAULT_IMAGE_SIZE,
    }
    if overrides:
        payload.update(overrides)
    return payload
