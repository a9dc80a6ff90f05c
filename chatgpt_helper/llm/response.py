"""
Defensive readers for decoded API responses.

A missing or oddly shaped field yields a default ("" / {} / []), never an
exception: responses may be None when the body was not JSON.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

# Rough prices per 1K tokens, USD.
PROMPT_PRICE_PER_1K = 0.0015
COMPLETION_PRICE_PER_1K = 0.002


def _first_choice_message(response: Any) -> Mapping[str, Any]:
    if not isinstance(response, Mapping):
        return {}
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return {}
    choice = choices[0]
    if not isinstance(choice, Mapping):
        return {}
    msg = choice.get("message")
    return msg if isinstance(msg, Mapping) else {}


def assistant_message(response: Any) -> Mapping[str, Any] | None:
    """choices[0].message, or None when the response carries no reply."""
    msg = _first_choice_message(response)
    return msg or None


def response_text(response: Any) -> str:
    content = _first_choice_message(response).get("content")
    return content if isinstance(content, str) else ""


def usage(response: Any) -> dict[str, Any]:
    if not isinstance(response, Mapping):
        return {}
    u = response.get("usage")
    return dict(u) if isinstance(u, Mapping) else {}


def _data_items(response: Any) -> list[Mapping[str, Any]]:
    if not isinstance(response, Mapping):
        return []
    data = response.get("data")
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, Mapping)]


def image_urls(response: Any) -> list[str]:
    return [item["url"] for item in _data_items(response) if isinstance(item.get("url"), str)]


def model_ids(response: Any) -> list[str]:
    return [item["id"] for item in _data_items(response) if isinstance(item.get("id"), str)]


def estimate_tokens(text: str) -> int:
    """
    Crude token estimate: ~4 characters per token for English text.

    This is not a tokenizer; use it for budgeting only.
    """
    return math.ceil(len(text) / 4)


def estimate_cost(
    usage_: Mapping[str, Any],
    *,
    prompt_price_per_1k: float = PROMPT_PRICE_PER_1K,
    completion_price_per_1k: float = COMPLETION_PRICE_PER_1K,
) -> float:
    prompt_tokens = _as_int(usage_.get("prompt_tokens"))
    completion_tokens = _as_int(usage_.get("completion_tokens"))
    return (prompt_tokens * prompt_price_per_1k + completion_tokens * completion_price_per_1k) / 1000


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def total_tokens(response: Any) -> int:
    return _as_int(usage(response).get("total_tokens"))
