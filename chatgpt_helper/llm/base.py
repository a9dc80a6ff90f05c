from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SYSTEM = "system"
USER = "user"
ASSISTANT = "assistant"
ROLES = (SYSTEM, USER, ASSISTANT)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "system" | "user" | "assistant"
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


def clamp_temperature(value: float) -> float:
    return max(0.0, min(2.0, float(value)))


@dataclass
class GenerationConfig:
    """Sampling parameters shared by every call until changed."""

    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    def __post_init__(self) -> None:
        self.set_temperature(self.temperature)
        self.set_max_tokens(self.max_tokens)

    def set_model(self, model: str) -> None:
        self.model = model

    def set_temperature(self, temperature: float) -> None:
        self.temperature = clamp_temperature(temperature)

    def set_max_tokens(self, max_tokens: int) -> None:
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens < 1:
            raise ValueError(f"max_tokens must be a positive integer, got {max_tokens!r}")
        self.max_tokens = max_tokens
