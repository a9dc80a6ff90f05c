from __future__ import annotations

import logging
from typing import Any

import httpx

from . import response as resp
from .base import (
    ASSISTANT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    USER,
    ChatMessage,
    GenerationConfig,
)
from .conversation import ConversationLog
from .request import build_chat_request, build_image_request
from .transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, HttpTransport

logger = logging.getLogger(__name__)


class ChatGPTClient:
    """
    Chat completions, image generation and model listing over raw HTTP.

    Setters return the client so calls can be chained:

        client.set_model("gpt-4").set_temperature(0.3).chat("Hi")

    chat() and complete() are stateless. conversation() replays and extends
    the persistent log.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = GenerationConfig(model=model, temperature=temperature, max_tokens=max_tokens)
        self.log = ConversationLog()
        self.http = HttpTransport(api_key=api_key, base_url=base_url, timeout_s=timeout_s, transport=transport)

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def temperature(self) -> float:
        return self.config.temperature

    @property
    def max_tokens(self) -> int:
        return self.config.max_tokens

    def set_model(self, model: str) -> ChatGPTClient:
        self.config.set_model(model)
        return self

    def set_max_tokens(self, max_tokens: int) -> ChatGPTClient:
        self.config.set_max_tokens(max_tokens)
        return self

    def set_temperature(self, temperature: float) -> ChatGPTClient:
        """Set sampling temperature, clamped to [0.0, 2.0]."""
        self.config.set_temperature(temperature)
        return self

    def set_system_prompt(self, prompt: str) -> ChatGPTClient:
        self.log.set_system_prompt(prompt)
        return self

    def clear_conversation(self) -> ChatGPTClient:
        self.log.clear()
        return self

    def get_conversation(self) -> tuple[ChatMessage, ...]:
        return self.log.snapshot()

    def chat(self, message: str, **options: Any) -> Any:
        """Single-turn chat. Never reads or writes the conversation log."""
        return self._send_chat([ChatMessage(USER, message)], options)

    def conversation(self, message: str, **options: Any) -> Any:
        """
        Send `message` with the whole conversation log.

        The user message is appended before the call and stays in the log
        even when the call raises. The assistant reply is appended only after
        a successful call that actually carries one.
        """
        self.log.append(USER, message)
        data = self._send_chat(self.log.snapshot(), options)

        reply = resp.assistant_message(data)
        if reply is not None:
            content = reply.get("content")
            self.log.append(ASSISTANT, content if isinstance(content, str) else "")
        else:
            logger.debug("conversation: response carried no assistant message")
        return data

    def complete(self, prompt: str, **options: Any) -> Any:
        return self._send_chat([ChatMessage(USER, prompt)], options)

    def generate_image(self, prompt: str, **options: Any) -> Any:
        return self.http.send("/images/generations", build_image_request(prompt, options))

    def get_models(self) -> Any:
        return self.http.send("/models", method="GET")

    def _send_chat(self, messages, options: dict[str, Any]) -> Any:
        payload = build_chat_request(messages, self.config, options)
        return self.http.send("/chat/completions", payload)

    @staticmethod
    def get_response_text(response: Any) -> str:
        return resp.response_text(response)

    @staticmethod
    def get_usage(response: Any) -> dict[str, Any]:
        return resp.usage(response)

    @staticmethod
    def estimate_tokens(text: str) -> int:
        return resp.estimate_tokens(text)
