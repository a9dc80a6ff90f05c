from __future__ import annotations

import logging
import threading
from typing import Any

from .base import ASSISTANT, ROLES, SYSTEM, USER, ChatMessage

logger = logging.getLogger(__name__)


class ConversationLog:
    """
    Ordered message history replayed on every conversational call.

    Invariant: at most one system message, always at index 0. System messages
    only enter through set_system_prompt(); append() refuses them.

    Mutations and snapshots hold a lock, so the invariant survives concurrent
    access. A full turn (user message, network call, reply) is not serialized:
    keep one owner per conversation.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._lock = threading.Lock()

    def set_system_prompt(self, text: str) -> None:
        with self._lock:
            rest = [m for m in self._messages if m.role != SYSTEM]
            self._messages = [ChatMessage(SYSTEM, text), *rest]
        logger.debug("system prompt set (%d chars)", len(text))

    def append(self, role: str, content: str) -> None:
        if role == SYSTEM:
            raise ValueError("system messages must go through set_system_prompt()")
        if role not in ROLES:
            raise ValueError(f"unknown role {role!r}, expected one of {USER!r}, {ASSISTANT!r}")
        with self._lock:
            self._messages.append(ChatMessage(role, content))

    def clear(self) -> None:
        with self._lock:
            self._messages = []

    def snapshot(self) -> tuple[ChatMessage, ...]:
        with self._lock:
            return tuple(self._messages)

    def as_payload(self) -> list[dict[str, Any]]:
        return [m.to_dict() for m in self.snapshot()]

    def messages_by_role(self, role: str) -> list[ChatMessage]:
        return [m for m in self.snapshot() if m.role == role]

    @property
    def system_prompt(self) -> str | None:
        messages = self.snapshot()
        if messages and messages[0].role == SYSTEM:
            return messages[0].content
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
