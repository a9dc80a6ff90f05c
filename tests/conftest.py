from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from chatgpt_helper.llm import ChatGPTClient

TEST_API_KEY = "test-api-key-123"


def chat_reply(content: str, *, prompt_tokens: int = 5, completion_tokens: int = 1) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }


class Recorder:
    """Collects requests seen by an httpx.MockTransport and replays canned responses."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def make_client():
    def _make(responder: Callable[[httpx.Request], httpx.Response], **kwargs) -> tuple[ChatGPTClient, Recorder]:
        recorder = Recorder(responder)
        client = ChatGPTClient(TEST_API_KEY, transport=httpx.MockTransport(recorder), **kwargs)
        return client, recorder

    return _make


@pytest.fixture
def reply_client(make_client):
    """Client whose transport always answers with one assistant message."""

    def _make(content: str = "Hello", **kwargs):
        return make_client(lambda request: httpx.Response(200, json=chat_reply(content)), **kwargs)

    return _make
