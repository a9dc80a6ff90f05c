from __future__ import annotations

import json

import httpx

from .response import estimate_tokens

MOCK_MODELS = ("mock-gpt-3.5-turbo", "mock-gpt-4", "mock-dall-e-3")


class MockOpenAITransport(httpx.MockTransport):
    """Deterministic offline backend: answers the three endpoints without a network."""

    def __init__(self) -> None:
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/chat/completions"):
            return httpx.Response(200, json=self._chat(json.loads(request.content or b"{}")))
        if path.endswith("/images/generations"):
            return httpx.Response(200, json=self._images(json.loads(request.content or b"{}")))
        if path.endswith("/models"):
            return httpx.Response(200, json={"object": "list", "data": [{"id": m, "object": "model"} for m in MOCK_MODELS]})
        return httpx.Response(404, json={"error": {"message": f"Unknown endpoint {path}"}})

    @staticmethod
    def _chat(payload: dict) -> dict:
        messages = payload.get("messages") or []
        # Echo the last user message so control flow can be verified offline.
        last_user = next((m.get("content", "") for m in reversed(messages) if m.get("role") == "user"), "")
        reply = f"[mock] You said: {last_user}"
        prompt_tokens = sum(estimate_tokens(m.get("content", "")) for m in messages)
        completion_tokens = estimate_tokens(reply)
        return {
            "object": "chat.completion",
            "model": payload.get("model", MOCK_MODELS[0]),
            "choices": [{"index": 0, "message": {"role": "assistant", "content": reply}, "finish_reason": "stop"}],
            "usage": {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
        }

    @staticmethod
    def _images(payload: dict) -> dict:
        n = payload.get("n") or 1
        size = payload.get("size", "1024x1024")
        return {"data": [{"url": f"https://mock.invalid/images/{i}-{size}.png"} for i in range(int(n))]}
