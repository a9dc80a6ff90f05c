from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ApiError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_S = 30.0
UNKNOWN_API_ERROR = "Unknown API error"


class HttpTransport:
    """
    Raw HTTP access to an OpenAI-compatible API.

    One attempt per call: no retries, no backoff. Network faults raise
    TransportError, non-2xx answers raise ApiError.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        # Injected for tests and the offline mock backend.
        self._transport = transport

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def send(self, endpoint: str, payload: dict[str, Any] | None = None, method: str = "POST") -> Any:
        """Perform one request and return the decoded JSON body (None if it does not decode)."""
        url = f"{self.base_url}{endpoint}"
        method = method.upper()
        body = payload if method == "POST" and payload else None

        logger.debug("%s %s", method, endpoint)
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self._transport) as client:
                r = client.request(method, url, json=body, headers=self.headers)
        except (httpx.TransportError, httpx.InvalidURL) as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise TransportError(str(e) or type(e).__name__) from e

        data = _decode_json(r)
        logger.debug("%s %s -> %d", method, endpoint, r.status_code)

        if not r.is_success:
            message = extract_error_message(data)
            logger.warning("%s %s returned %d: %s", method, endpoint, r.status_code, message)
            raise ApiError(r.status_code, message)
        return data


def _decode_json(r: httpx.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        # Empty or non-JSON body: downstream accessors tolerate None.
        return None


def extract_error_message(data: Any) -> str:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg:
                return msg
    return UNKNOWN_API_ERROR
