from __future__ import annotations


class ChatGPTError(Exception):
    """Base class for every error raised by the client."""


class TransportError(ChatGPTError):
    """Network-level failure: no HTTP status is available."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"Transport error: {self.message}"


class ApiError(ChatGPTError):
    """The API answered with a non-success status code."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(status_code, message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        return f"API error ({self.status_code}): {self.message}"
