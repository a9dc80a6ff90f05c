from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from chatgpt_helper.llm.base import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, DEFAULT_TEMPERATURE
from chatgpt_helper.llm.transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S


@dataclass(frozen=True)
class Settings:
    backend: str

    api_key: str | None
    base_url: str

    model: str
    temperature: float
    max_tokens: int
    timeout_s: float

    log_dir: Path
    log_level: str


def load_settings(dotenv_path: Path | None = None) -> Settings:
    # Allow users to keep secrets in a local `.env` (not committed).
    load_dotenv(dotenv_path, override=False)

    def getenv(key: str, default: str | None = None) -> str | None:
        v = os.getenv(key)
        if v is None or v == "":
            return default
        return v

    backend = (getenv("CHATGPT_BACKEND", "openai") or "openai").strip().lower()

    api_key = getenv("OPENAI_API_KEY", None)
    base_url = getenv("CHATGPT_BASE_URL", DEFAULT_BASE_URL) or DEFAULT_BASE_URL

    model = getenv("CHATGPT_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL
    temperature = _number("CHATGPT_TEMPERATURE", getenv("CHATGPT_TEMPERATURE"), float, DEFAULT_TEMPERATURE)
    max_tokens = _number("CHATGPT_MAX_TOKENS", getenv("CHATGPT_MAX_TOKENS"), int, DEFAULT_MAX_TOKENS)
    timeout_s = _number("CHATGPT_TIMEOUT_S", getenv("CHATGPT_TIMEOUT_S"), float, DEFAULT_TIMEOUT_S)

    log_dir = Path(getenv("CHATGPT_LOG_DIR", "logs") or "logs").resolve()
    log_level = (getenv("CHATGPT_LOG_LEVEL", "WARNING") or "WARNING").strip().upper()

    return Settings(
        backend=backend,
        api_key=api_key,
        base_url=base_url,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout_s=timeout_s,
        log_dir=log_dir,
        log_level=log_level,
    )


def _number(key: str, raw: str | None, cast: type, default: Any) -> Any:
    if raw is None:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be a {cast.__name__}, got {raw!r}") from None
