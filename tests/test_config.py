from __future__ import annotations

import os

import pytest

from chatgpt_helper.config import load_settings
from chatgpt_helper.llm import ChatGPTClient, build_client
from chatgpt_helper.llm.mock import MockOpenAITransport

ENV_KEYS = (
    "CHATGPT_BACKEND",
    "OPENAI_API_KEY",
    "CHATGPT_BASE_URL",
    "CHATGPT_MODEL",
    "CHATGPT_TEMPERATURE",
    "CHATGPT_MAX_TOKENS",
    "CHATGPT_TIMEOUT_S",
    "CHATGPT_LOG_DIR",
    "CHATGPT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Relative paths (log dir) resolve under tmp_path.
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = load_settings()
    assert s.backend == "openai"
    assert s.api_key is None
    assert s.base_url == "https://api.openai.com/v1"
    assert s.model == "gpt-3.5-turbo"
    assert s.temperature == 0.7
    assert s.max_tokens == 1000
    assert s.timeout_s == 30.0
    assert s.log_level == "WARNING"
    assert s.log_dir.name == "logs"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CHATGPT_BACKEND", " Mock ")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("CHATGPT_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("CHATGPT_TEMPERATURE", "1.1")
    monkeypatch.setenv("CHATGPT_MAX_TOKENS", "256")
    monkeypatch.setenv("CHATGPT_TIMEOUT_S", "5")
    monkeypatch.setenv("CHATGPT_LOG_LEVEL", "debug")

    s = load_settings()
    assert s.backend == "mock"
    assert s.api_key == "sk-test"
    assert s.model == "gpt-4o-mini"
    assert s.temperature == 1.1
    assert s.max_tokens == 256
    assert s.timeout_s == 5.0
    assert s.log_level == "DEBUG"


def test_empty_values_count_as_unset(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("CHATGPT_MODEL", "")
    s = load_settings()
    assert s.api_key is None
    assert s.model == "gpt-3.5-turbo"


def test_dotenv_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("CHATGPT_MODEL=from-dotenv\n", encoding="utf-8")
    try:
        s = load_settings(env_file)
    finally:
        os.environ.pop("CHATGPT_MODEL", None)
    assert s.model == "from-dotenv"


def test_environment_beats_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("CHATGPT_MODEL=from-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("CHATGPT_MODEL", "from-env")
    assert load_settings(env_file).model == "from-env"


def test_factory_openai_requires_key():
    with pytest.raises(RuntimeError):
        build_client(load_settings())


def test_factory_openai(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("CHATGPT_TEMPERATURE", "5")
    client = build_client(load_settings())
    assert isinstance(client, ChatGPTClient)
    assert client.http.api_key == "sk-test"
    assert client.http.timeout_s == 30.0
    assert client.temperature == 2.0


def test_factory_mock(monkeypatch):
    monkeypatch.setenv("CHATGPT_BACKEND", "mock")
    client = build_client(load_settings())
    assert isinstance(client.http._transport, MockOpenAITransport)


def test_factory_unknown_backend(monkeypatch):
    monkeypatch.setenv("CHATGPT_BACKEND", "carrier-pigeon")
    with pytest.raises(ValueError):
        build_client(load_settings())


@pytest.mark.parametrize(
    "key,value",
    [("CHATGPT_TEMPERATURE", "warm"), ("CHATGPT_MAX_TOKENS", "lots"), ("CHATGPT_TIMEOUT_S", "soon")],
)
def test_bad_number_names_the_variable(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError, match=key):
        load_settings()


def test_numbers_tolerate_whitespace(monkeypatch):
    monkeypatch.setenv("CHATGPT_MAX_TOKENS", " 256 ")
    assert load_settings().max_tokens == 256
