from __future__ import annotations

import json

import httpx
import pytest

from chatgpt_helper.llm import ApiError, TransportError
from chatgpt_helper.llm.transport import HttpTransport, extract_error_message

from .conftest import TEST_API_KEY, Recorder


def make_transport(responder, **kwargs) -> tuple[HttpTransport, Recorder]:
    recorder = Recorder(responder)
    return HttpTransport(api_key=TEST_API_KEY, transport=httpx.MockTransport(recorder), **kwargs), recorder


def test_post_sends_json_with_auth_headers():
    http, rec = make_transport(lambda r: httpx.Response(200, json={"ok": True}))
    out = http.send("/chat/completions", {"model": "m", "messages": []})

    assert out == {"ok": True}
    req = rec.last
    assert req.method == "POST"
    assert str(req.url) == "https://api.openai.com/v1/chat/completions"
    assert req.headers["Authorization"] == f"Bearer {TEST_API_KEY}"
    assert req.headers["Content-Type"] == "application/json"
    assert json.loads(req.content) == {"model": "m", "messages": []}


def test_get_has_no_body():
    http, rec = make_transport(lambda r: httpx.Response(200, json={"data": []}))
    http.send("/models", {"ignored": True}, method="GET")
    assert rec.last.method == "GET"
    assert rec.last.content == b""
    assert rec.last.headers["Authorization"] == f"Bearer {TEST_API_KEY}"


def test_custom_base_url_trailing_slash():
    http, rec = make_transport(lambda r: httpx.Response(200, json={}), base_url="http://localhost:8080/v1/")
    http.send("/models", method="GET")
    assert str(rec.last.url) == "http://localhost:8080/v1/models"


def test_default_timeout():
    http = HttpTransport(api_key="k")
    assert http.timeout_s == 30.0


def test_non_json_body_passes_through_as_none():
    http, _ = make_transport(lambda r: httpx.Response(200, text="not json"))
    assert http.send("/chat/completions", {"x": 1}) is None


def test_api_error_carries_status_and_message():
    http, _ = make_transport(lambda r: httpx.Response(401, json={"error": {"message": "Invalid API key"}}))
    with pytest.raises(ApiError) as exc:
        http.send("/chat/completions", {"x": 1})
    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid API key"
    assert str(exc.value) == "API error (401): Invalid API key"


@pytest.mark.parametrize(
    "status,body",
    [
        (500, {"unexpected": True}),
        (404, {"error": "just a string"}),
        (429, {"error": {"code": "rate_limit"}}),
    ],
)
def test_api_error_generic_message(status, body):
    http, _ = make_transport(lambda r: httpx.Response(status, json=body))
    with pytest.raises(ApiError) as exc:
        http.send("/chat/completions", {"x": 1})
    assert exc.value.status_code == status
    assert exc.value.message == "Unknown API error"


def test_api_error_with_non_json_body():
    http, _ = make_transport(lambda r: httpx.Response(502, text="<html>Bad gateway</html>"))
    with pytest.raises(ApiError) as exc:
        http.send("/models", method="GET")
    assert exc.value.status_code == 502
    assert exc.value.message == "Unknown API error"


def test_2xx_other_than_200_is_success():
    http, _ = make_transport(lambda r: httpx.Response(201, json={"created": True}))
    assert http.send("/images/generations", {"prompt": "x"}) == {"created": True}


@pytest.mark.parametrize(
    "exc_type",
    [httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout, httpx.RemoteProtocolError],
)
def test_network_faults_become_transport_error(exc_type):
    def boom(request):
        raise exc_type("connection refused", request=request)

    http, rec = make_transport(boom)
    with pytest.raises(TransportError) as exc:
        http.send("/chat/completions", {"x": 1})
    assert "connection refused" in exc.value.message
    assert len(rec.requests) == 1


def test_no_retry_on_api_error():
    http, rec = make_transport(lambda r: httpx.Response(500, json={"error": {"message": "boom"}}))
    with pytest.raises(ApiError):
        http.send("/chat/completions", {"x": 1})
    assert len(rec.requests) == 1


def test_extract_error_message():
    assert extract_error_message({"error": {"message": "nope"}}) == "nope"
    assert extract_error_message(None) == "Unknown API error"
    assert extract_error_message({"error": {"message": ""}}) == "Unknown API error"


def test_malformed_base_url_becomes_transport_error():
    http, rec = make_transport(lambda r: httpx.Response(200, json={}), base_url="https://api.example.com/v1\x00")
    with pytest.raises(TransportError):
        http.send("/models", method="GET")
    assert rec.requests == []
