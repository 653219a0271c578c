import pytest
import requests

from monicaLib import MonicaApiError, get_config
from monicaLib.transport import HttpTransport
from .conftest import FakeResponse, FakeSession


def _transport(response=None, exc=None):
    fs = FakeSession(post_response=response)
    if exc is not None:
        def post(url, **kw):
            raise exc
        fs.post = post
    return HttpTransport("https://api.test/", "key", session=fs), fs


def test_post_returns_decoded_body_and_closes():
    resp = FakeResponse(json_data={"ok": True})
    t, fs = _transport(resp)
    assert t.post("/v1/x", {"model": "m"}) == {"ok": True}
    assert resp.closed
    url, headers, payload, kw = fs.last_post
    assert url == "https://api.test/v1/x"
    assert headers["Content-Type"] == "application/json"
    assert headers["Accept"] == "application/json"
    assert kw["timeout"] == (10.0, 60.0)


def test_network_failure():
    t, _ = _transport(exc=requests.ConnectionError("refused"))
    with pytest.raises(MonicaApiError) as ei:
        t.post("/v1/x", {})
    assert ei.value.message.startswith("Network error:")
    assert ei.value.status_code is None


def test_invalid_json_body():
    t, _ = _transport(FakeResponse(text="<html>"))
    with pytest.raises(MonicaApiError) as ei:
        t.post("/v1/x", {})
    assert ei.value.message.startswith("Invalid JSON response")
    assert ei.value.status_code == 200


def test_non_object_json_body():
    t, _ = _transport(FakeResponse(json_data=[1, 2]))
    with pytest.raises(MonicaApiError):
        t.post("/v1/x", {})


def test_embedded_api_error_in_success_response():
    body = {"error": {"message": "quota gone", "code": "insufficient_quota"}}
    t, _ = _transport(FakeResponse(json_data=body))
    with pytest.raises(MonicaApiError) as ei:
        t.post("/v1/x", {})
    err = ei.value
    assert str(err) == "Monica API error [insufficient_quota]: quota gone"
    assert err.is_quota_error()
    assert err.response_data == body


def test_error_body_on_http_failure_wins_over_status_text():
    body = {"error": {"message": "bad key", "code": "invalid_api_key"}}
    t, _ = _transport(FakeResponse(status=401, json_data=body))
    with pytest.raises(MonicaApiError) as ei:
        t.post("/v1/x", {})
    assert str(ei.value) == "Monica API error [invalid_api_key]: bad key"
    assert ei.value.status_code == 401
    assert ei.value.is_authentication_error()


@pytest.mark.parametrize(
    "status, message",
    [
        (401, "Unauthorized: Invalid API key"),
        (403, "Forbidden: Access denied"),
        (404, "Not Found: Endpoint does not exist"),
        (429, "Rate limit exceeded"),
        (500, "Internal server error"),
        (502, "Bad gateway"),
        (503, "Service unavailable"),
        (504, "Gateway timeout"),
        (418, "HTTP error 418"),
    ],
)
def test_status_messages(status, message):
    t, _ = _transport(FakeResponse(status=status, text="nope"))
    with pytest.raises(MonicaApiError) as ei:
        t.post("/v1/x", {})
    assert str(ei.value) == message
    assert ei.value.status_code == status


def test_get_returns_none_on_http_error():
    fs = FakeSession()
    fs.get = lambda url, **kw: FakeResponse(status=500)
    assert HttpTransport(session=fs).get("http://img/x.png", timeout=1) is None


def test_config_defaults_and_overrides(monkeypatch):
    cfg = get_config()
    assert cfg.base_url == "https://openapi.monica.im"
    assert cfg.model == "gpt-4.1"
    assert cfg.timeout == 60.0 and cfg.connect_timeout == 10.0
    assert not cfg.is_configured

    monkeypatch.setenv("MONICA_API_KEY", "abc")
    monkeypatch.setenv("MONICA_BASE_URL", "https://proxy.local/")
    monkeypatch.setenv("MONICA_TIMEOUT", "not-a-number")
    monkeypatch.setenv("MONICA_CONNECT_TIMEOUT", "3")
    cfg = get_config()
    assert cfg.is_configured
    assert cfg.base_url == "https://proxy.local"
    assert cfg.timeout == 60.0
    assert cfg.connect_timeout == 3.0
