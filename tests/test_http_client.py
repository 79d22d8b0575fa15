import json

import httpx
import pytest

from adapters.http_client import CodacyTransport, build_client, truncate
from core.config import AppSettings
from core.domain.errors import ConfigurationError, NotFoundError, TransportError


def _settings(**overrides) -> AppSettings:
    values = {"api_token": "secret", "api_base_url": "https://codacy.test/api/v3", "error_snippet_chars": 20}
    values.update(overrides)
    return AppSettings(**values)


def _transport(handler, **overrides) -> CodacyTransport:
    return CodacyTransport.from_settings(_settings(**overrides), transport=httpx.MockTransport(handler))


def test_sends_auth_headers_query_and_json_body():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"id": 7}})

    with _transport(handler) as transport:
        payload = transport.execute(
            "POST",
            "/organizations/gh/acme/coding-standards",
            query={"sourceCodingStandard": "3"},
            body={"name": "Std", "languages": ["Python"]},
        )

    assert payload == {"data": {"id": 7}}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/api/v3/organizations/gh/acme/coding-standards"
    assert request.url.params["sourceCodingStandard"] == "3"
    assert request.headers["api-token"] == "secret"
    assert request.headers["accept"] == "application/json"
    assert json.loads(request.content) == {"name": "Std", "languages": ["Python"]}


def test_get_without_body_sends_no_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    with _transport(handler) as transport:
        transport.execute("GET", "/organizations/gh/acme/coding-standards")

    assert seen[0].content == b""
    assert not seen[0].url.params


def test_empty_response_body_returns_none():
    with _transport(lambda request: httpx.Response(204)) as transport:
        assert transport.execute("POST", "/x/promote") is None


def test_non_success_status_raises_with_truncated_snippet():
    body = "server exploded " * 10

    with _transport(lambda request: httpx.Response(500, text=body)) as transport:
        with pytest.raises(TransportError) as excinfo:
            transport.execute("GET", "/organizations/gh/acme/coding-standards")

    error = excinfo.value
    assert error.status_code == 500
    assert error.snippet == body[:20] + "…"
    assert str(error) == f"API returned 500: {body[:20]}…"
    assert not isinstance(error, NotFoundError)


def test_404_maps_to_not_found():
    with _transport(lambda request: httpx.Response(404, text="nope")) as transport:
        with pytest.raises(NotFoundError) as excinfo:
            transport.execute("GET", "/organizations/gh/acme/coding-standards/9")

    assert excinfo.value.status_code == 404


def test_malformed_json_raises_transport_error():
    with _transport(lambda request: httpx.Response(200, text="{not json")) as transport:
        with pytest.raises(TransportError, match="decoding response"):
            transport.execute("GET", "/organizations/gh/acme/coding-standards")


def test_non_utf8_body_raises_transport_error():
    with _transport(lambda request: httpx.Response(200, content=b"\x80\x81garbage")) as transport:
        with pytest.raises(TransportError, match="decoding response") as excinfo:
            transport.execute("POST", "/x/patterns/update")

    assert excinfo.value.status_code == 200


def test_network_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _transport(handler) as transport:
        with pytest.raises(TransportError, match="executing request") as excinfo:
            transport.execute("GET", "/organizations/gh/acme/coding-standards")

    assert excinfo.value.status_code is None


def test_build_client_uses_explicit_token_over_settings():
    client = build_client(_settings(api_token=None), api_token="from-flag")
    try:
        assert client.headers["api-token"] == "from-flag"
        assert str(client.base_url) == "https://codacy.test/api/v3/"
    finally:
        client.close()


def test_build_client_requires_a_token(monkeypatch):
    monkeypatch.delenv("CODACY_API_TOKEN", raising=False)
    with pytest.raises(ConfigurationError):
        build_client(_settings(api_token=None))


def test_truncate_keeps_short_text():
    assert truncate("short", 10) == "short"
    assert truncate("0123456789abc", 10) == "0123456789…"
