"""Tests for the REST transport against a canned requests session."""

from __future__ import annotations

import json

import pytest
import requests

from hazbase_zk.client.auth import sign_in_with_wallet
from hazbase_zk.client.config import ClientConfig
from hazbase_zk.client.errors import ClientKeyInactive, TransportError
from hazbase_zk.client.http_transport import HttpTransport

ENDPOINT = "https://api.example.com"


def _response(status: int, body, url: str = ENDPOINT) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.reason = "Bad Request" if status >= 400 else "OK"
    response._content = (
        body.encode("utf-8") if isinstance(body, str) else json.dumps(body).encode("utf-8")
    )
    return response


class FakeSession:
    """Serves canned responses keyed by (method, path)."""

    def __init__(self, routes=None, error=None):
        self.routes = routes or {}
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        path = url[len(ENDPOINT):]
        return self.routes[(method, path)]


def _routes():
    return {
        ("GET", "/api/app/user/nonce"): _response(200, {"data": {"nonce": "n-1"}}),
        ("POST", "/api/app/request-transaction/check"): _response(
            200, {"data": {"active": True}}
        ),
        ("POST", "/api/auth/sign-in-with-crypto-wallet"): _response(
            200, {"data": {"jwt": {"accessToken": "jwt-abc"}}}
        ),
        ("POST", "/api/app/request-transaction"): _response(200, {"data": {}}),
    }


class Wallet:
    def get_address(self):
        return "0xabc"

    def sign_message(self, message):
        return "0x" + "11" * 65


@pytest.mark.trio
async def test_fetch_nonce_unwraps_data() -> None:
    session = FakeSession(_routes())
    nonce = await HttpTransport(session=session, timeout=5).fetch_nonce(ENDPOINT, "0xabc")

    assert nonce == "n-1"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", ENDPOINT + "/api/app/user/nonce")
    assert kwargs["params"] == {"walletAddress": "0xabc"}
    assert kwargs["timeout"] == 5


@pytest.mark.trio
async def test_nonce_failure_carries_body() -> None:
    session = FakeSession(
        _routes() | {("GET", "/api/app/user/nonce"): _response(400, "unknown wallet")}
    )
    with pytest.raises(TransportError, match="Nonce request failed: unknown wallet"):
        await HttpTransport(session=session).fetch_nonce(ENDPOINT, "0xabc")


@pytest.mark.trio
async def test_check_client_key_reads_active_flag() -> None:
    routes = _routes()
    transport = HttpTransport(session=FakeSession(routes))
    assert await transport.check_client_key(ENDPOINT, "ck", 69) is True

    routes[("POST", "/api/app/request-transaction/check")] = _response(
        200, {"data": {"active": False}}
    )
    assert await transport.check_client_key(ENDPOINT, "ck", 69) is False

    routes[("POST", "/api/app/request-transaction/check")] = _response(500, "boom")
    with pytest.raises(TransportError, match="validation failed"):
        await transport.check_client_key(ENDPOINT, "ck", 69)


@pytest.mark.trio
async def test_check_client_key_payload() -> None:
    session = FakeSession(_routes())
    await HttpTransport(session=session).check_client_key(ENDPOINT, "ck_live", 12)
    assert session.calls[0][2]["json"] == {"clientKey": "ck_live", "functionId": 12}


@pytest.mark.trio
async def test_connection_error_becomes_transport_error() -> None:
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(TransportError, match="refused"):
        await HttpTransport(session=session).fetch_nonce(ENDPOINT, "0xabc")


@pytest.mark.trio
async def test_invalid_json_rejected() -> None:
    session = FakeSession(
        _routes() | {("GET", "/api/app/user/nonce"): _response(200, "<html>")}
    )
    with pytest.raises(TransportError, match="invalid JSON"):
        await HttpTransport(session=session).fetch_nonce(ENDPOINT, "0xabc")


@pytest.mark.trio
async def test_sign_in_over_http() -> None:
    session = FakeSession(_routes())
    config = ClientConfig("ck_test", ENDPOINT)

    result = await sign_in_with_wallet(config, Wallet(), HttpTransport(session=session))

    assert result.access_token == "jwt-abc"
    paths = [(method, url[len(ENDPOINT):]) for method, url, _ in session.calls]
    assert paths == [
        ("POST", "/api/app/request-transaction/check"),
        ("GET", "/api/app/user/nonce"),
        ("POST", "/api/auth/sign-in-with-crypto-wallet"),
        ("POST", "/api/app/request-transaction"),
    ]
    assert session.calls[2][2]["json"] == {
        "signature": "0x" + "11" * 65,
        "walletAddress": "0xabc",
    }
    assert session.calls[3][2]["json"]["status"] == "succeeded"


@pytest.mark.trio
async def test_sign_in_with_inactive_key_over_http() -> None:
    session = FakeSession(
        _routes()
        | {
            ("POST", "/api/app/request-transaction/check"): _response(
                200, {"data": {"active": False}}
            )
        }
    )
    with pytest.raises(ClientKeyInactive):
        await sign_in_with_wallet(
            ClientConfig("ck_test", ENDPOINT), Wallet(), HttpTransport(session=session)
        )
    assert len(session.calls) == 1


@pytest.mark.trio
async def test_audit_failure_does_not_fail_sign_in() -> None:
    session = FakeSession(
        _routes() | {("POST", "/api/app/request-transaction"): _response(503, "down")}
    )
    result = await sign_in_with_wallet(
        ClientConfig("ck_test", ENDPOINT), Wallet(), HttpTransport(session=session)
    )
    assert result.access_token == "jwt-abc"
