"""
HTTP transport for the hazbase backend.

Endpoints (relative to the configured API endpoint):
    GET  /api/app/user/nonce?walletAddress=...
    POST /api/auth/sign-in-with-crypto-wallet
    POST /api/app/request-transaction/check
    POST /api/app/request-transaction

Every response wraps its payload in a top-level "data" object. requests is
blocking, so each call runs in a trio worker thread.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict, Optional

import requests
import trio

from .errors import TransportError

logger = logging.getLogger(__name__)

NONCE_PATH = "/api/app/user/nonce"
SIGN_IN_PATH = "/api/auth/sign-in-with-crypto-wallet"
CHECK_KEY_PATH = "/api/app/request-transaction/check"
TRANSACTION_PATH = "/api/app/request-transaction"

DEFAULT_TIMEOUT = 30.0


class HttpTransport:
    """
    Transport over the hazbase REST API.

    Args:
        session: requests.Session to reuse (a new one by default)
        timeout: Per-request timeout in seconds

    Example:
        >>> transport = HttpTransport()
        >>> result = trio.run(sign_in_with_wallet, config, signer, transport)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    async def fetch_nonce(self, endpoint: str, wallet_address: str) -> str:
        response = await self._request(
            "GET",
            endpoint + NONCE_PATH,
            params={"walletAddress": wallet_address},
        )
        _raise_for_status(response, "Nonce request failed")
        nonce = _data(response).get("nonce")
        if not nonce:
            raise TransportError("Nonce request failed: response carries no nonce")
        return str(nonce)

    async def check_client_key(
        self, endpoint: str, client_key: str, function_id: int
    ) -> bool:
        response = await self._request(
            "POST",
            endpoint + CHECK_KEY_PATH,
            json={"clientKey": client_key, "functionId": function_id},
        )
        if not response.ok:
            raise TransportError("Client-key validation failed")
        return bool(_data(response).get("active"))

    async def sign_in(
        self, endpoint: str, wallet_address: str, signature: str
    ) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            endpoint + SIGN_IN_PATH,
            json={"signature": signature, "walletAddress": wallet_address},
        )
        _raise_for_status(response, "Sign-in failed")
        return _data(response)

    async def record_transaction(self, endpoint: str, payload: Dict[str, Any]) -> None:
        response = await self._request("POST", endpoint + TRANSACTION_PATH, json=payload)
        _raise_for_status(response, "Request transaction failed")

    async def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        call = partial(self.session.request, method, url, timeout=self.timeout, **kwargs)
        logger.debug("%s %s", method, url)
        try:
            return await trio.to_thread.run_sync(call)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc


def _raise_for_status(response: requests.Response, label: str) -> None:
    if not response.ok:
        raise TransportError(f"{label}: {response.text or response.reason}")


def _data(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise TransportError(f"invalid JSON from {response.url}") from exc
    data = body.get("data") if isinstance(body, dict) else None
    return data if isinstance(data, dict) else {}
