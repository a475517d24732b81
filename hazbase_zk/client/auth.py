"""Wallet sign-in and request-transaction records."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from ..zk.exceptions import SigningFailed
from .config import ClientConfig
from .errors import ClientKeyInactive, SignInFailed
from .transport import SignInResult, Signer, Transport

logger = logging.getLogger(__name__)

SIGN_IN_FUNCTION_ID = 69


def default_sign_in_message(nonce: str) -> str:
    return f"Please sign to authorize user with nonce: {nonce}"


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


async def ensure_client_key_active(
    config: ClientConfig, transport: Transport, function_id: int
) -> str:
    """
    Check the client key with the backend once; cached until invalidate().

    Raises:
        ClientKeyMissing: If the config has no key
        ClientKeyInactive: If the backend reports the key inactive
    """
    key = config.require_client_key()
    if config.is_validated:
        return key

    active = await transport.check_client_key(config.api_endpoint, key, function_id)
    if not active:
        raise ClientKeyInactive("Client key is inactive")

    config.mark_validated()
    logger.debug("client key validated for function %d", function_id)
    return key


async def sign_in_with_wallet(
    config: ClientConfig,
    signer: Signer,
    transport: Transport,
    build_message: Optional[Callable[[str], str]] = None,
) -> SignInResult:
    """
    Sign in with a wallet: fetch nonce, sign it, exchange for an access token.

    Raises:
        ClientKeyInactive: If the client key is inactive
        SigningFailed: If the signer raises or returns a malformed signature
        SignInFailed: If the response carries no access token
    """
    await ensure_client_key_active(config, transport, SIGN_IN_FUNCTION_ID)

    wallet_address = await _resolve(signer.get_address())
    nonce = await transport.fetch_nonce(config.api_endpoint, wallet_address)
    message = (build_message or default_sign_in_message)(nonce)

    try:
        signature = await _resolve(signer.sign_message(message))
    except Exception as exc:
        raise SigningFailed(f"wallet signing failed: {exc}") from exc
    if isinstance(signature, (bytes, bytearray)):
        signature = "0x" + bytes(signature).hex()
    if not isinstance(signature, str) or not signature:
        raise SigningFailed("wallet returned an empty or non-text signature")

    data = await transport.sign_in(config.api_endpoint, wallet_address, signature)
    jwt = (data or {}).get("jwt") or {}
    access_token = jwt.get("accessToken") if isinstance(jwt, dict) else None
    if not access_token:
        raise SignInFailed("Missing accessToken in response")

    await record_request_transaction(
        config,
        transport,
        function_id=SIGN_IN_FUNCTION_ID,
        status="succeeded",
        wallet_address=wallet_address,
    )
    logger.info("signed in wallet %s", wallet_address)
    return SignInResult(wallet_address=wallet_address, access_token=access_token)


async def record_request_transaction(
    config: ClientConfig,
    transport: Transport,
    *,
    function_id: int,
    status: str,
    wallet_address: Optional[str] = None,
    transaction_hash: Optional[str] = None,
    api_requests: Optional[List[Any]] = None,
    reason: Optional[str] = None,
    is_count: bool = True,
) -> bool:
    """
    Best-effort audit record of an SDK action.

    Transport failures are logged and reported through the return value so
    an audit outage never fails the user-facing action.

    Returns:
        True if the record was sent, False if skipped or the transport failed

    Raises:
        ValueError: If function_id or status is missing
    """
    if not is_count:
        return False
    if isinstance(function_id, bool) or not isinstance(function_id, int):
        raise ValueError("function ID not found.")
    if not status:
        raise ValueError("status is undefined")

    payload: Dict[str, Any] = {"functionId": function_id, "status": status}
    if wallet_address:
        payload["walletAddress"] = wallet_address
    if transaction_hash:
        payload["transactionHash"] = transaction_hash
    if api_requests:
        payload["apiRequests"] = list(api_requests)
    if reason:
        payload["reason"] = reason
    payload["clientKey"] = config.require_client_key()

    try:
        await transport.record_transaction(config.api_endpoint, payload)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "request transaction for function %d not recorded: %s", function_id, exc
        )
        return False
    return True
