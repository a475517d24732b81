"""
Nullifier secret derivation.

The wallet signs a fixed, domain-separated message; the signature is read as
an integer and reduced into the field. The same wallet therefore reproduces
the same salt in every session without the salt ever being stored.
"""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from .config import DOMAIN_MESSAGE, MIN_SIGNATURE_BYTES
from .exceptions import SigningFailed
from .field import FieldAdapter, get_default_adapter

logger = logging.getLogger(__name__)

SignatureLike = Union[bytes, bytearray, str]
SignFn = Callable[[bytes], Union[SignatureLike, Awaitable[SignatureLike]]]


def build_domain_message(
    domain_message: str = DOMAIN_MESSAGE, extra: Optional[str] = None
) -> bytes:
    """Message handed to the signer: domain literal, then optional context."""
    if not isinstance(domain_message, str) or not domain_message:
        raise ValueError("domain_message must be a non-empty str")
    if extra is None or extra == "":
        return domain_message.encode("utf-8")
    if not isinstance(extra, str):
        raise TypeError("extra must be str")
    return f"{domain_message}\n{extra}".encode("utf-8")


def signature_to_bytes(signature) -> bytes:
    """
    Normalize a signer result to raw bytes.

    Accepts bytes or a hex string (with or without 0x, as returned by
    EIP-191 wallets).

    Raises:
        SigningFailed: If the result is malformed
    """
    if isinstance(signature, (bytes, bytearray)):
        raw = bytes(signature)
    elif isinstance(signature, str):
        text = signature[2:] if signature[:2].lower() == "0x" else signature
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise SigningFailed(f"signature is not valid hex: {signature!r}") from exc
    else:
        raise SigningFailed(
            f"signer returned {type(signature).__name__}, expected bytes or hex str"
        )

    if len(raw) < MIN_SIGNATURE_BYTES:
        raise SigningFailed(
            f"signature too short: {len(raw)} bytes "
            f"(expected >= {MIN_SIGNATURE_BYTES})"
        )
    return raw


async def derive_salt(
    sign_fn: SignFn,
    domain_message: str = DOMAIN_MESSAGE,
    extra: Optional[str] = None,
    *,
    adapter: Optional[FieldAdapter] = None,
) -> int:
    """
    Derive the user's nullifier secret from a wallet signature.

    Args:
        sign_fn: Signing capability, sync or async, message -> signature
        domain_message: Protocol/version literal to sign
        extra: Optional caller context appended to the message
        adapter: Field adapter (defaults to the shared one)

    Returns:
        Salt as a field element

    Raises:
        SigningFailed: If the signer raises or returns a malformed signature
    """
    field = adapter or get_default_adapter()
    message = build_domain_message(domain_message, extra)

    try:
        result = sign_fn(message)
        if inspect.isawaitable(result):
            result = await result
    except SigningFailed:
        raise
    except Exception as exc:
        raise SigningFailed(f"signing capability failed: {exc}") from exc

    raw = signature_to_bytes(result)
    salt = field.reduce(int.from_bytes(raw, "big"))
    logger.debug("derived nullifier salt from %d-byte signature", len(raw))
    return salt


def derive_public_nullifier(
    salt: int, root: int, *, adapter: Optional[FieldAdapter] = None
) -> int:
    """Public nullifier binding a salt to a specific tree root."""
    field = adapter or get_default_adapter()
    return field.combine2(salt, root)
