"""
Local Ed25519 signer.

Ed25519 signatures are deterministic, so the same seed reproduces the same
nullifier salt. For development and tests; production wallets sign through
their own provider.
"""

from __future__ import annotations

from typing import Union

from nacl.encoding import RawEncoder
from nacl.hash import blake2b
from nacl.signing import SigningKey

from ..zk.config import WALLET_ADDRESS_BYTES


class Ed25519Signer:
    """
    Example:
        >>> signer = Ed25519Signer(b"\\x01" * 32)
        >>> sig = signer.sign_message(b"hello")
        >>> assert len(sig) == 64
    """

    def __init__(self, seed: bytes) -> None:
        if not isinstance(seed, (bytes, bytearray)) or len(seed) != 32:
            raise ValueError("seed must be 32 bytes")
        self._key = SigningKey(bytes(seed))

    @classmethod
    def generate(cls) -> "Ed25519Signer":
        return cls(bytes(SigningKey.generate()))

    @classmethod
    def from_hex(cls, seed_hex: str) -> "Ed25519Signer":
        text = seed_hex[2:] if seed_hex[:2].lower() == "0x" else seed_hex
        return cls(bytes.fromhex(text))

    def get_address(self) -> str:
        """0x + 20-byte BLAKE2b digest of the verify key."""
        digest = blake2b(
            bytes(self._key.verify_key),
            digest_size=WALLET_ADDRESS_BYTES,
            encoder=RawEncoder,
        )
        return "0x" + digest.hex()

    def sign_message(self, message: Union[str, bytes]) -> bytes:
        if isinstance(message, str):
            message = message.encode("utf-8")
        return self._key.sign(message).signature

    def __call__(self, message: bytes) -> bytes:
        return self.sign_message(message)
