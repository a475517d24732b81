"""Session layer: client key lifecycle and wallet sign-in."""

from .auth import (
    SIGN_IN_FUNCTION_ID,
    default_sign_in_message,
    ensure_client_key_active,
    record_request_transaction,
    sign_in_with_wallet,
)
from .config import DEFAULT_API_ENDPOINT, ClientConfig
from .errors import (
    ClientError,
    ClientKeyInactive,
    ClientKeyMissing,
    SignInFailed,
    TransportError,
)
from .http_transport import HttpTransport
from .signers import Ed25519Signer
from .transport import SignInResult, Signer, Transport

__all__ = [
    "ClientConfig",
    "DEFAULT_API_ENDPOINT",
    "ClientError",
    "ClientKeyInactive",
    "ClientKeyMissing",
    "SignInFailed",
    "TransportError",
    "HttpTransport",
    "Ed25519Signer",
    "SignInResult",
    "Signer",
    "Transport",
    "SIGN_IN_FUNCTION_ID",
    "default_sign_in_message",
    "ensure_client_key_active",
    "record_request_transaction",
    "sign_in_with_wallet",
]
