"""Client error types."""

from ..zk.exceptions import ConfigurationError


class ClientError(Exception):
    """Base error for session / sign-in issues."""


class ClientKeyMissing(ClientError, ConfigurationError):
    """Raised when no client key has been configured."""


class ClientKeyInactive(ClientError):
    """Raised when the backend reports the client key as inactive."""


class SignInFailed(ClientError):
    """Raised when the sign-in exchange returns no access token."""


class TransportError(ClientError):
    """Raised when a backend request fails or returns an unusable response."""
