"""
Client configuration with an explicit lifecycle.

One ClientConfig per application context replaces process-wide key state:
init() sets the key and resets validation, the first successful backend check
marks it validated, invalidate() forces the next call to re-check.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml

from .errors import ClientKeyMissing

DEFAULT_API_ENDPOINT = "http://127.0.0.1:8080"

CLIENT_KEY_ENV = "HAZBASE_CLIENT_KEY"
API_ENDPOINT_ENV = "HAZBASE_API_ENDPOINT"


class ClientConfig:
    """
    Client key and API endpoint for one application context.

    Example:
        >>> config = ClientConfig()
        >>> config.init("ck_live_123")
        >>> config.is_validated
        False
    """

    def __init__(
        self, client_key: Optional[str] = None, api_endpoint: Optional[str] = None
    ) -> None:
        self._client_key: Optional[str] = None
        self._api_endpoint: str = DEFAULT_API_ENDPOINT
        self._validated = False
        if client_key is not None:
            self.init(client_key, api_endpoint)
        elif api_endpoint:
            self._api_endpoint = api_endpoint

    def init(self, client_key: str, api_endpoint: Optional[str] = None) -> None:
        """Set the client key (and endpoint); resets validation."""
        if not isinstance(client_key, str) or not client_key:
            raise ValueError("client_key must be a non-empty str")
        self._client_key = client_key
        self._validated = False
        self.set_api_endpoint(api_endpoint)

    def set_api_endpoint(self, uri: Optional[str] = None) -> None:
        self.require_client_key()
        self._api_endpoint = (uri or DEFAULT_API_ENDPOINT).rstrip("/")

    @property
    def api_endpoint(self) -> str:
        return self._api_endpoint

    @property
    def client_key(self) -> Optional[str]:
        return self._client_key

    def require_client_key(self) -> str:
        """
        Raises:
            ClientKeyMissing: If init() has not been called
        """
        if not self._client_key:
            raise ClientKeyMissing("Client key not set. Call init() first.")
        return self._client_key

    @property
    def is_validated(self) -> bool:
        return self._validated

    def mark_validated(self) -> None:
        self.require_client_key()
        self._validated = True

    def invalidate(self) -> None:
        self._validated = False

    # ========================================================================
    # LOADERS
    # ========================================================================

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build from HAZBASE_CLIENT_KEY / HAZBASE_API_ENDPOINT."""
        key = os.getenv(CLIENT_KEY_ENV) or None
        endpoint = os.getenv(API_ENDPOINT_ENV) or None
        return cls(client_key=key, api_endpoint=endpoint)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ClientConfig":
        """
        Build from a YAML file with client_key and optional api_endpoint.

        Raises:
            ValueError: If the file does not hold a mapping
        """
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at top level")
        return cls(
            client_key=data.get("client_key"),
            api_endpoint=data.get("api_endpoint"),
        )

    def __repr__(self) -> str:
        key = "set" if self._client_key else "unset"
        return (
            f"ClientConfig(client_key={key}, api_endpoint={self._api_endpoint!r}, "
            f"validated={self._validated})"
        )
