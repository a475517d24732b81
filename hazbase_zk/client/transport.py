"""Backend transport and signer interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Protocol, Union


class Transport(Protocol):
    """
    Backend endpoints used by the client layer.

    Implementations raise on transport or HTTP failures; the client layer
    does not retry.
    """

    async def fetch_nonce(self, endpoint: str, wallet_address: str) -> str:
        ...

    async def check_client_key(
        self, endpoint: str, client_key: str, function_id: int
    ) -> bool:
        ...

    async def sign_in(
        self, endpoint: str, wallet_address: str, signature: str
    ) -> Dict[str, Any]:
        ...

    async def record_transaction(self, endpoint: str, payload: Dict[str, Any]) -> None:
        ...


class Signer(Protocol):
    """Wallet signing capability (sync or async methods)."""

    def get_address(self) -> Union[str, Awaitable[str]]:
        ...

    def sign_message(
        self, message: Union[str, bytes]
    ) -> Union[bytes, str, Awaitable[Union[bytes, str]]]:
        ...


@dataclass(frozen=True)
class SignInResult:
    wallet_address: str
    access_token: str
