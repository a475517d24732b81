"""
Commitment and tree leaf construction.

All builders are pure functions of their inputs. The nesting order of each
hash chain is a protocol constant: circuits recompute the same chain from
their private witnesses, so it must match bit-for-bit.

Natural person:
    h(h(h(h(gov_id_hash, name_hash), dob_ymd), country), salt)

Corporate:
    h(h(h(h(h(entity_id_hash, name_hash), incorporation_ymd), country), role), salt)

Tree leaf:
    h(commitment, wallet_to_field(wallet_address))
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Optional, Union

from .config import MAX_COUNTRY_CODE, WALLET_ADDRESS_BYTES
from .exceptions import InvalidFieldElement, InvalidWalletAddress
from .field import FieldAdapter, get_default_adapter

WalletLike = Union[str, bytes, bytearray, int]


@dataclass(frozen=True)
class NaturalKYC:
    """KYC attributes of a natural person (already hashed to field elements)."""

    gov_id_hash: int
    name_hash: int
    dob_ymd: int
    country: int
    salt: int

    @classmethod
    def from_raw(
        cls,
        gov_id: str,
        name: str,
        dob_ymd: int,
        country: int,
        salt: int,
        *,
        adapter: Optional[FieldAdapter] = None,
    ) -> "NaturalKYC":
        field = adapter or get_default_adapter()
        return cls(
            gov_id_hash=field.encode_text(gov_id),
            name_hash=field.encode_text(name),
            dob_ymd=dob_ymd,
            country=country,
            salt=salt,
        )


@dataclass(frozen=True)
class CorporateKYC:
    """KYC attributes of a legal entity. A missing role encodes as 0."""

    entity_id_hash: int
    name_hash: int
    incorporation_ymd: int
    country: int
    salt: int
    role: Optional[int] = None

    @classmethod
    def from_raw(
        cls,
        entity_id: str,
        name: str,
        incorporation_ymd: int,
        country: int,
        salt: int,
        role: Optional[str] = None,
        *,
        adapter: Optional[FieldAdapter] = None,
    ) -> "CorporateKYC":
        field = adapter or get_default_adapter()
        return cls(
            entity_id_hash=field.encode_text(entity_id),
            name_hash=field.encode_text(name),
            incorporation_ymd=incorporation_ymd,
            country=country,
            salt=salt,
            role=field.encode_text(role) if role is not None else None,
        )

    @property
    def role_value(self) -> int:
        return 0 if self.role is None else self.role


KYCRecord = Union[NaturalKYC, CorporateKYC]


# ============================================================================
# ATTRIBUTE VALIDATION
# ============================================================================


def validate_ymd(value, label: str) -> int:
    """Check a YYYYMMDD integer names a real calendar date."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldElement(f"{label} must be an int YYYYMMDD", value=value)
    year, rest = divmod(value, 10000)
    month, day = divmod(rest, 100)
    try:
        datetime.date(year, month, day)
    except ValueError as exc:
        raise InvalidFieldElement(
            f"{label}={value} is not a valid YYYYMMDD date", value=value
        ) from exc
    return value


def validate_country(value, label: str = "country") -> int:
    """ISO-3166 numeric country code."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldElement(f"{label} must be an int", value=value)
    if not 0 <= value <= MAX_COUNTRY_CODE:
        raise InvalidFieldElement(
            f"{label}={value} outside [0, {MAX_COUNTRY_CODE}]",
            value=value,
            bound=MAX_COUNTRY_CODE,
        )
    return value


# ============================================================================
# WALLET ENCODING
# ============================================================================


def wallet_to_field(address: WalletLike) -> int:
    """
    Canonical wallet address encoding.

    The address is the big-endian integer of its raw bytes, at most 20 bytes
    wide. Hex strings are case-insensitive and may omit leading zeros, so
    "0xABC", "0xabc" and "0x0abc" all encode to 0xABC.

    Raises:
        InvalidWalletAddress: If the address has no canonical encoding
    """
    bound = 1 << (WALLET_ADDRESS_BYTES * 8)

    if isinstance(address, bool):
        raise InvalidWalletAddress("wallet address must not be bool", value=address)

    if isinstance(address, int):
        value = address
    elif isinstance(address, (bytes, bytearray)):
        if not address or len(address) > WALLET_ADDRESS_BYTES:
            raise InvalidWalletAddress(
                f"wallet address must be 1..{WALLET_ADDRESS_BYTES} bytes, "
                f"got {len(address)}",
                value=bytes(address),
                bound=WALLET_ADDRESS_BYTES,
            )
        value = int.from_bytes(address, "big")
    elif isinstance(address, str):
        text = address.strip()
        if text[:2].lower() != "0x" or len(text) == 2:
            raise InvalidWalletAddress(
                f"wallet address must be 0x-prefixed hex: {address!r}", value=address
            )
        try:
            value = int(text[2:], 16)
        except ValueError as exc:
            raise InvalidWalletAddress(
                f"wallet address is not hex: {address!r}", value=address
            ) from exc
    else:
        raise InvalidWalletAddress(
            f"unsupported wallet address type {type(address).__name__}",
            value=address,
        )

    if value < 0 or value >= bound:
        raise InvalidWalletAddress(
            f"wallet address {address!r} exceeds {WALLET_ADDRESS_BYTES} bytes",
            value=address,
            bound=bound,
        )
    return value


def normalize_wallet(address: WalletLike) -> str:
    """Checksum-free canonical text form: 0x + 40 lowercase hex digits."""
    return "0x" + wallet_to_field(address).to_bytes(WALLET_ADDRESS_BYTES, "big").hex()


# ============================================================================
# LEAF BUILDERS
# ============================================================================


def build_kyc_leaf(kyc: KYCRecord, *, adapter: Optional[FieldAdapter] = None) -> int:
    """
    Commitment leaf over KYC attributes.

    Raises:
        InvalidFieldElement: If any attribute is out of range
        TypeError: If kyc is not a KYC record
    """
    field = adapter or get_default_adapter()

    if isinstance(kyc, NaturalKYC):
        validate_ymd(kyc.dob_ymd, "dob_ymd")
        validate_country(kyc.country)
        node = field.combine2(kyc.gov_id_hash, kyc.name_hash)
        node = field.combine2(node, kyc.dob_ymd)
        node = field.combine2(node, kyc.country)
        return field.combine2(node, kyc.salt)

    if isinstance(kyc, CorporateKYC):
        validate_ymd(kyc.incorporation_ymd, "incorporation_ymd")
        validate_country(kyc.country)
        node = field.combine2(kyc.entity_id_hash, kyc.name_hash)
        node = field.combine2(node, kyc.incorporation_ymd)
        node = field.combine2(node, kyc.country)
        node = field.combine2(node, kyc.role_value)
        return field.combine2(node, kyc.salt)

    raise TypeError(
        f"kyc must be NaturalKYC or CorporateKYC, got {type(kyc).__name__}"
    )


def build_threshold_leaf(
    score: int, salt: int, *, adapter: Optional[FieldAdapter] = None
) -> int:
    """Commitment leaf over a score: h(score, salt)."""
    field = adapter or get_default_adapter()
    return field.combine2(score, salt)


def build_tree_leaf(
    commitment: int,
    wallet_address: WalletLike,
    *,
    adapter: Optional[FieldAdapter] = None,
) -> int:
    """Bind a commitment leaf to a wallet; this is what enters the tree."""
    field = adapter or get_default_adapter()
    return field.combine2(commitment, wallet_to_field(wallet_address))
