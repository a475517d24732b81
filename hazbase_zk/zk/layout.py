"""
Circuit input layouts.

The key set and order of each record is a protocol contract with the circuit
definitions: private signals first, public signals last, public signals in
the order the circuit exposes them.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

CIRCUIT_KYC_NATURAL = "kyc_natural"
CIRCUIT_KYC_CORPORATE = "kyc_corporate"
CIRCUIT_THRESHOLD = "threshold"

CIRCUITS = frozenset({CIRCUIT_KYC_NATURAL, CIRCUIT_KYC_CORPORATE, CIRCUIT_THRESHOLD})


class ProofMode(Enum):
    """
    Proof modes.

    - KYC: attest membership of a KYC commitment
    - GTE / LTE / EQ: attest score >= / <= / == threshold
    """

    KYC = "KYC"
    GTE = "GTE"
    LTE = "LTE"
    EQ = "EQ"

    @classmethod
    def parse(cls, value) -> "ProofMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        valid = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Invalid proof mode: {value!r}. Valid options: {valid}")

    @property
    def flag(self) -> int:
        return MODE_FLAGS[self]

    @property
    def is_threshold(self) -> bool:
        return self is not ProofMode.KYC


MODE_FLAGS: Dict[ProofMode, int] = {
    ProofMode.KYC: 0,
    ProofMode.GTE: 1,
    ProofMode.LTE: 2,
    ProofMode.EQ: 3,
}

INPUT_SIGNALS: Dict[str, Tuple[str, ...]] = {
    CIRCUIT_KYC_NATURAL: (
        "govIdHash",
        "nameHash",
        "dobYmd",
        "country",
        "salt",
        "wallet",
        "pathElements",
        "pathIndices",
        "root",
        "nullifier",
        "mode",
    ),
    CIRCUIT_KYC_CORPORATE: (
        "entityIdHash",
        "nameHash",
        "incorporationYmd",
        "country",
        "role",
        "salt",
        "wallet",
        "pathElements",
        "pathIndices",
        "root",
        "nullifier",
        "mode",
    ),
    CIRCUIT_THRESHOLD: (
        "score",
        "salt",
        "wallet",
        "pathElements",
        "pathIndices",
        "root",
        "nullifier",
        "mode",
        "threshold",
    ),
}

PUBLIC_SIGNALS: Dict[str, Tuple[str, ...]] = {
    CIRCUIT_KYC_NATURAL: ("root", "nullifier", "mode"),
    CIRCUIT_KYC_CORPORATE: ("root", "nullifier", "mode"),
    CIRCUIT_THRESHOLD: ("root", "nullifier", "mode", "threshold"),
}


def public_signal_names(circuit: str) -> Tuple[str, ...]:
    try:
        return PUBLIC_SIGNALS[circuit]
    except KeyError:
        raise ValueError(f"unknown circuit: {circuit!r}") from None


def input_signal_names(circuit: str) -> Tuple[str, ...]:
    try:
        return INPUT_SIGNALS[circuit]
    except KeyError:
        raise ValueError(f"unknown circuit: {circuit!r}") from None
