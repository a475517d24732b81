"""
Result types for proof generation.

This module provides:
1. Groth16Proof - the (a, b, c) proof triple in snarkjs layout
2. ProverResult - what a proving backend returns
3. ProofBundle - the packaged result with CBOR serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple

import cbor2

from .config import CURVE_NAME, PROOF_VERSION
from .exceptions import CryptographicError
from .merkle import TreeCheckpoint

# ============================================================================
# GROTH16 PROOF
# ============================================================================


def _as_str_tuple(values: Sequence[Any], label: str) -> Tuple[str, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise ValueError(f"{label} must be a sequence")
    return tuple(str(value) for value in values)


@dataclass(frozen=True)
class Groth16Proof:
    """
    Groth16 proof triple, coordinates as decimal strings (snarkjs layout).

    Attributes:
        pi_a: G1 point (projective, 3 coordinates)
        pi_b: G2 point (3 pairs of coordinates)
        pi_c: G1 point (projective, 3 coordinates)
    """

    pi_a: Tuple[str, ...]
    pi_b: Tuple[Tuple[str, ...], ...]
    pi_c: Tuple[str, ...]
    protocol: str = "groth16"
    curve: str = CURVE_NAME

    @classmethod
    def from_snarkjs(cls, data: Mapping[str, Any]) -> "Groth16Proof":
        """Build from snarkjs proof.json content."""
        if not isinstance(data, Mapping):
            raise ValueError("proof must be a mapping")
        try:
            pi_a = _as_str_tuple(data["pi_a"], "pi_a")
            pi_b = tuple(_as_str_tuple(pair, "pi_b[]") for pair in data["pi_b"])
            pi_c = _as_str_tuple(data["pi_c"], "pi_c")
        except KeyError as exc:
            raise ValueError(f"proof missing field {exc.args[0]!r}") from exc
        return cls(
            pi_a=pi_a,
            pi_b=pi_b,
            pi_c=pi_c,
            protocol=str(data.get("protocol", "groth16")),
            curve=str(data.get("curve", CURVE_NAME)),
        )

    def to_snarkjs(self) -> Dict[str, Any]:
        return {
            "pi_a": list(self.pi_a),
            "pi_b": [list(pair) for pair in self.pi_b],
            "pi_c": list(self.pi_c),
            "protocol": self.protocol,
            "curve": self.curve,
        }


@dataclass(frozen=True)
class ProverResult:
    proof: Groth16Proof
    public_signals: Tuple[int, ...]


# ============================================================================
# PROOF BUNDLE
# ============================================================================


@dataclass(frozen=True)
class ProofBundle:
    """
    Packaged output of generate_proof.

    Attributes:
        proof: Groth16 proof triple
        public_signals: Ordered public signals reported by the prover
        input_record: Full circuit input record (private and public signals)
        salt: Nullifier secret used
        nullifier: Public nullifier h(salt, root)
        root: Tree root after insertion
        circuit: Circuit the record was assembled for
        mode: Proof mode value ("KYC", "GTE", "LTE", "EQ")
        checkpoint: Tree checkpoint to persist after this insertion

    The bundle holds the salt and the private signals: only
    public_payload() is meant to leave the caller's process.
    """

    proof: Groth16Proof
    public_signals: Tuple[int, ...]
    input_record: Dict[str, Any]
    salt: int
    nullifier: int
    root: int
    circuit: str
    mode: str
    checkpoint: TreeCheckpoint = field(default_factory=TreeCheckpoint.empty)

    def public_payload(self) -> Dict[str, Any]:
        """What a verifier needs: proof and public signals."""
        return {
            "circuit": self.circuit,
            "proof": self.proof.to_snarkjs(),
            "publicSignals": [str(signal) for signal in self.public_signals],
        }

    def to_dict(self) -> dict:
        """JSON-compatible dictionary (field elements as decimal strings)."""
        return {
            "circuit": self.circuit,
            "mode": self.mode,
            "proof": self.proof.to_snarkjs(),
            "public_signals": [str(signal) for signal in self.public_signals],
            "input": self.input_record,
            "salt": str(self.salt),
            "nullifier": str(self.nullifier),
            "root": str(self.root),
            "checkpoint": self.checkpoint.to_dict(),
        }

    # ========================================================================
    # SERIALIZATION (CBOR)
    # ========================================================================

    def serialize(self) -> bytes:
        """
        Serialize bundle to bytes using CBOR.

        Raises:
            CryptographicError: If serialization fails
        """
        try:
            data = {"v": PROOF_VERSION}
            data.update(self.to_dict())
            return cbor2.dumps(data)
        except Exception as e:
            raise CryptographicError(f"Failed to serialize proof bundle: {e}")

    @classmethod
    def deserialize(cls, data: bytes) -> "ProofBundle":
        """
        Deserialize bundle from CBOR bytes.

        Raises:
            ValueError: If version is unsupported or fields are missing
            CryptographicError: If CBOR decoding fails
        """
        try:
            obj = cbor2.loads(data)
        except Exception as e:
            raise CryptographicError(f"Failed to deserialize proof bundle: {e}")

        if not isinstance(obj, dict):
            raise ValueError("Invalid bundle format: expected a map")

        version = obj.get("v", PROOF_VERSION)
        if version != PROOF_VERSION:
            raise ValueError(
                f"Unsupported bundle version: {version} (expected {PROOF_VERSION})"
            )

        required = ("circuit", "mode", "proof", "public_signals", "input", "salt",
                    "nullifier", "root")
        missing = [key for key in required if key not in obj]
        if missing:
            raise ValueError(f"Invalid bundle format: missing {', '.join(missing)}")

        checkpoint = obj.get("checkpoint")
        return cls(
            proof=Groth16Proof.from_snarkjs(obj["proof"]),
            public_signals=tuple(int(signal) for signal in obj["public_signals"]),
            input_record=dict(obj["input"]),
            salt=int(obj["salt"]),
            nullifier=int(obj["nullifier"]),
            root=int(obj["root"]),
            circuit=obj["circuit"],
            mode=obj["mode"],
            checkpoint=(
                TreeCheckpoint.from_dict(checkpoint)
                if checkpoint
                else TreeCheckpoint.empty()
            ),
        )
