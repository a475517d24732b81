from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping, Optional

from ..config import FIELD_MODULUS
from ..exceptions import WitnessGenerationFailed
from ..interfaces import ProvingBackend
from ..layout import INPUT_SIGNALS, MODE_FLAGS, ProofMode, public_signal_names
from ..snark.assets import CircuitArtifacts
from ..types import Groth16Proof, ProverResult


class MockProver(ProvingBackend):
    """
    Proving backend returning canned, deterministic outputs.

    Notes:
    - For tests and local development only; proofs do not verify anywhere.
    - Public signals are read from the record in circuit order, as a real
      circuit would expose them.
    - enforce_threshold=True mimics the threshold circuit rejecting a score
      that violates its relation.
    """

    _BACKEND_NAME = "MockProver"
    _BACKEND_VERSION = "0.1.0"

    def __init__(
        self,
        *,
        enforce_threshold: bool = False,
        fail_with: Optional[BaseException] = None,
    ) -> None:
        self.enforce_threshold = enforce_threshold
        self.fail_with = fail_with
        self.calls: list[tuple[CircuitArtifacts, dict]] = []

    @property
    def backend_name(self) -> str:
        return self._BACKEND_NAME

    @property
    def backend_version(self) -> str:
        return self._BACKEND_VERSION

    async def prove(
        self, artifacts: CircuitArtifacts, input_record: Mapping[str, Any]
    ) -> ProverResult:
        record = dict(input_record)
        self.calls.append((artifacts, record))
        if self.fail_with is not None:
            raise self.fail_with

        circuit = _match_circuit(record)
        if self.enforce_threshold and circuit == "threshold":
            _check_threshold(record)

        public_signals = tuple(
            int(record[name]) for name in public_signal_names(circuit)
        )
        return ProverResult(
            proof=_canned_proof(record), public_signals=public_signals
        )


def _match_circuit(record: Mapping[str, Any]) -> str:
    keys = tuple(record.keys())
    for circuit, layout in INPUT_SIGNALS.items():
        if keys == layout:
            return circuit
    raise WitnessGenerationFailed(
        f"input record keys {list(keys)} match no circuit layout"
    )


def _check_threshold(record: Mapping[str, Any]) -> None:
    score = int(record["score"])
    threshold = int(record["threshold"])
    flag = int(record["mode"])
    relations = {
        MODE_FLAGS[ProofMode.GTE]: score >= threshold,
        MODE_FLAGS[ProofMode.LTE]: score <= threshold,
        MODE_FLAGS[ProofMode.EQ]: score == threshold,
    }
    if not relations.get(flag, False):
        raise WitnessGenerationFailed(
            f"threshold constraint unsatisfied for mode flag {flag}"
        )


def _element(seed: bytes, label: str) -> str:
    digest = hashlib.sha256(seed + label.encode("utf-8")).digest()
    return str(int.from_bytes(digest, "big") % FIELD_MODULUS)


def _canned_proof(record: Mapping[str, Any]) -> Groth16Proof:
    seed = hashlib.sha256(
        json.dumps(record, sort_keys=True).encode("utf-8")
    ).digest()
    return Groth16Proof(
        pi_a=(_element(seed, "a0"), _element(seed, "a1"), "1"),
        pi_b=(
            (_element(seed, "b00"), _element(seed, "b01")),
            (_element(seed, "b10"), _element(seed, "b11")),
            ("1", "0"),
        ),
        pi_c=(_element(seed, "c0"), _element(seed, "c1"), "1"),
    )
