"""
Proving backend interface.

A backend turns a circuit input record into a Groth16 proof. The core never
computes proofs itself, so the orchestrator can run against a canned backend
in tests and against snarkjs in deployments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .snark.assets import CircuitArtifacts
from .types import ProverResult


class ProvingBackend(ABC):
    """Abstract proving capability."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Human-readable backend name."""

    @property
    @abstractmethod
    def backend_version(self) -> str:
        """Backend implementation version."""

    @abstractmethod
    async def prove(
        self, artifacts: CircuitArtifacts, input_record: Mapping[str, Any]
    ) -> ProverResult:
        """
        Generate a proof for input_record.

        Raises:
            MissingCircuitArtifact: If artifacts or the prover are unavailable
            WitnessGenerationFailed: If the record violates circuit constraints
        """
