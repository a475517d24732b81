"""Public API for the commitment / Merkle / proof core."""
from __future__ import annotations

from importlib import import_module

from .exceptions import (
    ConfigurationError,
    CryptographicError,
    IndexOutOfRange,
    InvalidCheckpoint,
    InvalidFieldElement,
    InvalidWalletAddress,
    MissingCircuitArtifact,
    PrivacyProtocolError,
    ProofGenerationError,
    SigningFailed,
    ValueOutOfRange,
    WitnessGenerationFailed,
)
from .factory import get_prover, get_prover_type, set_prover_type
from .field import FieldAdapter, get_default_adapter, sha256_field_hash
from .interfaces import ProvingBackend
from .layout import ProofMode
from .leaves import (
    CorporateKYC,
    NaturalKYC,
    build_kyc_leaf,
    build_threshold_leaf,
    build_tree_leaf,
    wallet_to_field,
)
from .merkle import IncrementalMerkleTree, InsertResult, TreeCheckpoint, verify_path
from .nullifier import derive_public_nullifier, derive_salt
from .orchestrator import ProofOptions, generate_proof, verify_bundle_signals
from .snark.assets import CircuitArtifacts, resolve_circuit_artifacts
from .threshold import ThresholdEncoding, encode_threshold
from .types import Groth16Proof, ProofBundle, ProverResult

__all__ = [
    "FieldAdapter",
    "get_default_adapter",
    "sha256_field_hash",
    "derive_salt",
    "derive_public_nullifier",
    "NaturalKYC",
    "CorporateKYC",
    "build_kyc_leaf",
    "build_threshold_leaf",
    "build_tree_leaf",
    "wallet_to_field",
    "IncrementalMerkleTree",
    "InsertResult",
    "TreeCheckpoint",
    "verify_path",
    "ThresholdEncoding",
    "encode_threshold",
    "ProofMode",
    "ProofOptions",
    "generate_proof",
    "verify_bundle_signals",
    "Groth16Proof",
    "ProverResult",
    "ProofBundle",
    "CircuitArtifacts",
    "resolve_circuit_artifacts",
    "ProvingBackend",
    "get_prover",
    "get_prover_type",
    "set_prover_type",
    "MockProver",
    "SnarkjsProver",
    "PrivacyProtocolError",
    "ProofGenerationError",
    "ConfigurationError",
    "CryptographicError",
    "InvalidFieldElement",
    "InvalidWalletAddress",
    "SigningFailed",
    "IndexOutOfRange",
    "InvalidCheckpoint",
    "ValueOutOfRange",
    "MissingCircuitArtifact",
    "WitnessGenerationFailed",
]

_LAZY_EXPORTS = {
    "MockProver": "adapters.mock_adapter",
    "SnarkjsProver": "snark.prover",
}


def __getattr__(name: str):
    if name in _LAZY_EXPORTS:
        module = import_module(f"{__name__}.{_LAZY_EXPORTS[name]}")
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
