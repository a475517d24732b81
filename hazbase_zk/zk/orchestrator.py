"""
Proof orchestration.

Assembles the circuit input record from a KYC record or a score, inserts the
bound tree leaf against the caller's checkpoint, derives the public nullifier
and hands the record to a proving backend. Given identical inputs the record
is bit-identical; only the proof bytes may differ between runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .config import DEFAULT_TREE_DEPTH
from .exceptions import MissingCircuitArtifact
from .factory import get_prover
from .field import FieldAdapter, get_default_adapter
from .interfaces import ProvingBackend
from .layout import (
    CIRCUIT_KYC_CORPORATE,
    CIRCUIT_KYC_NATURAL,
    CIRCUIT_THRESHOLD,
    ProofMode,
    input_signal_names,
    public_signal_names,
)
from .leaves import (
    CorporateKYC,
    KYCRecord,
    NaturalKYC,
    WalletLike,
    build_kyc_leaf,
    build_tree_leaf,
    wallet_to_field,
)
from .merkle import IncrementalMerkleTree, InsertResult, TreeCheckpoint
from .nullifier import derive_public_nullifier
from .snark.assets import CircuitArtifacts, resolve_circuit_artifacts
from .threshold import check_public_value, encode_threshold
from .types import ProofBundle

logger = logging.getLogger(__name__)

Subject = Union[NaturalKYC, CorporateKYC, int]


@dataclass(frozen=True)
class ProofOptions:
    """
    Per-call proof parameters.

    Tree position comes either from checkpoint or from (current_root,
    next_index, depth). In threshold modes, threshold is required; score and
    salt are taken from the options when the subject does not carry them.
    """

    mode: Union[ProofMode, str] = ProofMode.KYC
    checkpoint: Optional[TreeCheckpoint] = None
    current_root: Optional[int] = None
    next_index: int = 0
    depth: int = DEFAULT_TREE_DEPTH
    threshold: Optional[int] = None
    score: Optional[int] = None
    salt: Optional[int] = None
    artifacts: Optional[CircuitArtifacts] = None
    artifacts_dir: Optional[Union[str, Path]] = None

    def resolve_checkpoint(self) -> TreeCheckpoint:
        if self.checkpoint is not None:
            return self.checkpoint
        return TreeCheckpoint(
            root=self.current_root, next_index=self.next_index, depth=self.depth
        )


# ============================================================================
# COMMITMENT
# ============================================================================


def _kyc_private_signals(kyc: KYCRecord) -> Tuple[str, Dict[str, int]]:
    if isinstance(kyc, NaturalKYC):
        return CIRCUIT_KYC_NATURAL, {
            "govIdHash": kyc.gov_id_hash,
            "nameHash": kyc.name_hash,
            "dobYmd": kyc.dob_ymd,
            "country": kyc.country,
            "salt": kyc.salt,
        }
    return CIRCUIT_KYC_CORPORATE, {
        "entityIdHash": kyc.entity_id_hash,
        "nameHash": kyc.name_hash,
        "incorporationYmd": kyc.incorporation_ymd,
        "country": kyc.country,
        "role": kyc.role_value,
        "salt": kyc.salt,
    }


def build_commitment(
    subject: Subject,
    mode: ProofMode,
    options: ProofOptions,
    field: FieldAdapter,
) -> Tuple[str, int, int, Dict[str, int]]:
    """
    Resolve circuit, commitment leaf, salt and private signals for subject.

    Raises:
        TypeError: If subject does not fit the mode
        ValueError: If a required threshold, score or salt is missing
        ValueOutOfRange: If score or threshold exceed 32 bits
    """
    is_kyc = isinstance(subject, (NaturalKYC, CorporateKYC))

    if not mode.is_threshold:
        if not is_kyc:
            raise TypeError(
                f"KYC mode needs NaturalKYC or CorporateKYC, got {type(subject).__name__}"
            )
        circuit, private = _kyc_private_signals(subject)
        return circuit, build_kyc_leaf(subject, adapter=field), subject.salt, private

    if is_kyc:
        score, salt = options.score, subject.salt
    elif isinstance(subject, int) and not isinstance(subject, bool):
        score, salt = subject, options.salt
    else:
        raise TypeError(
            f"threshold mode needs an int score or KYC record, got {type(subject).__name__}"
        )
    if score is None:
        raise ValueError(f"{mode.value} mode requires a score")
    if salt is None:
        raise ValueError(f"{mode.value} mode requires a salt")

    encoding = encode_threshold(score, field.check(salt, "salt"), adapter=field)
    return CIRCUIT_THRESHOLD, encoding.full_leaf, salt, {
        "score": encoding.public_value,
        "salt": salt,
    }


# ============================================================================
# INPUT RECORD
# ============================================================================


def assemble_input_record(
    circuit: str,
    private_signals: Dict[str, int],
    wallet: int,
    inserted: InsertResult,
    nullifier: int,
    mode: ProofMode,
    threshold: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the circuit input record in the circuit's exact signal order.

    Field elements are rendered as decimal strings, the snarkjs input format.
    """
    values: Dict[str, Any] = {name: str(value) for name, value in private_signals.items()}
    values["wallet"] = str(wallet)
    values["pathElements"] = [str(node) for node in inserted.path_elements]
    values["pathIndices"] = [str(bit) for bit in inserted.path_indices]
    values["root"] = str(inserted.new_root)
    values["nullifier"] = str(nullifier)
    values["mode"] = str(mode.flag)
    if threshold is not None:
        values["threshold"] = str(threshold)

    layout = input_signal_names(circuit)
    missing = [name for name in layout if name not in values]
    if missing:
        raise ValueError(f"{circuit} record missing signals: {', '.join(missing)}")
    return {name: values[name] for name in layout}


# ============================================================================
# ORCHESTRATION
# ============================================================================


def _default_backend() -> ProvingBackend:
    try:
        return get_prover()
    except (ValueError, ImportError, TypeError) as exc:
        raise MissingCircuitArtifact(f"cannot resolve proving backend: {exc}") from exc


async def generate_proof(
    subject: Subject,
    wallet_address: WalletLike,
    options: Optional[ProofOptions] = None,
    *,
    prover: Optional[ProvingBackend] = None,
    adapter: Optional[FieldAdapter] = None,
) -> ProofBundle:
    """
    Generate a KYC or threshold proof for a wallet.

    Args:
        subject: NaturalKYC / CorporateKYC, or an int score in threshold modes
        wallet_address: Wallet the commitment is bound to
        options: Mode, tree position, threshold, artifacts
        prover: Proving backend (defaults to the feature-flag selection)
        adapter: Field adapter (defaults to the shared one)

    Returns:
        ProofBundle with proof, public signals, input record, salt, nullifier

    Raises:
        MissingCircuitArtifact: If artifacts or the prover cannot be resolved
        WitnessGenerationFailed: If the record violates circuit constraints
        IndexOutOfRange / InvalidCheckpoint: For an invalid tree position
        InvalidWalletAddress: If the wallet has no canonical encoding
    """
    options = options or ProofOptions()
    field = adapter or get_default_adapter()
    mode = ProofMode.parse(options.mode)

    threshold = None
    if mode.is_threshold:
        if options.threshold is None:
            raise ValueError(f"{mode.value} mode requires a threshold")
        threshold = check_public_value(options.threshold)

    circuit, commitment, salt, private_signals = build_commitment(
        subject, mode, options, field
    )
    wallet = wallet_to_field(wallet_address)
    tree_leaf = build_tree_leaf(commitment, wallet, adapter=field)

    checkpoint = options.resolve_checkpoint()
    tree = IncrementalMerkleTree(checkpoint.depth, adapter=field)
    inserted = tree.advance(checkpoint, tree_leaf)
    nullifier = derive_public_nullifier(salt, inserted.new_root, adapter=field)

    record = assemble_input_record(
        circuit, private_signals, wallet, inserted, nullifier, mode, threshold
    )

    artifacts = options.artifacts or resolve_circuit_artifacts(
        circuit, options.artifacts_dir, depth=checkpoint.depth
    )
    backend = prover or _default_backend()

    logger.info(
        "generating %s proof (mode %s) at leaf index %d with %s %s",
        circuit,
        mode.value,
        inserted.index,
        backend.backend_name,
        backend.backend_version,
    )
    result = await backend.prove(artifacts, record)
    logger.info("proof generated for %s, %d public signals",
                circuit, len(result.public_signals))

    return ProofBundle(
        proof=result.proof,
        public_signals=tuple(result.public_signals),
        input_record=record,
        salt=salt,
        nullifier=nullifier,
        root=inserted.new_root,
        circuit=circuit,
        mode=mode.value,
        checkpoint=inserted.checkpoint,
    )


def verify_bundle_signals(bundle: ProofBundle) -> bool:
    """Check the prover's public signals match the record's public entries."""
    expected = tuple(
        int(bundle.input_record[name]) for name in public_signal_names(bundle.circuit)
    )
    return tuple(bundle.public_signals) == expected
