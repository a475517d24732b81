"""
hazbase ZK SDK.

Wallet sign-in plus zero-knowledge KYC / threshold proofs: nullifier
derivation, commitment leaves, an incremental Merkle tree and circuit input
assembly around an external Groth16 prover.
"""

__version__ = "0.1.0"
