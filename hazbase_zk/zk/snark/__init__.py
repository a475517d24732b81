"""Circuit artifact resolution and the snarkjs prover."""
