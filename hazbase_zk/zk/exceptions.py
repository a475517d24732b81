"""
Custom exceptions for the proof core.

Every error is raised synchronously where it is detected and carries the
offending value and the expected bound. None of them is retryable.
"""


class PrivacyProtocolError(Exception):
    """Base exception for proof core errors."""

    pass


class ProofGenerationError(PrivacyProtocolError):
    """Error during proof generation."""

    pass


class ConfigurationError(PrivacyProtocolError):
    """Configuration error."""

    pass


class CryptographicError(PrivacyProtocolError):
    """Cryptographic operation error."""

    pass


class InvalidFieldElement(CryptographicError, ValueError):
    """Value is not a canonical element of the scalar field."""

    def __init__(self, message: str, value=None, bound=None):
        super().__init__(message)
        self.value = value
        self.bound = bound


class InvalidWalletAddress(InvalidFieldElement):
    """Wallet address has no canonical field encoding."""

    pass


class SigningFailed(CryptographicError):
    """Signing capability raised or returned a malformed signature."""

    pass


class IndexOutOfRange(PrivacyProtocolError, IndexError):
    """Merkle leaf index outside [0, 2**depth)."""

    def __init__(self, index: int, depth: int):
        super().__init__(
            f"leaf index {index} out of range for depth {depth} "
            f"(expected 0 <= index < {2 ** depth})"
        )
        self.index = index
        self.depth = depth


class InvalidCheckpoint(PrivacyProtocolError, ValueError):
    """Tree checkpoint is inconsistent with the requested insertion."""

    pass


class ValueOutOfRange(PrivacyProtocolError, ValueError):
    """Value does not fit the public-signal width."""

    def __init__(self, value, bits: int):
        super().__init__(
            f"value {value!r} does not fit a {bits}-bit public signal "
            f"(expected 0 <= value < {2 ** bits})"
        )
        self.value = value
        self.bits = bits


class MissingCircuitArtifact(ProofGenerationError):
    """Circuit wasm / zkey (or the prover itself) could not be resolved."""

    pass


class WitnessGenerationFailed(ProofGenerationError):
    """Input record does not satisfy the circuit constraints."""

    pass
