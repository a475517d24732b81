"""
Protocol configuration for the commitment / Merkle / proof core.

These values are protocol constants: circuits are compiled against them, so
changing any of them invalidates every previously computed leaf and root.
"""

# ============================================================================
# FIELD PARAMETERS
# ============================================================================

# BN254 scalar field (the field Groth16 circuits over bn128 operate in)
CURVE_NAME = "bn128"
FIELD_MODULUS = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)
FIELD_BITS = 254
FIELD_BYTES = 32

# ============================================================================
# HASH PRIMITIVE
# ============================================================================

# Poseidon accepts up to 16 inputs; the development hash mirrors that bound
MIN_HASH_ARITY = 2
MAX_HASH_ARITY = 16

# Domain tag prefixed to every SHA-256 development hash invocation
HASH_DOMAIN_TAG = b"HAZBASE_ZK_FIELD_HASH_V1"

# Bytes packed per field limb when encoding text (31 bytes < 254 bits)
TEXT_LIMB_BYTES = 31

# ============================================================================
# NULLIFIER DERIVATION
# ============================================================================

DOMAIN_MESSAGE = "hazbase-zk: derive nullifier secret (v1)"

# ECDSA wallet signatures are 65 bytes, Ed25519 64; anything under 32 is malformed
MIN_SIGNATURE_BYTES = 32

# ============================================================================
# MERKLE TREE
# ============================================================================

DEFAULT_TREE_DEPTH = 20
MAX_TREE_DEPTH = 32
EMPTY_LEAF = 0

# ============================================================================
# WALLET / ATTRIBUTE ENCODING
# ============================================================================

WALLET_ADDRESS_BYTES = 20
MAX_COUNTRY_CODE = 999

# ============================================================================
# THRESHOLD MODE
# ============================================================================

PUBLIC_VALUE_BITS = 32

# ============================================================================
# PROOF SERIALIZATION
# ============================================================================

PROOF_VERSION = 1
DEFAULT_PROVER_TIMEOUT = 120

# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert FIELD_MODULUS.bit_length() == FIELD_BITS, "Field width mismatch"
    assert FIELD_MODULUS % 2 == 1, "Field modulus must be odd"
    assert TEXT_LIMB_BYTES * 8 < FIELD_BITS, "Text limbs must fit the field"
    assert MIN_HASH_ARITY <= 2 <= MAX_HASH_ARITY, "combine2 must be supported"
    assert 1 <= DEFAULT_TREE_DEPTH <= MAX_TREE_DEPTH, "Invalid default depth"
    assert WALLET_ADDRESS_BYTES * 8 < FIELD_BITS, "Wallet must fit the field"
    assert PUBLIC_VALUE_BITS < FIELD_BITS, "Public value must fit the field"
    return True


# Auto-validate on import
validate_config()
