"""
Field arithmetic adapter.

Single point of contact with the injected hash primitive. The rest of the
core only relies on its algebraic signature: field elements in, one field
element out, deterministic, assumed collision-resistant, not associative.
"""

from __future__ import annotations

import hashlib
from typing import Callable, Optional, Sequence

from .config import (
    FIELD_BYTES,
    FIELD_MODULUS,
    HASH_DOMAIN_TAG,
    MAX_HASH_ARITY,
    MIN_HASH_ARITY,
    TEXT_LIMB_BYTES,
)
from .exceptions import InvalidFieldElement

HashFn = Callable[[Sequence[int]], int]


def sha256_field_hash(inputs: Sequence[int]) -> int:
    """
    Hash field elements with SHA-256 and map the digest into the field.

    Development stand-in for Poseidon: same arity contract and output
    domain, but circuits must be compiled against the primitive actually
    injected in production.

    Each input is encoded as 32-byte big-endian; the arity is bound into the
    domain tag so h(a, b) and h(a, b, 0) never collide.
    """
    h = hashlib.sha256()
    h.update(HASH_DOMAIN_TAG)
    h.update(len(inputs).to_bytes(1, "big"))
    for value in inputs:
        h.update(value.to_bytes(FIELD_BYTES, "big", signed=False))
    return int.from_bytes(h.digest(), "big") % FIELD_MODULUS


class FieldAdapter:
    """
    Field operations over the proving system's scalar field.

    Args:
        hash_fn: Injected hash primitive (defaults to sha256_field_hash)
        modulus: Field modulus (defaults to BN254 scalar field)
        max_arity: Largest input count accepted by hash_fn

    Example:
        >>> field = FieldAdapter()
        >>> leaf = field.combine2(1, 2)
        >>> assert 0 <= leaf < field.modulus
    """

    def __init__(
        self,
        hash_fn: Optional[HashFn] = None,
        modulus: int = FIELD_MODULUS,
        max_arity: int = MAX_HASH_ARITY,
    ) -> None:
        if max_arity < MIN_HASH_ARITY:
            raise ValueError(f"max_arity must be >= {MIN_HASH_ARITY}")
        self._hash_fn = hash_fn or sha256_field_hash
        self.modulus = modulus
        self.max_arity = max_arity

    @property
    def hash_fn(self) -> HashFn:
        return self._hash_fn

    # ========================================================================
    # VALIDATION / REDUCTION
    # ========================================================================

    def check(self, value, label: str = "value") -> int:
        """
        Return value if it is a canonical field element.

        Raises:
            InvalidFieldElement: If value is not an int in [0, modulus)
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidFieldElement(
                f"{label} must be an int, got {type(value).__name__}",
                value=value,
                bound=self.modulus,
            )
        if value < 0 or value >= self.modulus:
            raise InvalidFieldElement(
                f"{label}={value} outside field range [0, {self.modulus})",
                value=value,
                bound=self.modulus,
            )
        return value

    def reduce(self, value: int) -> int:
        """Reduce a non-negative integer of any width into the field."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidFieldElement(
                f"cannot reduce {type(value).__name__}", value=value
            )
        if value < 0:
            raise InvalidFieldElement(
                f"cannot reduce negative value {value}", value=value, bound=0
            )
        return value % self.modulus

    # ========================================================================
    # HASH COMBINATION
    # ========================================================================

    def combine2(self, a: int, b: int) -> int:
        """Two-input hash."""
        return self._combine((a, b))

    def combine_n(self, *values: int) -> int:
        """Fixed-arity multi-input hash (2..max_arity inputs)."""
        if not MIN_HASH_ARITY <= len(values) <= self.max_arity:
            raise ValueError(
                f"hash arity {len(values)} outside "
                f"[{MIN_HASH_ARITY}, {self.max_arity}]"
            )
        return self._combine(values)

    def _combine(self, values: Sequence[int]) -> int:
        inputs = [
            self.check(value, f"hash input[{i}]") for i, value in enumerate(values)
        ]
        return self.check(self._hash_fn(inputs), "hash output")

    # ========================================================================
    # ENCODING
    # ========================================================================

    def from_bytes(self, data: bytes) -> int:
        """Decode big-endian bytes (at most 32) into a canonical element."""
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidFieldElement("field bytes must be bytes", value=data)
        if len(data) > FIELD_BYTES:
            raise InvalidFieldElement(
                f"field bytes too long: {len(data)} > {FIELD_BYTES}",
                value=bytes(data),
                bound=FIELD_BYTES,
            )
        return self.check(int.from_bytes(data, "big"))

    def decode(self, value, label: str = "value") -> int:
        """
        Parse an int, a decimal string, a 0x-hex string, or raw bytes.

        Raises:
            InvalidFieldElement: If the value cannot be parsed or is out of range
        """
        if isinstance(value, (bytes, bytearray)):
            return self.from_bytes(value)
        if isinstance(value, str):
            text = value.strip()
            try:
                if text[:2].lower() == "0x":
                    parsed = int(text[2:], 16)
                else:
                    parsed = int(text, 10)
            except ValueError as exc:
                raise InvalidFieldElement(
                    f"{label}={value!r} is not a decimal or 0x-hex integer",
                    value=value,
                ) from exc
            return self.check(parsed, label)
        return self.check(value, label)

    def encode_text(self, text: str) -> int:
        """
        Hash a text attribute into one field element.

        UTF-8 bytes are packed into 31-byte big-endian limbs and folded with
        combine_n, seeded with the byte length.
        """
        if not isinstance(text, str):
            raise TypeError("text must be str")
        data = text.encode("utf-8")
        limbs = [
            int.from_bytes(data[i : i + TEXT_LIMB_BYTES], "big")
            for i in range(0, len(data), TEXT_LIMB_BYTES)
        ] or [0]

        acc = len(data)
        step = self.max_arity - 1
        for start in range(0, len(limbs), step):
            acc = self.combine_n(acc, *limbs[start : start + step])
        return acc


_default_adapter: Optional[FieldAdapter] = None


def get_default_adapter() -> FieldAdapter:
    """Shared adapter over the default hash."""
    global _default_adapter
    if _default_adapter is None:
        _default_adapter = FieldAdapter()
    return _default_adapter
