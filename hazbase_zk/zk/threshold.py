"""Dual encoding of threshold-mode values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import PUBLIC_VALUE_BITS
from .exceptions import ValueOutOfRange
from .field import FieldAdapter, get_default_adapter
from .security import RandomnessSource


@dataclass(frozen=True)
class ThresholdEncoding:
    public_value: int  # fits a 32-bit public signal
    full_leaf: int  # h(value, rand)
    rand: int


def check_public_value(n, bits: int = PUBLIC_VALUE_BITS) -> int:
    """Range-check n against the public-signal width."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueOutOfRange(n, bits)
    if n < 0 or n >= 1 << bits:
        raise ValueOutOfRange(n, bits)
    return n


def encode_threshold(
    n: int,
    rand: Optional[int] = None,
    *,
    adapter: Optional[FieldAdapter] = None,
    rng: Optional[RandomnessSource] = None,
) -> ThresholdEncoding:
    """
    Encode n as a bounded public value plus a full-field commitment.

    Args:
        n: Value in [0, 2**32)
        rand: Blinding element; fresh randomness when None. Pass a derived
            salt to make the encoding reproducible.

    Raises:
        ValueOutOfRange: If n does not fit 32 bits
        InvalidFieldElement: If rand is not a field element
    """
    field = adapter or get_default_adapter()
    public_value = check_public_value(n)
    if rand is None:
        rand = (rng or RandomnessSource()).random_field_element()
    full_leaf = field.combine2(public_value, rand)
    return ThresholdEncoding(public_value=public_value, full_leaf=full_leaf, rand=rand)
