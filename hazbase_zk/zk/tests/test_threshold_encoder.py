import pytest

from hazbase_zk.zk.exceptions import InvalidFieldElement, ValueOutOfRange
from hazbase_zk.zk.field import get_default_adapter
from hazbase_zk.zk.threshold import encode_threshold


def test_encode_threshold_with_fixed_rand() -> None:
    encoding = encode_threshold(700, 99)
    assert encoding.public_value == 700
    assert encoding.rand == 99
    assert encoding.full_leaf == get_default_adapter().combine2(700, 99)
    assert encode_threshold(700, 99) == encoding


@pytest.mark.parametrize("value", [0, 1, 2**32 - 1])
def test_encode_threshold_accepts_32_bit_range(value: int) -> None:
    assert encode_threshold(value, 1).public_value == value


@pytest.mark.parametrize("value", [2**32, -1, True, "700"])
def test_encode_threshold_rejects_out_of_range(value) -> None:
    with pytest.raises(ValueOutOfRange, match="32-bit"):
        encode_threshold(value, 1)


def test_random_rand_is_drawn_when_missing() -> None:
    first = encode_threshold(5)
    second = encode_threshold(5)
    assert first.public_value == second.public_value == 5
    assert first.rand != second.rand
    assert first.full_leaf == get_default_adapter().combine2(5, first.rand)


def test_invalid_rand_rejected() -> None:
    with pytest.raises(InvalidFieldElement):
        encode_threshold(5, -3)


def test_injected_randomness_source() -> None:
    class FixedSource:
        def random_field_element(self) -> int:
            return 4242

    encoding = encode_threshold(5, rng=FixedSource())
    assert encoding.rand == 4242
