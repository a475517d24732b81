from hazbase_zk.zk import config


def test_validate_config() -> None:
    assert config.validate_config() is True


def test_field_is_bn254_scalar_field() -> None:
    assert config.FIELD_MODULUS == int(
        "21888242871839275222246405745257275088548364400416034343698204186575808495617"
    )
    assert config.FIELD_MODULUS.bit_length() == config.FIELD_BITS


def test_defaults() -> None:
    assert config.DEFAULT_TREE_DEPTH == 20
    assert config.EMPTY_LEAF == 0
    assert config.PUBLIC_VALUE_BITS == 32
    assert config.WALLET_ADDRESS_BYTES == 20
