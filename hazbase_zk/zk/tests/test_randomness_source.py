import pytest

from hazbase_zk.zk.config import FIELD_MODULUS
from hazbase_zk.zk.security import RandomnessSource


def test_random_field_element_in_range() -> None:
    rng = RandomnessSource()
    for _ in range(50):
        assert 0 <= rng.random_field_element() < FIELD_MODULUS


def test_random_scalar_bounds() -> None:
    rng = RandomnessSource()
    assert rng.get_random_scalar(1) == 0
    with pytest.raises(ValueError):
        rng.get_random_scalar(0)


def test_fork_detection_reinitializes(monkeypatch) -> None:
    rng = RandomnessSource()
    child_pid = rng._pid + 1
    monkeypatch.setattr("hazbase_zk.zk.security.os.getpid", lambda: child_pid)
    rng.random_field_element()
    assert rng._pid == child_pid
