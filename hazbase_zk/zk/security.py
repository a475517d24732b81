"""
Randomness utilities for field sampling.
"""

import os
import secrets

from .config import FIELD_MODULUS


class RandomnessSource:
    """
    Cryptographically secure randomness with fork detection.

    Prevents randomness reuse if the process forks.

    Example:
        >>> rng = RandomnessSource()
        >>> r = rng.random_field_element()
    """

    def __init__(self):
        """Initialize randomness source with fork detection."""
        self._pid = os.getpid()
        self._rng = secrets.SystemRandom()

    def _check_fork(self) -> None:
        if os.getpid() != self._pid:
            self.__init__()

    def get_random_scalar(self, max_value: int) -> int:
        """
        Get random scalar in [0, max_value).

        Args:
            max_value: Upper bound (exclusive)

        Returns:
            Random scalar in [0, max_value)
        """
        if not isinstance(max_value, int) or max_value < 1:
            raise ValueError("max_value must be a positive int")
        self._check_fork()
        return self._rng.randrange(0, max_value)

    def random_field_element(self) -> int:
        """Random element of the scalar field, in [0, FIELD_MODULUS)."""
        return self.get_random_scalar(FIELD_MODULUS)
