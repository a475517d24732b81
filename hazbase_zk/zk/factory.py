"""
Proving backend factory.

Backend choice decides whether proofs verify anywhere: the mock backend is for
testing only.

Selection precedence: explicit override argument, prefer argument, in-memory
override (set_prover_type), HAZBASE_ZK_PROVER, then "mock".
"""

from __future__ import annotations

import importlib
import os
from typing import Final, Iterable, Optional, Tuple

from .interfaces import ProvingBackend

PROVER_REGISTRY: Final[dict[str, str]] = {
    "mock": "hazbase_zk.zk.adapters.mock_adapter.MockProver",
    "snarkjs": "hazbase_zk.zk.snark.prover.SnarkjsProver",
}

PROVER_ENV_VAR: Final[str] = "HAZBASE_ZK_PROVER"
DEFAULT_PROVER: Final[str] = "mock"

_prover_override: Optional[str] = None


def _checked_name(value: Optional[str], source: str) -> Optional[str]:
    """Registered name, or None when the source is unset or empty."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or value not in PROVER_REGISTRY:
        valid = ", ".join(sorted(PROVER_REGISTRY))
        raise ValueError(
            f"Invalid prover name from {source}: {value!r}. Valid options: {valid}"
        )
    return value


def _first_selected(candidates: Iterable[Tuple[str, Optional[str]]]) -> str:
    for source, value in candidates:
        name = _checked_name(value, source)
        if name is not None:
            return name
    return DEFAULT_PROVER


def set_prover_type(value: Optional[str]) -> None:
    """Force a backend for this process (testing only); None clears it."""
    global _prover_override
    _prover_override = _checked_name(value, "set_prover_type")


def get_prover_type(prefer: Optional[str] = None) -> str:
    """
    Name of the backend get_prover() would build.

    Raises:
        ValueError: If any consulted source names an unknown backend.
    """
    return _first_selected(
        (
            ("prefer", prefer),
            ("set_prover_type", _prover_override),
            (PROVER_ENV_VAR, os.getenv(PROVER_ENV_VAR)),
        )
    )


def _load_prover_class(prover_name: str) -> type[ProvingBackend]:
    import_path = PROVER_REGISTRY[prover_name]
    module_path, _, class_name = import_path.rpartition(".")

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as exc:
        raise ImportError(
            f"Unable to import prover module {module_path!r} for {prover_name!r}"
        ) from exc

    prover_cls = getattr(module, class_name, None)
    if not isinstance(prover_cls, type) or not issubclass(prover_cls, ProvingBackend):
        raise TypeError(
            f"Prover reference {import_path!r} does not implement ProvingBackend"
        )
    return prover_cls


def get_prover(
    *, prefer: Optional[str] = None, override: Optional[str] = None, **kwargs
) -> ProvingBackend:
    """
    Build the selected proving backend.

    Args:
        prefer: Backend name hint
        override: Backend name that beats every other source (testing only)
        **kwargs: Passed to the backend constructor

    Raises:
        ValueError: If a backend name is invalid
        ImportError: If the backend class cannot be imported
        TypeError: If the class does not implement ProvingBackend
    """
    name = _checked_name(override, "override") or get_prover_type(prefer)
    return _load_prover_class(name)(**kwargs)
