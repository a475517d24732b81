"""Helpers to resolve circuit artifacts (wasm, zkey, vkey) with layout fallbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..exceptions import MissingCircuitArtifact

CIRCUITS_DIR_ENV = "HAZBASE_CIRCUITS_DIR"


@dataclass(frozen=True)
class CircuitArtifacts:
    """Opaque references to a compiled circuit and its proving key."""

    wasm: Path
    zkey: Path
    vkey: Optional[Path] = None

    @classmethod
    def from_paths(
        cls,
        wasm: str | Path,
        zkey: str | Path,
        vkey: str | Path | None = None,
    ) -> "CircuitArtifacts":
        return cls(
            wasm=Path(wasm),
            zkey=Path(zkey),
            vkey=Path(vkey) if vkey is not None else None,
        )

    def missing(self) -> List[Path]:
        """Required artifact files that do not exist."""
        return [path for path in (self.wasm, self.zkey) if not path.is_file()]


def resolve_circuit_artifacts(
    circuit: str,
    base_dir: str | Path | None = None,
    depth: int | None = None,
) -> CircuitArtifacts:
    """
    Resolve compiled artifacts for circuit.

    Layouts checked, in order:
        <base>/<circuit>/depth-<d>/{circuit.wasm, circuit_final.zkey}
        <base>/<circuit>/{<circuit>.wasm, <circuit>_final.zkey}
        <base>/{<circuit>.wasm, <circuit>_final.zkey}

    Raises:
        MissingCircuitArtifact: If no layout holds both files
    """
    base = _default_circuits_dir() if base_dir is None else Path(base_dir)

    candidates: List[Tuple[Path, Path, Path]] = []
    if depth is not None:
        nested = base / circuit / f"depth-{depth}"
        candidates.append(
            (
                nested / "circuit.wasm",
                nested / "circuit_final.zkey",
                nested / "verification_key.json",
            )
        )
    for directory in (base / circuit, base):
        candidates.append(
            (
                directory / f"{circuit}.wasm",
                directory / f"{circuit}_final.zkey",
                directory / f"{circuit}_verification_key.json",
            )
        )

    return _first_existing(candidates, f"{circuit} artifacts")


def _default_circuits_dir() -> Path:
    return Path(os.getenv(CIRCUITS_DIR_ENV, "circuits"))


def _first_existing(
    candidates: Iterable[Tuple[Path, Path, Path]], label: str
) -> CircuitArtifacts:
    candidates = list(candidates)
    for wasm, zkey, vkey in candidates:
        if wasm.is_file() and zkey.is_file():
            return CircuitArtifacts(
                wasm=wasm, zkey=zkey, vkey=vkey if vkey.is_file() else None
            )
    checked = "; ".join(f"{wasm}, {zkey}" for wasm, zkey, _ in candidates)
    raise MissingCircuitArtifact(f"Unable to resolve {label}. Checked: {checked}")
