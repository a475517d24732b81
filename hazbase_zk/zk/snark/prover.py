"""snarkjs-backed Groth16 prover."""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

import trio

from ..config import DEFAULT_PROVER_TIMEOUT
from ..exceptions import (
    MissingCircuitArtifact,
    ProofGenerationError,
    WitnessGenerationFailed,
)
from ..interfaces import ProvingBackend
from ..types import Groth16Proof, ProverResult
from .assets import CircuitArtifacts

logger = logging.getLogger(__name__)


class SnarkjsProver(ProvingBackend):
    """
    Run `snarkjs groth16 fullprove` on a circuit input record.

    Witness generation and proving happen in one subprocess; a non-zero exit
    means the record does not satisfy the circuit.
    """

    _BACKEND_NAME = "snarkjs-groth16"
    _BACKEND_VERSION = "0.1.0"

    def __init__(
        self,
        snarkjs: str = "snarkjs",
        timeout: Optional[float] = DEFAULT_PROVER_TIMEOUT,
    ) -> None:
        self.snarkjs = snarkjs
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        return self._BACKEND_NAME

    @property
    def backend_version(self) -> str:
        return self._BACKEND_VERSION

    def _resolve_binary(self) -> str:
        binary = shutil.which(self.snarkjs)
        if binary is None:
            raise MissingCircuitArtifact(f"missing prover binary: {self.snarkjs}")
        return binary

    async def prove(
        self, artifacts: CircuitArtifacts, input_record: Mapping[str, Any]
    ) -> ProverResult:
        missing = artifacts.missing()
        if missing:
            raise MissingCircuitArtifact(
                "missing circuit artifact: " + ", ".join(str(p) for p in missing)
            )
        binary = self._resolve_binary()

        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp = Path(tmp_dir)
            input_path = tmp / "input.json"
            proof_path = tmp / "proof.json"
            public_path = tmp / "public.json"
            input_path.write_text(json.dumps(dict(input_record)), encoding="utf-8")

            command = [
                binary,
                "groth16",
                "fullprove",
                str(input_path),
                str(artifacts.wasm),
                str(artifacts.zkey),
                str(proof_path),
                str(public_path),
            ]
            logger.info("running snarkjs fullprove with %s", artifacts.zkey)
            await self._run(command)

            if not proof_path.exists() or not public_path.exists():
                raise WitnessGenerationFailed("snarkjs produced no proof output")
            proof_json = json.loads(proof_path.read_text(encoding="utf-8"))
            public_json = json.loads(public_path.read_text(encoding="utf-8"))

        return ProverResult(
            proof=Groth16Proof.from_snarkjs(proof_json),
            public_signals=tuple(int(signal) for signal in public_json),
        )

    async def _run(self, command: list[str]) -> None:
        try:
            if self.timeout is None:
                result = await trio.run_process(
                    command, capture_stdout=True, capture_stderr=True, check=False
                )
            else:
                with trio.fail_after(self.timeout):
                    result = await trio.run_process(
                        command, capture_stdout=True, capture_stderr=True, check=False
                    )
        except FileNotFoundError as exc:
            raise MissingCircuitArtifact(f"missing prover binary: {command[0]}") from exc
        except trio.TooSlowError as exc:
            raise ProofGenerationError(
                f"prover exceeded {self.timeout}s timeout"
            ) from exc

        if result.returncode != 0:
            output = (
                result.stderr.decode("utf-8", "replace").strip()
                or result.stdout.decode("utf-8", "replace").strip()
                or "unknown prover error"
            )
            raise WitnessGenerationFailed(f"witness generation failed: {output}")
