"""Tests for the mock and snarkjs proving backends."""

from __future__ import annotations

import json
import sys

import pytest

from hazbase_zk.zk.adapters.mock_adapter import MockProver
from hazbase_zk.zk.exceptions import (
    MissingCircuitArtifact,
    ProofGenerationError,
    WitnessGenerationFailed,
)
from hazbase_zk.zk.layout import INPUT_SIGNALS
from hazbase_zk.zk.snark.assets import CircuitArtifacts
from hazbase_zk.zk.snark.prover import SnarkjsProver

PROOF_JSON = {
    "pi_a": ["1", "2", "1"],
    "pi_b": [["3", "4"], ["5", "6"], ["1", "0"]],
    "pi_c": ["7", "8", "1"],
    "protocol": "groth16",
    "curve": "bn128",
}


def _record(circuit: str = "threshold") -> dict:
    record = {name: "0" for name in INPUT_SIGNALS[circuit]}
    record.update(root="11", nullifier="22", mode="1")
    if circuit == "threshold":
        record.update(score="710", threshold="700")
    return record


@pytest.fixture
def artifacts(tmp_path) -> CircuitArtifacts:
    wasm = tmp_path / "threshold.wasm"
    zkey = tmp_path / "threshold_final.zkey"
    wasm.write_bytes(b"\0asm")
    zkey.write_bytes(b"zkey")
    return CircuitArtifacts.from_paths(wasm, zkey)


def _script(tmp_path, body: str) -> str:
    path = tmp_path / "fake-snarkjs"
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return str(path)


@pytest.mark.trio
async def test_mock_prover_reads_public_signals(artifacts) -> None:
    prover = MockProver()
    result = await prover.prove(artifacts, _record())
    assert result.public_signals == (11, 22, 1, 700)
    assert result.proof.protocol == "groth16"
    assert prover.calls[0][0] == artifacts


@pytest.mark.trio
async def test_mock_prover_is_deterministic(artifacts) -> None:
    first = await MockProver().prove(artifacts, _record())
    second = await MockProver().prove(artifacts, _record())
    assert first == second


@pytest.mark.trio
async def test_mock_prover_rejects_unknown_layout(artifacts) -> None:
    with pytest.raises(WitnessGenerationFailed, match="match no circuit"):
        await MockProver().prove(artifacts, {"score": "1"})


@pytest.mark.trio
async def test_snarkjs_missing_artifacts(tmp_path) -> None:
    artifacts = CircuitArtifacts.from_paths(tmp_path / "a.wasm", tmp_path / "a.zkey")
    with pytest.raises(MissingCircuitArtifact, match="a.wasm"):
        await SnarkjsProver().prove(artifacts, _record())


@pytest.mark.trio
async def test_snarkjs_missing_binary(artifacts) -> None:
    prover = SnarkjsProver(snarkjs="definitely-not-snarkjs-binary")
    with pytest.raises(MissingCircuitArtifact, match="missing prover binary"):
        await prover.prove(artifacts, _record())


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
@pytest.mark.trio
async def test_snarkjs_success_parses_outputs(tmp_path, artifacts) -> None:
    script = _script(
        tmp_path,
        f"cat > \"$6\" <<'JSON'\n{json.dumps(PROOF_JSON)}\nJSON\n"
        "echo '[\"11\", \"22\", \"1\", \"700\"]' > \"$7\"\n",
    )
    result = await SnarkjsProver(snarkjs=script).prove(artifacts, _record())
    assert result.public_signals == (11, 22, 1, 700)
    assert result.proof.pi_b[1] == ("5", "6")
    assert result.proof.to_snarkjs() == PROOF_JSON


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
@pytest.mark.trio
async def test_snarkjs_passes_record_as_input_file(tmp_path, artifacts) -> None:
    captured = tmp_path / "captured.json"
    script = _script(
        tmp_path,
        f"cp \"$3\" '{captured}'\n"
        "test \"$1\" = groth16 && test \"$2\" = fullprove || exit 9\n"
        f"echo '{json.dumps(PROOF_JSON)}' > \"$6\"\n"
        "echo '[]' > \"$7\"\n",
    )
    await SnarkjsProver(snarkjs=script).prove(artifacts, _record())
    assert json.loads(captured.read_text(encoding="utf-8")) == _record()


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
@pytest.mark.trio
async def test_snarkjs_failure_surfaces_stderr(tmp_path, artifacts) -> None:
    script = _script(
        tmp_path, "echo 'Error: Assert Failed. line: 42' >&2\nexit 1\n"
    )
    with pytest.raises(WitnessGenerationFailed, match="Assert Failed"):
        await SnarkjsProver(snarkjs=script).prove(artifacts, _record())


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
@pytest.mark.trio
async def test_snarkjs_without_outputs(tmp_path, artifacts) -> None:
    script = _script(tmp_path, "exit 0\n")
    with pytest.raises(WitnessGenerationFailed, match="no proof output"):
        await SnarkjsProver(snarkjs=script).prove(artifacts, _record())


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
@pytest.mark.trio
async def test_snarkjs_timeout(tmp_path, artifacts) -> None:
    script = _script(tmp_path, "sleep 5\n")
    with pytest.raises(ProofGenerationError, match="timeout"):
        await SnarkjsProver(snarkjs=script, timeout=0.2).prove(artifacts, _record())
