import pytest

from hazbase_zk.zk.exceptions import MissingCircuitArtifact
from hazbase_zk.zk.snark.assets import (
    CIRCUITS_DIR_ENV,
    CircuitArtifacts,
    resolve_circuit_artifacts,
)


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    return path


def test_depth_layout_preferred(tmp_path) -> None:
    nested = tmp_path / "threshold" / "depth-20"
    _touch(nested / "circuit.wasm")
    _touch(nested / "circuit_final.zkey")
    _touch(nested / "verification_key.json")
    _touch(tmp_path / "threshold.wasm")
    _touch(tmp_path / "threshold_final.zkey")

    artifacts = resolve_circuit_artifacts("threshold", tmp_path, depth=20)

    assert artifacts.wasm == nested / "circuit.wasm"
    assert artifacts.vkey == nested / "verification_key.json"


def test_flat_layout_fallback(tmp_path) -> None:
    _touch(tmp_path / "kyc_natural.wasm")
    _touch(tmp_path / "kyc_natural_final.zkey")

    artifacts = resolve_circuit_artifacts("kyc_natural", tmp_path, depth=20)

    assert artifacts.zkey == tmp_path / "kyc_natural_final.zkey"
    assert artifacts.vkey is None
    assert artifacts.missing() == []


def test_partial_layout_is_skipped(tmp_path) -> None:
    _touch(tmp_path / "threshold" / "threshold.wasm")
    with pytest.raises(MissingCircuitArtifact, match="Checked"):
        resolve_circuit_artifacts("threshold", tmp_path)


def test_env_default_dir(tmp_path, monkeypatch) -> None:
    _touch(tmp_path / "threshold" / "threshold.wasm")
    _touch(tmp_path / "threshold" / "threshold_final.zkey")
    monkeypatch.setenv(CIRCUITS_DIR_ENV, str(tmp_path))

    artifacts = resolve_circuit_artifacts("threshold")

    assert artifacts.wasm == tmp_path / "threshold" / "threshold.wasm"


def test_missing_lists_absent_files(tmp_path) -> None:
    wasm = _touch(tmp_path / "c.wasm")
    artifacts = CircuitArtifacts.from_paths(wasm, tmp_path / "c.zkey")
    assert artifacts.missing() == [tmp_path / "c.zkey"]
