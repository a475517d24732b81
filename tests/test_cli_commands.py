"""
CLI tests using click's CliRunner.

Proof generation runs against the mock backend with placeholder artifacts.
"""
import json

import cbor2
import pytest
from click.testing import CliRunner

from hazbase_zk import __version__
from hazbase_zk.cli import main
from hazbase_zk.zk.field import get_default_adapter
from hazbase_zk.zk.leaves import NaturalKYC, build_kyc_leaf
from hazbase_zk.zk.merkle import IncrementalMerkleTree
from hazbase_zk.zk.threshold import encode_threshold


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def circuits_dir(tmp_path):
    for circuit in ("kyc_natural", "threshold"):
        (tmp_path / f"{circuit}.wasm").write_bytes(b"\0asm")
        (tmp_path / f"{circuit}_final.zkey").write_bytes(b"zkey")
    return tmp_path


def _request(tmp_path, **overrides):
    request = {
        "subject": {
            "type": "natural",
            "gov_id": "ID-123",
            "name": "Alice",
            "dob_ymd": 19900101,
            "country": 392,
        },
        "salt": "987654321",
        "wallet": "0xABC",
        "mode": "GTE",
        "threshold": 700,
        "score": 710,
        "depth": 20,
    }
    request.update(overrides)
    path = tmp_path / "request.json"
    path.write_text(json.dumps(request), encoding="utf-8")
    return str(path)


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_empty_root(runner):
    result = runner.invoke(main, ["empty-root", "--depth", "4"])
    assert result.exit_code == 0
    assert result.output.strip() == str(IncrementalMerkleTree(4).empty_root)


def test_empty_root_bad_depth(runner):
    result = runner.invoke(main, ["empty-root", "--depth", "0"])
    assert result.exit_code == 1


def test_kyc_leaf(runner):
    result = runner.invoke(
        main,
        [
            "kyc-leaf",
            "--gov-id", "ID-123",
            "--name", "Alice",
            "--dob", "19900101",
            "--country", "392",
            "--salt", "0x10",
            "--wallet", "0xABC",
        ],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    expected = build_kyc_leaf(NaturalKYC.from_raw("ID-123", "Alice", 19900101, 392, 16))
    assert data["commitment"] == str(expected)
    assert "tree_leaf" in data
    assert data["wallet"] == "0x" + "0" * 37 + "abc"


def test_kyc_leaf_invalid_date(runner):
    result = runner.invoke(
        main,
        [
            "kyc-leaf",
            "--gov-id", "ID-123",
            "--name", "Alice",
            "--dob", "19901301",
            "--country", "392",
            "--salt", "1",
        ],
    )
    assert result.exit_code == 1
    assert "YYYYMMDD" in result.output


def test_threshold_command(runner):
    result = runner.invoke(main, ["threshold", "700", "--rand", "99"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["public_value"] == 700
    assert data["full_leaf"] == str(encode_threshold(700, 99).full_leaf)


def test_threshold_out_of_range(runner):
    result = runner.invoke(main, ["threshold", str(2**32)])
    assert result.exit_code == 1


def test_insert_command(runner):
    result = runner.invoke(main, ["insert", "--index", "0", "--leaf", "42", "--depth", "4"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["new_root"] == str(IncrementalMerkleTree(4).compute_root([42]))
    assert data["path_indices"] == [0, 0, 0, 0]


def test_insert_requires_root_after_first_leaf(runner):
    result = runner.invoke(main, ["insert", "--index", "3", "--leaf", "42", "--depth", "4"])
    assert result.exit_code == 1
    assert "index 0" in result.output


def test_derive_salt_is_stable(runner):
    args = ["derive-salt", "--seed-hex", "11" * 32]
    first = json.loads(runner.invoke(main, args).output)
    second = json.loads(runner.invoke(main, args).output)
    assert first == second
    assert first["wallet"].startswith("0x") and len(first["wallet"]) == 42
    assert int(first["salt"]) < get_default_adapter().modulus


def test_derive_salt_bad_seed(runner):
    result = runner.invoke(main, ["derive-salt", "--seed-hex", "abcd"])
    assert result.exit_code == 1
    assert "invalid seed" in result.output


def test_prove_prints_bundle(runner, tmp_path, circuits_dir):
    result = runner.invoke(
        main,
        ["prove", _request(tmp_path), "--prover", "mock", "--artifacts-dir", str(circuits_dir)],
    )
    assert result.exit_code == 0, result.output
    bundle = json.loads(result.output)
    assert bundle["circuit"] == "threshold"
    assert bundle["public_signals"][2:] == ["1", "700"]
    assert bundle["checkpoint"]["next_index"] == 1


def test_prove_accepts_hex_checkpoint(runner, tmp_path, circuits_dir):
    previous = IncrementalMerkleTree(20).insert(None, 0, 42).checkpoint
    checkpoint = {
        "root": hex(previous.root),
        "next_index": previous.next_index,
        "depth": 20,
        "frontier": [hex(node) for node in previous.frontier],
    }
    result = runner.invoke(
        main,
        [
            "prove", _request(tmp_path, checkpoint=checkpoint),
            "--prover", "mock",
            "--artifacts-dir", str(circuits_dir),
        ],
    )
    assert result.exit_code == 0, result.output
    bundle = json.loads(result.output)
    assert bundle["checkpoint"]["next_index"] == 2
    assert bundle["input"]["pathIndices"][0] == "1"


def test_prove_writes_cbor(runner, tmp_path, circuits_dir):
    output = tmp_path / "bundle.cbor"
    result = runner.invoke(
        main,
        [
            "prove", _request(tmp_path, mode="KYC"),
            "--prover", "mock",
            "--artifacts-dir", str(circuits_dir),
            "--output", str(output),
            "--cbor",
        ],
    )
    assert result.exit_code == 0, result.output
    data = cbor2.loads(output.read_bytes())
    assert data["circuit"] == "kyc_natural"
    assert data["v"] == 1


def test_prove_missing_artifacts(runner, tmp_path):
    result = runner.invoke(
        main,
        ["prove", _request(tmp_path), "--prover", "mock", "--artifacts-dir", str(tmp_path / "none")],
    )
    assert result.exit_code == 1
    assert "Unable to resolve" in result.output


def test_prove_missing_wallet(runner, tmp_path, circuits_dir):
    path = tmp_path / "request.json"
    path.write_text(json.dumps({"subject": 710, "salt": "5", "mode": "GTE",
                                "threshold": 700}), encoding="utf-8")
    result = runner.invoke(
        main, ["prove", str(path), "--prover", "mock", "--artifacts-dir", str(circuits_dir)]
    )
    assert result.exit_code == 1
    assert "wallet" in result.output
