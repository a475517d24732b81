"""
Command-line interface for the hazbase ZK SDK.

Computes leaves, roots and threshold encodings, derives salts from a local
development key, and runs proof generation from a JSON request file.
"""

import json
import sys
from functools import partial
from pathlib import Path
from typing import Optional

import click
import trio

from hazbase_zk import __version__
from hazbase_zk.client.signers import Ed25519Signer
from hazbase_zk.zk.config import DEFAULT_TREE_DEPTH
from hazbase_zk.zk.exceptions import PrivacyProtocolError
from hazbase_zk.zk.factory import get_prover
from hazbase_zk.zk.field import get_default_adapter
from hazbase_zk.zk.leaves import (
    CorporateKYC,
    NaturalKYC,
    build_kyc_leaf,
    build_tree_leaf,
    normalize_wallet,
)
from hazbase_zk.zk.merkle import IncrementalMerkleTree, TreeCheckpoint
from hazbase_zk.zk.nullifier import derive_salt
from hazbase_zk.zk.orchestrator import ProofOptions, generate_proof
from hazbase_zk.zk.threshold import encode_threshold


def _fail(message: str) -> None:
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


def _field_option(value: Optional[str], label: str) -> Optional[int]:
    if value is None:
        return None
    return get_default_adapter().decode(value, label)


@click.group()
@click.version_option(version=__version__)
def main():
    """
    hazbase ZK SDK - commitments, Merkle paths and proof assembly.
    """
    pass


@main.command("empty-root")
@click.option("--depth", type=int, default=DEFAULT_TREE_DEPTH, show_default=True)
def empty_root(depth: int):
    """Print the root of an empty tree."""
    try:
        tree = IncrementalMerkleTree(depth)
    except (ValueError, TypeError) as e:
        _fail(str(e))
    click.echo(str(tree.empty_root))


@main.command("kyc-leaf")
@click.option("--gov-id", required=True, help="Government id (natural person)")
@click.option("--name", required=True)
@click.option("--dob", "dob_ymd", type=int, required=True, help="YYYYMMDD")
@click.option("--country", type=int, required=True, help="ISO-3166 numeric")
@click.option("--salt", required=True, help="Salt (decimal or 0x-hex)")
@click.option("--wallet", help="Bind the commitment to this wallet")
@click.option("--corporate", is_flag=True, help="Treat --gov-id as an entity id")
@click.option("--role", help="Corporate role")
def kyc_leaf(gov_id, name, dob_ymd, country, salt, wallet, corporate, role):
    """Compute a KYC commitment leaf (and tree leaf with --wallet)."""
    try:
        salt_value = _field_option(salt, "salt")
        if corporate:
            record = CorporateKYC.from_raw(
                gov_id, name, dob_ymd, country, salt_value, role=role
            )
        else:
            record = NaturalKYC.from_raw(gov_id, name, dob_ymd, country, salt_value)
        commitment = build_kyc_leaf(record)
        output = {"commitment": str(commitment)}
        if wallet:
            output["wallet"] = normalize_wallet(wallet)
            output["tree_leaf"] = str(build_tree_leaf(commitment, wallet))
    except PrivacyProtocolError as e:
        _fail(str(e))
    _echo_json(output)


@main.command()
@click.argument("value", type=int)
@click.option("--rand", help="Blinding element (decimal or 0x-hex); random if omitted")
def threshold(value: int, rand: Optional[str]):
    """Encode a threshold value as public value + full-field leaf."""
    try:
        encoding = encode_threshold(value, _field_option(rand, "rand"))
    except PrivacyProtocolError as e:
        _fail(str(e))
    _echo_json(
        {
            "public_value": encoding.public_value,
            "full_leaf": str(encoding.full_leaf),
            "rand": str(encoding.rand),
        }
    )


@main.command()
@click.option("--root", help="Current root; omit for an empty tree")
@click.option("--index", type=int, required=True)
@click.option("--leaf", required=True, help="Tree leaf (decimal or 0x-hex)")
@click.option("--depth", type=int, default=DEFAULT_TREE_DEPTH, show_default=True)
def insert(root: Optional[str], index: int, leaf: str, depth: int):
    """Insert a leaf and print the new root and inclusion path."""
    try:
        tree = IncrementalMerkleTree(depth)
        result = tree.insert(
            _field_option(root, "root"), index, _field_option(leaf, "leaf")
        )
    except (PrivacyProtocolError, ValueError, TypeError) as e:
        _fail(str(e))
    _echo_json(
        {
            "new_root": str(result.new_root),
            "path_elements": [str(node) for node in result.path_elements],
            "path_indices": result.path_indices,
        }
    )


@main.command("derive-salt")
@click.option("--seed-hex", required=True, help="32-byte Ed25519 seed (dev key)")
@click.option("--extra", help="Extra context appended to the domain message")
def derive_salt_command(seed_hex: str, extra: Optional[str]):
    """Derive the nullifier salt with a local development key."""
    try:
        signer = Ed25519Signer.from_hex(seed_hex)
    except ValueError as e:
        _fail(f"invalid seed: {e}")
    try:
        salt = trio.run(partial(derive_salt, signer, extra=extra))
    except PrivacyProtocolError as e:
        _fail(str(e))
    _echo_json({"wallet": signer.get_address(), "salt": str(salt)})


def _load_subject(request: dict, adapter):
    subject = request.get("subject")
    if subject is None:
        raise ValueError("request needs a subject")
    if isinstance(subject, int):
        return subject
    kind = subject.get("type", "natural")
    salt = adapter.decode(request["salt"], "salt")
    if kind == "natural":
        return NaturalKYC.from_raw(
            subject["gov_id"],
            subject["name"],
            int(subject["dob_ymd"]),
            int(subject["country"]),
            salt,
        )
    if kind == "corporate":
        return CorporateKYC.from_raw(
            subject["entity_id"],
            subject["name"],
            int(subject["incorporation_ymd"]),
            int(subject["country"]),
            salt,
            role=subject.get("role"),
        )
    raise ValueError(f"unknown subject type: {kind!r}")


def _load_options(request: dict, adapter, artifacts_dir: Optional[str]) -> ProofOptions:
    checkpoint = request.get("checkpoint")
    salt = request.get("salt")
    return ProofOptions(
        mode=request.get("mode", "KYC"),
        checkpoint=(
            TreeCheckpoint.from_dict(checkpoint, adapter) if checkpoint else None
        ),
        depth=int(request.get("depth", DEFAULT_TREE_DEPTH)),
        threshold=request.get("threshold"),
        score=request.get("score"),
        salt=adapter.decode(salt, "salt") if salt is not None else None,
        artifacts_dir=artifacts_dir,
    )


@main.command()
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--prover",
    type=click.Choice(["mock", "snarkjs"], case_sensitive=False),
    help="Proving backend (default: HAZBASE_ZK_PROVER or mock)",
)
@click.option("--artifacts-dir", type=click.Path(file_okay=False))
@click.option("--output", type=click.Path(dir_okay=False), help="Write bundle here")
@click.option("--cbor", is_flag=True, help="Write the bundle as CBOR")
def prove(request_file, prover, artifacts_dir, output, cbor):
    """Generate a proof bundle from a JSON request file."""
    adapter = get_default_adapter()
    try:
        request = json.loads(Path(request_file).read_text(encoding="utf-8"))
        subject = _load_subject(request, adapter)
        options = _load_options(request, adapter, artifacts_dir)
        backend = get_prover(prefer=prover)
        bundle = trio.run(
            partial(
                generate_proof,
                subject,
                request["wallet"],
                options,
                prover=backend,
            )
        )
    except KeyError as e:
        _fail(f"request missing field {e}")
    except (PrivacyProtocolError, ValueError, TypeError) as e:
        _fail(str(e))

    if output and cbor:
        Path(output).write_bytes(bundle.serialize())
        click.echo(click.style(f"✓ Bundle written to {output}", fg="green"))
    elif output:
        Path(output).write_text(json.dumps(bundle.to_dict(), indent=2), encoding="utf-8")
        click.echo(click.style(f"✓ Bundle written to {output}", fg="green"))
    else:
        _echo_json(bundle.to_dict())


if __name__ == "__main__":
    main()
