"""
CBMT CLI - Command Line Interface for Complete Binary Merkle Trees

Main entry point for all CLI commands.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from pydantic import ValidationError

from cbmt.core import CBMT, Merge, get_merge, available_merges
from cbmt.core.merge import U64_MASK
from cbmt.core.config import CBMTConfig, load_config
from cbmt.utils.logger import setup_logging, get_logger
from cbmt.utils.validation import validate_hex_string, validate_integer, validate_leaves, validate_positions

logger = get_logger("cli")


def _is_integer_merge(merge: Merge) -> bool:
    return isinstance(merge.default(), int)


def parse_u64(value: str, param_hint: str) -> int:
    """Parse an integer node value, rejecting anything outside u64."""
    try:
        number = int(value, 0)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=param_hint) from None

    valid, err = validate_integer(number, "value", 0, U64_MASK)
    if not valid:
        raise click.BadParameter(err, param_hint=param_hint)
    return number


def parse_leaves(merge: Merge, values: List[str], text: bool, max_leaves: int) -> list:
    """
    Turn command line arguments into leaf values for merge.

    Integer merges take decimal integers. Byte merges take hex strings, or
    arbitrary text hashed with SHA-256 when text is set.
    """
    from cbmt.crypto import hex_to_bytes, sha256

    valid, err = validate_leaves(list(values), max_length=max_leaves)
    if not valid:
        raise click.BadParameter(err, param_hint="LEAVES")

    if _is_integer_merge(merge):
        return [parse_u64(v, "LEAVES") for v in values]

    if text:
        return [sha256(v.encode("utf-8")) for v in values]

    for v in values:
        valid, err = validate_hex_string(v, "leaf")
        if not valid:
            raise click.BadParameter(err, param_hint="LEAVES")
    return [hex_to_bytes(v) for v in values]


def format_value(value) -> str:
    """Render a node value for display."""
    from cbmt.core.schemas import encode_value

    return encode_value(value)


def read_proof(path: str):
    """Load a proof document, converting decode failures into CLI errors."""
    from cbmt.core.schemas import proof_from_json

    try:
        return proof_from_json(Path(path).read_text())
    except ValidationError as e:
        raise click.ClickException(f"Invalid proof document {path}: {e.error_count()} error(s)\n{e}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False), help="JSON config file")
@click.option("--merge", "merge_name", default=None, type=click.Choice(available_merges(), case_sensitive=False), help="Merge (hash) policy")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, config_path, merge_name):
    """Complete Binary Merkle Tree - roots, trees and multi-leaf proofs"""
    try:
        cfg = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    level = logging.DEBUG if debug else cfg.log_level_value
    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=cfg.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["merge"] = get_merge(merge_name or cfg.merge)
    logger.debug(f"Using merge {ctx.obj['merge'].name}")


# =============================================================================
# Tree Commands
# =============================================================================


@cli.command("root")
@click.argument("leaves", nargs=-1)
@click.option("--text", is_flag=True, help="Hash UTF-8 arguments into leaves")
@click.pass_context
def root_cmd(ctx, leaves, text):
    """Print the Merkle root of LEAVES"""
    cfg: CBMTConfig = ctx.obj["config"]
    merge = ctx.obj["merge"]
    values = parse_leaves(merge, leaves, text, cfg.max_leaves)

    click.echo(format_value(CBMT(merge).build_merkle_root(values)))


@cli.command("tree")
@click.argument("leaves", nargs=-1)
@click.option("--text", is_flag=True, help="Hash UTF-8 arguments into leaves")
@click.pass_context
def tree_cmd(ctx, leaves, text):
    """Print every node of the tree over LEAVES"""
    cfg: CBMTConfig = ctx.obj["config"]
    merge = ctx.obj["merge"]
    values = parse_leaves(merge, leaves, text, cfg.max_leaves)

    tree = CBMT(merge).build_merkle_tree(values)
    first_leaf = tree.leaf_count - 1
    for index, node in enumerate(tree.nodes):
        kind = "leaf" if index >= first_leaf else "node"
        click.echo(f"{index:>6} {kind} {format_value(node)}")


# =============================================================================
# Proof Commands
# =============================================================================


@cli.command("proof")
@click.argument("leaves", nargs=-1)
@click.option("-p", "--position", "positions", multiple=True, type=int, required=True, help="Leaf position to prove (repeatable)")
@click.option("--text", is_flag=True, help="Hash UTF-8 arguments into leaves")
@click.option("-o", "--output", type=click.Path(dir_okay=False, writable=True), help="Write the proof here instead of stdout")
@click.pass_context
def proof_cmd(ctx, leaves, positions, text, output):
    """Build a proof that the leaves at POSITIONS belong to LEAVES"""
    from cbmt.core.schemas import proof_to_json

    cfg: CBMTConfig = ctx.obj["config"]
    merge = ctx.obj["merge"]
    values = parse_leaves(merge, leaves, text, cfg.max_leaves)

    valid, err = validate_positions(list(positions), len(values), cfg.max_proof_positions)
    if not valid:
        raise click.BadParameter(err, param_hint="--position")

    proof = CBMT(merge).build_merkle_proof(values, positions)
    if proof is None:
        raise click.ClickException("Could not build proof")

    try:
        document = proof_to_json(proof, merge.name, indent=2)
    except ValidationError as e:
        raise click.ClickException(f"Could not encode proof: {e.error_count()} error(s)\n{e}")
    if output:
        Path(output).write_text(document)
        click.echo(f"✓ Proof written to {output}")
    else:
        click.echo(document)


@cli.command("verify")
@click.argument("leaves", nargs=-1)
@click.option("--root", "root_value", required=True, help="Claimed root")
@click.option("--proof", "proof_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Proof document")
@click.option("--text", is_flag=True, help="Hash UTF-8 arguments into leaves")
@click.pass_context
def verify_cmd(ctx, leaves, root_value, proof_path, text):
    """Check that LEAVES and the proof reproduce ROOT"""
    from cbmt.core.schemas import decode_value

    cfg: CBMTConfig = ctx.obj["config"]
    proof = read_proof(proof_path)
    merge = proof.merge
    values = parse_leaves(merge, leaves, text, cfg.max_leaves)

    if _is_integer_merge(merge):
        expected = parse_u64(root_value, "--root")
    else:
        valid, err = validate_hex_string(root_value, "root")
        if not valid:
            raise click.BadParameter(err, param_hint="--root")
        expected = decode_value(root_value)

    if proof.verify(expected, values):
        click.echo("✓ Proof valid")
        return

    click.echo("✗ Proof invalid", err=True)
    ctx.exit(1)


@cli.command("retrieve")
@click.argument("leaves", nargs=-1)
@click.option("--proof", "proof_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Proof document")
@click.option("--text", is_flag=True, help="Hash UTF-8 arguments into leaves")
@click.pass_context
def retrieve_cmd(ctx, leaves, proof_path, text):
    """Print the leaves of LEAVES that a proof points to"""
    cfg: CBMTConfig = ctx.obj["config"]
    proof = read_proof(proof_path)
    merge = proof.merge
    values = parse_leaves(merge, leaves, text, cfg.max_leaves)

    retrieved = CBMT(merge).retrieve_leaves(values, proof)
    if retrieved is None:
        raise click.ClickException("Proof indices do not fit this leaf list")

    for value in retrieved:
        click.echo(format_value(value))


# =============================================================================
# Demo / Bench Commands
# =============================================================================


DEMO_LEAVES = [
    3584654056691428718,
    42,
    11643453954163878810,
    11177097603989645559,
    20191116,
    10289152030157698709,
]


@cli.command("demo")
def demo():
    """Walk through root, proof, verification and retrieval on u64 leaves"""
    from cbmt.core import U64HasherMerge

    cbmt = CBMT(U64HasherMerge())
    leaves = DEMO_LEAVES

    root = cbmt.build_merkle_root(leaves)
    click.echo(f"merkle root is {root}")

    # Proof for 42 (position 1)
    proof = cbmt.build_merkle_proof(leaves, [1])
    click.echo(f"merkle proof lemmas are {list(proof.lemmas)}, indices are {list(proof.indices)}")
    click.echo(f"merkle proof verify result is {proof.verify(root, [42])}")

    # Proof for 42 and 20191116 (positions 1 and 4)
    proof = cbmt.build_merkle_proof(leaves, [1, 4])
    click.echo(f"merkle proof lemmas are {list(proof.lemmas)}, indices are {list(proof.indices)}")
    retrieved = cbmt.retrieve_leaves(leaves, proof)
    click.echo(f"retrieved leaves are {retrieved}")
    click.echo(f"calculated root of proof is {proof.root(retrieved)}")


@cli.command("bench")
@click.option("--scale", default=1, type=click.IntRange(min=1), help="Divide iteration counts by this")
@click.pass_context
def bench(ctx, scale):
    """Run performance benchmarks"""
    from cbmt.utils.benchmark import run_all_benchmarks

    run_all_benchmarks(ctx.obj["merge"].name, scale=scale)


def main(argv: Optional[List[str]] = None):
    cli(args=argv, prog_name="cbmt")


if __name__ == "__main__":
    main(sys.argv[1:])
