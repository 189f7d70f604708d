"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

CLI commands for Merkle tree operations.

Provides commands for:
- Computing the root of a leaf sequence
- Producing an inclusion proof for one leaf
- Verifying an inclusion proof against a root digest

Leaves are given as arguments or read from a file, one leaf per line,
and are UTF-8 encoded before hashing.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from hashtree.cli.context import CLIContext, hashing_options, pass_context, resolve_hasher
from hashtree.exceptions import HashtreeError
from hashtree.logging_config import get_logger
from hashtree.merkle.hasher import MerkleHasher, from_hex, to_hex
from hashtree.merkle.proof import proof_from_dict, proof_to_dict
from hashtree.merkle.tree import MerkleTree
from hashtree.merkle.verifier import MerkleVerifier

logger = get_logger(__name__)


def _collect_leaves(leaves: Tuple[str, ...], leaf_file: Optional[Path]) -> List[bytes]:
    """
    Gather leaves from arguments followed by the lines of leaf_file.

    Args:
        leaves: Leaves given on the command line
        leaf_file: Optional file with one leaf per line

    Returns:
        Ordered list of UTF-8 encoded leaves
    """
    collected = [leaf.encode("utf-8") for leaf in leaves]
    if leaf_file is not None:
        with open(leaf_file, "r", encoding="utf-8") as f:
            collected.extend(line.rstrip("\r\n").encode("utf-8") for line in f)
    return collected


def _build_tree(ctx: CLIContext, hasher: MerkleHasher, leaves: List[bytes]) -> MerkleTree:
    """Build a tree with the configured builder options."""
    builder = ctx.config.builder
    return MerkleTree.build_from(
        leaves,
        hasher=hasher,
        use_parallel=builder.parallel_enabled,
        parallel_threshold=builder.parallel_threshold,
        max_workers=builder.max_workers,
        proof_cache_size=builder.proof_cache_size,
    )


leaf_file_option = click.option(
    '--file',
    '-f',
    'leaf_file',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Read additional leaves from a file, one per line',
)


@click.group()
def merkle():
    """Merkle tree roots and inclusion proofs."""
    pass


@merkle.command('root')
@click.argument('leaves', nargs=-1)
@leaf_file_option
@hashing_options
@pass_context
def root(ctx: CLIContext, leaves, leaf_file, algorithm, domain_separation):
    """
    Compute the Merkle root of LEAVES.

    Examples:

        hashtree merkle root a b c

        hashtree merkle root --file leaves.txt --algorithm keccak256
    """
    try:
        hasher = resolve_hasher(ctx, algorithm, domain_separation)
        tree = _build_tree(ctx, hasher, _collect_leaves(leaves, leaf_file))
    except HashtreeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Root: {to_hex(tree.get_root())}")
    click.echo(f"Leaves: {tree.count_leaves()}")
    if ctx.verbose:
        click.echo(f"Depth: {tree.depth}")
        click.echo(f"Algorithm: {hasher.algorithm}")
        click.echo(f"Domain separation: {'enabled' if hasher.domain_separation else 'disabled'}")


@merkle.command('prove')
@click.argument('target')
@click.argument('leaves', nargs=-1)
@leaf_file_option
@click.option(
    '--digest',
    'target_is_digest',
    is_flag=True,
    help='Treat TARGET as a hex leaf digest instead of leaf text',
)
@click.option(
    '--output',
    '-o',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write the proof JSON to a file instead of stdout',
)
@hashing_options
@pass_context
def prove(ctx: CLIContext, target, leaves, leaf_file, target_is_digest, output, algorithm, domain_separation):
    """
    Produce an inclusion proof for TARGET within LEAVES.

    The proof is printed as JSON together with the leaf index and root.
    Exits with status 1 when TARGET is not one of the leaves.

    Examples:

        hashtree merkle prove b a b c

        hashtree merkle prove b a b c --output proof.json
    """
    try:
        hasher = resolve_hasher(ctx, algorithm, domain_separation)
        tree = _build_tree(ctx, hasher, _collect_leaves(leaves, leaf_file))
        target_digest = from_hex(target) if target_is_digest else hasher.leaf_digest(target.encode("utf-8"))
    except (HashtreeError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    found = tree.contains_leaf(target_digest)
    if found is None:
        click.echo(f"Leaf not found: {target}", err=True)
        sys.exit(1)

    proof, index = found
    document = proof_to_dict(proof, index=index)
    document["root"] = to_hex(tree.get_root())
    document["leaf_digest"] = to_hex(target_digest)
    document["algorithm"] = hasher.algorithm
    document["domain_separation"] = hasher.domain_separation

    rendered = json.dumps(document, indent=2)
    if output is not None:
        output.write_text(rendered + "\n")
        click.echo(f"✓ Proof for leaf {index} written to {output}")
    else:
        click.echo(rendered)


@merkle.command('verify')
@click.option(
    '--proof',
    '-p',
    'proof_path',
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to proof JSON produced by "hashtree merkle prove"',
)
@click.option('--root', '-r', 'root_hex', default=None, help='Claimed root digest (hex); defaults to the root in the proof file')
@click.option('--leaf', 'leaf_text', default=None, help='Leaf text to verify')
@click.option('--leaf-digest', 'leaf_digest_hex', default=None, help='Leaf digest (hex) to verify')
@click.option('--index', '-i', type=int, default=None, help='Leaf index; defaults to the index in the proof file')
@hashing_options
@pass_context
def verify(ctx: CLIContext, proof_path, root_hex, leaf_text, leaf_digest_hex, index, algorithm, domain_separation):
    """
    Verify an inclusion proof against a root digest.

    Exits with status 0 when the proof is valid and 1 otherwise.

    Examples:

        hashtree merkle verify --proof proof.json --root 3a7b... --leaf b
    """
    if (leaf_text is None) == (leaf_digest_hex is None):
        click.echo("Error: Provide exactly one of --leaf or --leaf-digest", err=True)
        sys.exit(1)

    try:
        with open(proof_path, "r", encoding="utf-8") as f:
            document = json.load(f)
        proof, proof_index = proof_from_dict(document)

        # Hashing parameters recorded in the proof file apply unless overridden
        if algorithm is None and isinstance(document.get("algorithm"), str):
            algorithm = document["algorithm"]
        if domain_separation is None and isinstance(document.get("domain_separation"), bool):
            domain_separation = document["domain_separation"]
        hasher = resolve_hasher(ctx, algorithm, domain_separation)

        if root_hex is None:
            root_hex = document.get("root")
        if not isinstance(root_hex, str):
            click.echo("Error: No root given and none found in the proof file", err=True)
            sys.exit(1)
        root_digest = from_hex(root_hex)

        if leaf_text is not None:
            leaf_digest = hasher.leaf_digest(leaf_text.encode("utf-8"))
        else:
            leaf_digest = from_hex(leaf_digest_hex)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Proof file is not valid JSON: {e}", err=True)
        sys.exit(1)
    except (HashtreeError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if index is None:
        index = proof_index
    if index is None:
        click.echo("Error: No leaf index given and none found in the proof file", err=True)
        sys.exit(1)

    verifier = MerkleVerifier(hasher)
    if verifier.verify(proof, root_digest, leaf_digest, index):
        click.echo("✓ Proof is valid")
        if ctx.verbose:
            click.echo(f"  Leaf index: {index}")
            click.echo(f"  Root: {to_hex(root_digest)}")
        sys.exit(0)
    else:
        click.echo("✗ Proof is invalid", err=True)
        sys.exit(1)
