"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

CLI entry point for Hashtree.

Provides a thin command-line wrapper around the tree construction and
proof APIs: hashing single values, computing roots, producing proofs and
verifying them against a bare root digest.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from hashtree._version import __version__
from hashtree.cli.context import CLIContext, hashing_options, pass_context, resolve_hasher
from hashtree.config.settings import get_default_config_path, load_config
from hashtree.exceptions import HashtreeError, InvalidConfigurationError
from hashtree.logging_config import get_logger, set_correlation_id, setup_logging
from hashtree.merkle.hasher import to_hex

logger = get_logger(__name__)


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (default: from configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='hashtree')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    Hashtree - Merkle tree commitments and inclusion proofs.

    Computes root digests over ordered leaves, produces membership proofs
    and verifies them against a root digest.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    # Events raised while loading the configuration go to stderr, never stdout
    setup_logging(level=log_level.upper() if log_level else "INFO", json_format=False)

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    try:
        effective_log_level = log_level.upper() if log_level else ctx.config.logging.level
        log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
        setup_logging(
            level=effective_log_level,
            log_file=log_file,
            json_format=ctx.config.logging.format == "json",
        )
        set_correlation_id()

        if verbose:
            logger.info(
                "cli_started",
                config_path=ctx.config_path or "defaults",
                log_level=effective_log_level,
            )
    except OSError as e:
        click.echo(f"Error: Failed to set up logging: {e}", err=True)
        sys.exit(1)


@cli.command('hash')
@click.argument('text')
@hashing_options
@pass_context
def hash_text(ctx: CLIContext, text: str, algorithm: Optional[str], domain_separation: Optional[bool]):
    """
    Print the leaf digest of TEXT (UTF-8 encoded).

    Examples:

        hashtree hash "Hello, world!" --algorithm keccak256
    """
    try:
        hasher = resolve_hasher(ctx, algorithm, domain_separation)
        digest = hasher.leaf_digest(text.encode("utf-8"))
    except HashtreeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if ctx.verbose:
        click.echo(f"Algorithm: {hasher.algorithm}")
    click.echo(to_hex(digest))


# Import and register merkle commands
from hashtree.cli.merkle import merkle
cli.add_command(merkle)


if __name__ == '__main__':
    cli()
