"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Hashtree, a product of Garudex Labs

CLI context for Hashtree.

Provides shared context object and decorators for CLI commands.
"""

from typing import Optional

import click

from hashtree.merkle.hasher import MerkleHasher, available_algorithms


# Context object to share configuration across commands
class CLIContext:
    """Context object for CLI commands."""
    
    def __init__(self):
        self.config = None
        self.config_path = None
        self.verbose = False


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def hashing_options(func):
    """Attach --algorithm and --domain-separation options to a command."""
    func = click.option(
        '--domain-separation/--no-domain-separation',
        'domain_separation',
        default=None,
        help='Tag leaf and pair hashing distinctly (default: from configuration)',
    )(func)
    func = click.option(
        '--algorithm',
        '-a',
        type=click.Choice(available_algorithms(), case_sensitive=False),
        default=None,
        help='Digest algorithm (default: from configuration)',
    )(func)
    return func


def resolve_hasher(
    ctx: CLIContext,
    algorithm: Optional[str],
    domain_separation: Optional[bool],
) -> MerkleHasher:
    """
    Build a hasher from configuration, applying command-line overrides.
    
    Args:
        ctx: CLI context holding the loaded configuration
        algorithm: Algorithm override, or None to use configuration
        domain_separation: Domain separation override, or None to use configuration
    
    Returns:
        MerkleHasher for this invocation
    """
    hashing = ctx.config.hashing
    return MerkleHasher(
        algorithm=algorithm or hashing.algorithm,
        domain_separation=(
            hashing.domain_separation if domain_separation is None else domain_separation
        ),
    )
