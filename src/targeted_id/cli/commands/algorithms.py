"""Algorithms command for targeted-id CLI."""

from __future__ import annotations

__all__ = ["algorithms"]

import click

from targeted_id.constants import SUPPORTED_HASH_ALGORITHMS
from targeted_id.derivation.composer import is_supported_hash


@click.command()
def algorithms() -> None:
    """List hash algorithms accepted by hashFunction."""
    for name in sorted(SUPPORTED_HASH_ALGORITHMS):
        if is_supported_hash(name):
            click.echo(name)
