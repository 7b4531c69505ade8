"""Main CLI entry point for targeted-id.

Defines the CLI group and registers all subcommands.

Commands:
    algorithms - List supported hash algorithms
    config     - Configuration management (path, init, validate, show)
    derive     - Derive identifiers for a recorded session state

Subcommand help:
    targeted-id COMMAND -h     Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli"]

import logging
import sys
from pathlib import Path

import click

from targeted_id import __version__
from targeted_id.telemetry.system.system_logger import configure_system_logger_file, set_system_log_level

from .commands.algorithms import algorithms
from .commands.config import config
from .commands.derive import derive
from .styling import style_error


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Quick Start:
  targeted-id config init -p filter.json         Create a starter configuration
  targeted-id config validate -p filter.json     Check a configuration
  targeted-id config show -p filter.json         Show resolved values
  targeted-id derive -p filter.json state.json   Derive identifiers

Debugging:
  targeted-id --debug derive --explain -p filter.json state.json
  targeted-id --log-file events.jsonl derive -p filter.json state.json
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--debug", is_flag=True, help="Log derivation events to stderr")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Append derivation events to a JSONL file",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, debug: bool, log_file: Path | None) -> None:
    """targeted-id: Targeted identifier (eduPersonTargetedID) derivation."""
    if version:
        click.echo(f"targeted-id {__version__}")
        sys.exit(0)
    if log_file is not None:
        try:
            configure_system_logger_file(log_file)
        except OSError as e:
            click.echo(style_error(f"Cannot open log file {log_file}: {e}"), err=True)
            sys.exit(1)
    if debug:
        set_system_log_level(logging.DEBUG)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(algorithms)
cli.add_command(config)
cli.add_command(derive)


def main() -> None:
    """CLI entry point."""
    cli()
