"""Derive command for targeted-id CLI.

Runs the filter against a session state recorded as JSON, e.g.:

    {
        "Attributes": {"schacHomeOrganization": ["example.org"]},
        "UserID": "jdoe",
        "saml:RequesterID": ["https://sp.example.org/shibboleth"]
    }
"""

from __future__ import annotations

__all__ = ["derive"]

import json
import sys
from pathlib import Path

import click

from targeted_id.derivation.outcome import ValueOutcome
from targeted_id.exceptions import TargetedIDError
from targeted_id.filter import TargetedIDFilter
from targeted_id.utils.file_helpers import get_config_path, load_json_file

from ..styling import style_dim, style_error, style_label

_SKIP_REASONS = {
    ValueOutcome.SKIPPED_USER: "userID does not match ifUser",
    ValueOutcome.SKIPPED_TARGET: "targetID does not match ifTarget",
}


@click.command()
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--path",
    "-p",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of the default location",
)
@click.option("--explain", is_flag=True, help="Show the outcome of every configured value")
@click.option("--json", "as_json", is_flag=True, help="Output the resulting state as JSON")
def derive(state_file: Path, path: Path | None, explain: bool, as_json: bool) -> None:
    """Derive identifiers for a recorded session state.

    Prints one identifier per line, in configuration order. --explain
    reports every value (state left unchanged) and cannot be combined
    with --json.

    \b
    Exit codes:
        0: Identifiers derived (possibly none, if all were filtered out)
        1: State file unreadable
        2: Config is invalid or not found, or invalid options
        3: No user identifier in the state
    """
    if explain and as_json:
        raise click.UsageError("--explain and --json cannot be combined")

    config_file_path = path or get_config_path()

    try:
        state = load_json_file(state_file, file_type="state")
    except ValueError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    if not isinstance(state, dict):
        click.echo(style_error(f"State file {state_file} must contain a JSON object"), err=True)
        sys.exit(1)

    try:
        id_filter = TargetedIDFilter.from_file(config_file_path)
        if explain:
            results = id_filter.explain(state)
        else:
            values = id_filter.process(state)
    except TargetedIDError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(e.exit_code)

    if explain:
        for result in results:
            if result.outcome is ValueOutcome.DERIVED:
                click.echo(f"{style_label(result.name)} {result.value}")
            else:
                reason = _SKIP_REASONS[result.outcome]
                click.echo(f"{style_label(result.name)} {style_dim(f'skipped ({reason})')}")
        return

    if as_json:
        click.echo(json.dumps(state, indent=2))
        return

    if not values:
        click.echo(style_dim("No identifiers derived (all values filtered out)."), err=True)
    for value in values:
        click.echo(value)
