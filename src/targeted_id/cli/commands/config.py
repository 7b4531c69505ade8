"""Config command group for targeted-id CLI.

Provides configuration subcommands (path, init, validate, show).
"""

from __future__ import annotations

__all__ = ["config"]

import json
import secrets
import sys
from pathlib import Path

import click

from targeted_id.config import FilterConfig
from targeted_id.derivation.spec import ValueSpec, resolve_value_specs
from targeted_id.exceptions import ConfigurationError
from targeted_id.filter import TargetedIDFilter
from targeted_id.utils.file_helpers import get_config_path

from ..styling import style_dim, style_error, style_header, style_success

_CONFIG_PATH_OPTION = click.option(
    "--path",
    "-p",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of the default location",
)


def _load_specs(config_path: Path) -> tuple[FilterConfig, dict[str, ValueSpec]]:
    loaded = FilterConfig.load_from_file(config_path)
    return loaded, resolve_value_specs(loaded)


def _spec_to_dict(spec: ValueSpec) -> dict[str, object]:
    """Describe a spec with the documented key names. The salt is masked."""
    return {
        "userID": [str(p) for p in spec.user_id],
        "ifUser": list(spec.if_user),
        "targetID": [str(p) for p in spec.target_id],
        "targetTransform": dict(spec.target_transform),
        "ifTarget": list(spec.if_target),
        "sourceID": [str(p) for p in spec.source_id],
        "salt": "********" if spec.salt else None,
        "hashFunction": spec.hash_function,
        "fields": list(spec.fields),
        "fieldSeparator": spec.field_separator,
        "prefix": spec.prefix or None,
        "nameId": spec.name_id,
    }


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("path")
def config_path_cmd() -> None:
    """Show the default config file path."""
    path = get_config_path()
    click.echo(str(path))

    if not path.exists():
        click.echo(style_dim("(file does not exist)"), err=True)


@config.command("init")
@_CONFIG_PATH_OPTION
@click.option("--force", is_flag=True, help="Overwrite existing config")
def config_init(path: Path | None, force: bool) -> None:
    """Create a starter configuration with a random salt.

    The generated salt is written once and must be kept secret and stable:
    changing it changes every derived identifier.

    Exit codes:
        0: Config written
        1: Config already exists (use --force) or cannot be written
    """
    config_file_path = path or get_config_path()

    if config_file_path.exists() and not force:
        click.echo(
            style_error(f"Config already exists at {config_file_path}. Use --force to overwrite."),
            err=True,
        )
        sys.exit(1)

    starter = FilterConfig(salt=secrets.token_hex(32))
    try:
        starter.save_to_file(config_file_path)
    except OSError as e:
        click.echo(style_error(f"Cannot write config {config_file_path}: {e}"), err=True)
        sys.exit(1)

    click.echo(style_success(f"Config written: {config_file_path}"))


@config.command("validate")
@_CONFIG_PATH_OPTION
def config_validate(path: Path | None) -> None:
    """Validate configuration file.

    Checks the config file for:
    - Valid JSON syntax
    - Schema validation (known keys, types)
    - Supported hash algorithms, attribute paths, fields and patterns

    Exit codes:
        0: Config is valid
        2: Config is invalid or not found
    """
    config_file_path = path or get_config_path()

    try:
        id_filter = TargetedIDFilter.from_file(config_file_path)
    except ConfigurationError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(e.exit_code)

    count = id_filter.engine.value_count
    click.echo(style_success(f"Config valid: {config_file_path}"))
    click.echo(f"  Attribute: {id_filter.attribute_name}")
    click.echo(f"  {count} value{'s' if count != 1 else ''} defined: {', '.join(id_filter.engine.specs)}")


@config.command("show")
@_CONFIG_PATH_OPTION
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def config_show(path: Path | None, as_json: bool) -> None:
    """Display the resolved options of every value.

    Shows each value after merging built-in defaults, filter-wide options
    and per-value overrides. Salts are masked.
    """
    config_file_path = path or get_config_path()

    try:
        loaded, specs = _load_specs(config_file_path)
    except ConfigurationError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(e.exit_code)

    resolved = {name: _spec_to_dict(spec) for name, spec in specs.items()}

    if as_json:
        click.echo(json.dumps({"attributeName": loaded.attribute_name, "values": resolved}, indent=2))
        return

    click.echo(f"\nOutput attribute: {loaded.attribute_name}\n")
    for name, options in resolved.items():
        click.echo(style_header(f"Value: {name}"))
        for key, value in options.items():
            click.echo(f"  {key}: {value}")
        click.echo()
