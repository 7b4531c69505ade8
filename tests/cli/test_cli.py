"""Unit tests for CLI commands.

Tests CLI behavior using Click's CliRunner for isolated, fast testing.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner

from targeted_id.cli import cli
from targeted_id.telemetry.system.system_logger import get_system_logger, set_system_log_level


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def valid_config() -> dict:
    """Return a two-value configuration."""
    return {
        "salt": "s3cr3t",
        "fields": ["salt", "userID"],
        "values": {
            "new": {"ifTarget": r"^https://.*\.example\.com$"},
            "old": {"hashFunction": "sha1", "prefix": "{old}"},
        },
    }


@pytest.fixture
def state() -> dict:
    return {
        "Attributes": {"uid": ["jdoe"]},
        "UserID": "jdoe",
        "saml:RequesterID": ["https://sp.example.com"],
    }


@pytest.fixture
def isolated_files(
    runner: CliRunner, valid_config: dict, state: dict
) -> Generator[tuple[Path, Path], None, None]:
    """Create an isolated filesystem with a config file and a state file."""
    with runner.isolated_filesystem() as tmpdir:
        config_path = Path(tmpdir) / "config.json"
        config_path.write_text(json.dumps(valid_config, indent=2))
        state_path = Path(tmpdir) / "state.json"
        state_path.write_text(json.dumps(state))
        yield config_path, state_path


class TestVersion:
    """Tests for --version flag."""

    def test_version_flag_shows_version(self, runner: CliRunner) -> None:
        """Given --version flag, returns version string."""
        # Act
        result = runner.invoke(cli, ["--version"])

        # Assert
        assert result.exit_code == 0
        assert "targeted-id" in result.output

    def test_short_version_flag(self, runner: CliRunner) -> None:
        """Given -v flag, returns version string."""
        # Act
        result = runner.invoke(cli, ["-v"])

        # Assert
        assert result.exit_code == 0
        assert "targeted-id" in result.output


class TestHelp:
    """Tests for help output."""

    def test_root_help_shows_commands(self, runner: CliRunner) -> None:
        """Given --help, shows available commands."""
        # Act
        result = runner.invoke(cli, ["--help"])

        # Assert
        assert result.exit_code == 0
        assert "algorithms" in result.output
        assert "config" in result.output
        assert "derive" in result.output
        assert "Quick Start" in result.output

    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        """Given no subcommand, shows help."""
        # Act
        result = runner.invoke(cli, [])

        # Assert
        assert result.exit_code == 0
        assert "derive" in result.output

    def test_short_help_flag(self, runner: CliRunner) -> None:
        """Given -h, shows help."""
        # Act
        result = runner.invoke(cli, ["-h"])

        # Assert
        assert result.exit_code == 0
        assert "Usage" in result.output


class TestAlgorithms:
    """Tests for algorithms command."""

    def test_lists_common_algorithms(self, runner: CliRunner) -> None:
        """Given algorithms command, lists guaranteed hashlib algorithms."""
        # Act
        result = runner.invoke(cli, ["algorithms"])

        # Assert
        assert result.exit_code == 0
        names = result.output.split()
        assert "sha256" in names
        assert "sha1" in names
        assert not any(name.startswith("shake") for name in names)


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_path_shows_config_file(self, runner: CliRunner) -> None:
        """Given config path, prints the default config location."""
        # Act
        result = runner.invoke(cli, ["config", "path"])

        # Assert
        assert result.exit_code == 0
        assert "config.json" in result.output

    def test_validate_valid_config(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given a valid config, reports the values."""
        # Arrange
        config_path, _ = isolated_files

        # Act
        result = runner.invoke(cli, ["config", "validate", "-p", str(config_path)])

        # Assert
        assert result.exit_code == 0
        assert "Config valid" in result.output
        assert "eduPersonTargetedID" in result.output
        assert "2 values defined: new, old" in result.output

    def test_validate_missing_file(self, runner: CliRunner) -> None:
        """Given a missing config file, exits with code 2."""
        # Act
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "validate", "-p", "missing.json"])

        # Assert
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_validate_unsupported_hash(self, runner: CliRunner) -> None:
        """Given an unsupported hash algorithm, exits with code 2."""
        # Act
        with runner.isolated_filesystem():
            Path("config.json").write_text(json.dumps({"hashFunction": "sha257"}))
            result = runner.invoke(cli, ["config", "validate", "-p", "config.json"])

        # Assert
        assert result.exit_code == 2
        assert "unsupported hash algorithm" in result.output

    def test_show_json_masks_salt(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given show --json, prints resolved values with the salt masked."""
        # Arrange
        config_path, _ = isolated_files

        # Act
        result = runner.invoke(cli, ["config", "show", "-p", str(config_path), "--json"])

        # Assert
        assert result.exit_code == 0
        shown = json.loads(result.output)
        assert shown["attributeName"] == "eduPersonTargetedID"
        assert list(shown["values"]) == ["new", "old"]
        assert shown["values"]["old"]["hashFunction"] == "sha1"
        assert shown["values"]["old"]["prefix"] == "{old}"
        assert shown["values"]["new"]["salt"] == "********"
        assert "s3cr3t" not in result.output

    def test_show_text(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given show, prints one section per value."""
        # Arrange
        config_path, _ = isolated_files

        # Act
        result = runner.invoke(cli, ["config", "show", "-p", str(config_path)])

        # Assert
        assert result.exit_code == 0
        assert "Value: new" in result.output
        assert "Value: old" in result.output
        assert "s3cr3t" not in result.output

    def test_validate_counts_zero_values(self, runner: CliRunner) -> None:
        """Given an empty values section, reports zero values."""
        # Act
        with runner.isolated_filesystem():
            Path("config.json").write_text(json.dumps({"values": {}}))
            result = runner.invoke(cli, ["config", "validate", "-p", "config.json"])

        # Assert
        assert result.exit_code == 0
        assert "0 values defined" in result.output

    def test_init_writes_loadable_config(self, runner: CliRunner) -> None:
        """Given init, writes a config with a random salt that validates."""
        # Act
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "init", "-p", "conf/filter.json"])
            written = json.loads(Path("conf/filter.json").read_text())
            validated = runner.invoke(cli, ["config", "validate", "-p", "conf/filter.json"])

        # Assert
        assert result.exit_code == 0
        assert "Config written" in result.output
        assert list(written) == ["salt"]
        assert len(written["salt"]) == 64
        assert validated.exit_code == 0
        assert "1 value defined: default" in validated.output

    def test_init_refuses_to_overwrite(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given an existing config, init exits 1 and leaves it unchanged."""
        # Arrange
        config_path, _ = isolated_files
        before = config_path.read_text()

        # Act
        result = runner.invoke(cli, ["config", "init", "-p", str(config_path)])

        # Assert
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert config_path.read_text() == before

    def test_init_force_overwrites(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given --force, init replaces the existing config with a new salt."""
        # Arrange
        config_path, _ = isolated_files

        # Act
        result = runner.invoke(cli, ["config", "init", "--force", "-p", str(config_path)])

        # Assert
        assert result.exit_code == 0
        assert "values" not in json.loads(config_path.read_text())

    def test_init_generates_distinct_salts(self, runner: CliRunner) -> None:
        """Given two inits, each config gets its own salt."""
        # Act
        with runner.isolated_filesystem():
            runner.invoke(cli, ["config", "init", "-p", "a.json"])
            runner.invoke(cli, ["config", "init", "-p", "b.json"])
            salts = {json.loads(Path(name).read_text())["salt"] for name in ("a.json", "b.json")}

        # Assert
        assert len(salts) == 2


class TestDerive:
    """Tests for derive command."""

    def test_derive_prints_values_in_order(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given a state, prints one identifier per value in order."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(cli, ["derive", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            hashlib.sha256(b"s3cr3t@@jdoe").hexdigest(),
            "{old}" + hashlib.sha1(b"s3cr3t@@jdoe").hexdigest(),
        ]

    def test_derive_explain_shows_skips(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given --explain and a non-matching target, reports the skip."""
        # Arrange
        config_path, state_path = isolated_files
        state_path.write_text(json.dumps({"Attributes": {}, "UserID": "jdoe", "core:SP": "http://other.org"}))

        # Act
        result = runner.invoke(cli, ["derive", "--explain", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 0
        assert "new: skipped (targetID does not match ifTarget)" in result.output
        assert "old: {old}" in result.output

    def test_derive_json_outputs_state(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given --json, prints the state with the output attribute added."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(cli, ["derive", "--json", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 0
        output_state = json.loads(result.output)
        assert len(output_state["Attributes"]["eduPersonTargetedID"]) == 2
        assert output_state["UserID"] == "jdoe"

    def test_derive_missing_user(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given a state without user identifier, exits with code 3."""
        # Arrange
        config_path, state_path = isolated_files
        state_path.write_text(json.dumps({"Attributes": {}}))

        # Act
        result = runner.invoke(cli, ["derive", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 3
        assert "No user identifier found" in result.output

    def test_derive_invalid_config(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given an invalid config, exits with code 2."""
        # Arrange
        config_path, state_path = isolated_files
        config_path.write_text(json.dumps({"fields": ["email"]}))

        # Act
        result = runner.invoke(cli, ["derive", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 2
        assert "unknown field" in result.output

    def test_derive_invalid_state_json(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given a malformed state file, exits with code 1."""
        # Arrange
        config_path, state_path = isolated_files
        state_path.write_text("{broken")

        # Act
        result = runner.invoke(cli, ["derive", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_derive_state_not_object(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given a state that is not a JSON object, exits with code 1."""
        # Arrange
        config_path, state_path = isolated_files
        state_path.write_text("[]")

        # Act
        result = runner.invoke(cli, ["derive", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 1
        assert "must contain a JSON object" in result.output

    def test_derive_all_filtered(self, runner: CliRunner) -> None:
        """Given every value filtered out, exits 0 and says so."""
        # Act
        with runner.isolated_filesystem():
            Path("config.json").write_text(json.dumps({"ifTarget": "^urn:"}))
            Path("state.json").write_text(json.dumps({"Attributes": {}, "UserID": "jdoe"}))
            result = runner.invoke(cli, ["derive", "-p", "config.json", "state.json"])

        # Assert
        assert result.exit_code == 0
        assert "No identifiers derived" in result.output

    def test_explain_and_json_rejected(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given --explain together with --json, exits with a usage error."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(cli, ["derive", "--explain", "--json", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 2
        assert "cannot be combined" in result.output

    def test_explain_reports_each_value_once(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given --explain, prints exactly one line per configured value."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(cli, ["derive", "--explain", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "new: " + hashlib.sha256(b"s3cr3t@@jdoe").hexdigest(),
            "old: {old}" + hashlib.sha1(b"s3cr3t@@jdoe").hexdigest(),
        ]


class TestDebugFlag:
    """Tests for --debug flag."""

    @pytest.fixture(autouse=True)
    def restore_log_level(self) -> Generator[None, None, None]:
        yield
        set_system_log_level(logging.INFO)

    def test_debug_enables_debug_logging(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given --debug, the system logger is set to DEBUG."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(cli, ["--debug", "derive", "-p", str(config_path), str(state_path)])

        # Assert
        assert result.exit_code == 0
        assert get_system_logger().level == logging.DEBUG


class TestLogFile:
    """Tests for --log-file option."""

    def test_log_file_records_events(
        self, runner: CliRunner, isolated_files: tuple[Path, Path], detach_log_file: None
    ) -> None:
        """Given --log-file, derivation events are appended as JSON lines."""
        # Arrange
        config_path, state_path = isolated_files
        log_path = config_path.parent / "logs" / "events.jsonl"

        # Act
        result = runner.invoke(
            cli, ["--log-file", str(log_path), "derive", "-p", str(config_path), str(state_path)]
        )

        # Assert
        assert result.exit_code == 0
        entries = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert [e["event"] for e in entries] == ["config_loaded", "value_derived", "value_derived"]
        assert [e["value"] for e in entries[1:]] == ["new", "old"]
        assert "s3cr3t" not in log_path.read_text()

    def test_log_file_keeps_console_quiet(
        self, runner: CliRunner, isolated_files: tuple[Path, Path], detach_log_file: None
    ) -> None:
        """Given --log-file without --debug, no events reach the console."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(
            cli,
            ["--log-file", str(config_path.parent / "e.jsonl"), "derive", "-p", str(config_path), str(state_path)],
        )

        # Assert
        assert result.exit_code == 0
        assert "value_derived" not in result.output

    def test_unwritable_log_file(self, runner: CliRunner, isolated_files: tuple[Path, Path]) -> None:
        """Given a log file path below a regular file, exits with code 1."""
        # Arrange
        config_path, state_path = isolated_files

        # Act
        result = runner.invoke(
            cli,
            ["--log-file", str(config_path / "events.jsonl"), "derive", "-p", str(config_path), str(state_path)],
        )

        # Assert
        assert result.exit_code == 1
        assert "Cannot open log file" in result.output
