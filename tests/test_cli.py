"""
Tests for appseed.cli
=====================

This module contains tests for the command-line interface.
Tests use Typer's CliRunner for testing CLI commands.

Test Organization
-----------------
- TestVersionCommand: Tests for --version flag
- TestHelpOutput: Tests for help text
- TestListCommand: Tests for the list command
- TestNewCommand: Tests for the new command
- TestParseOptionArgs: Tests for --option parsing
"""

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from appseed import __version__
from appseed.cli import app, parse_option_args


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


DEMO_ARGS = ["--lang", "c", "--name", "demo", "--title", "Demo App", "--author", "Jane"]


# =============================================================================
# Version Command Tests
# =============================================================================

class TestVersionCommand:
    """Tests for the --version flag."""

    def test_version_flag(self, runner: CliRunner) -> None:
        """Test that --version shows version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_version_short_flag(self, runner: CliRunner) -> None:
        """Test that -V shows version."""
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


# =============================================================================
# Help Output Tests
# =============================================================================

class TestHelpOutput:
    """Tests for help text."""

    def test_main_help(self, runner: CliRunner) -> None:
        """Test main help output."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "appseed" in result.stdout.lower()
        assert "new" in result.stdout
        assert "list" in result.stdout

    def test_new_help(self, runner: CliRunner) -> None:
        """Test new command help output."""
        result = runner.invoke(app, ["new", "--help"])

        assert result.exit_code == 0
        assert "Create a new hello world application" in result.stdout
        assert "--lang" in result.stdout
        assert "--option" in result.stdout


# =============================================================================
# List Command Tests
# =============================================================================

class TestListCommand:
    """Tests for the list command."""

    def test_lists_builtin_templates(self, runner: CliRunner) -> None:
        """Test all built-in templates are listed."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        for key in ("c", "cpp", "go"):
            assert key in result.stdout

    def test_lists_extra_templates(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test templates from --templates-dir are listed."""
        template_dir = tmp_path / "rust"
        template_dir.mkdir()
        (template_dir / "template.toml").write_text(
            'description = "Rusty"\nfile = "main.rs"\nsource = "main.rs.tmpl"\n'
        )
        (template_dir / "main.rs.tmpl").write_text("fn main() {}\n")

        result = runner.invoke(app, ["list", "--templates-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "rust" in result.stdout

    def test_broken_template_dir(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a broken template directory is reported."""
        template_dir = tmp_path / "bad"
        template_dir.mkdir()
        (template_dir / "template.toml").write_text("file = ")

        result = runner.invoke(app, ["list", "--templates-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error" in result.stdout


# =============================================================================
# New Command Tests
# =============================================================================

class TestNewCommand:
    """Tests for the new command."""

    def test_new_c_application(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test the end-to-end C scenario."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), *DEMO_ARGS, "--option", "include_libhlapi=true", "--yes"],
        )

        assert result.exit_code == 0, result.output
        content = (tmp_path / "demo.c").read_text()
        assert "#include <libhlapi.h>" in content.splitlines()
        assert '"Demo App"' in content
        assert "{{" not in content

    def test_new_short_flags(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test the short flag spellings."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), "-l", "cpp", "-n", "demo", "-t", "Demo", "-a", "Jane", "-y"],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "demo.cpp").exists()

    def test_missing_author(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a missing author fails without writing anything."""
        out = tmp_path / "out"
        result = runner.invoke(
            app,
            ["new", str(out), "--lang", "c", "--name", "demo", "--title", "Demo", "--yes"],
        )

        assert result.exit_code == 1
        assert "author" in result.stdout
        assert not out.exists()

    def test_unknown_lang(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an unknown template is reported."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), "--lang", "cobol", "--name", "demo",
             "--title", "Demo", "--author", "Jane", "--yes"],
        )

        assert result.exit_code == 1
        assert "cobol" in result.stdout

    def test_no_lang_with_yes(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test --yes without --lang fails instead of prompting."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), "--name", "demo", "--title", "Demo", "--author", "Jane", "--yes"],
        )

        assert result.exit_code == 1
        assert "--lang" in result.stdout

    def test_name_derived_from_title(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test the name defaults to the title in snake case."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), "--lang", "c", "--title", "Demo App", "--author", "Jane", "--yes"],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "demo_app.c").exists()

    def test_invalid_option_value(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a bad boolean option is reported."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), *DEMO_ARGS, "--option", "include_libhlapi=maybe", "--yes"],
        )

        assert result.exit_code == 1

    def test_malformed_option(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test --option without '=' is a usage error."""
        result = runner.invoke(
            app,
            ["new", str(tmp_path), *DEMO_ARGS, "--option", "include_libhlapi", "--yes"],
        )

        assert result.exit_code == 2
        assert not (tmp_path / "demo.c").exists()

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test settings loaded from a TOML config file."""
        config = tmp_path / "app.toml"
        config.write_text(
            '[app]\n'
            'lang = "c"\n'
            'name = "demo"\n'
            'title = "Demo App"\n'
            'author = "Jane"\n'
            '\n'
            '[app.options]\n'
            'include_libhlapi = true\n'
        )
        out = tmp_path / "out"

        result = runner.invoke(app, ["new", str(out), "--config", str(config), "--yes"])

        assert result.exit_code == 0, result.output
        assert "#include <libhlapi.h>" in (out / "demo.c").read_text()

    def test_flags_override_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test command line flags win over the config file."""
        config = tmp_path / "app.toml"
        config.write_text(
            '[app]\nlang = "c"\nname = "demo"\ntitle = "Demo"\nauthor = "Jane"\n'
            '[app.options]\ninclude_libhlapi = true\n'
        )
        out = tmp_path / "out"

        result = runner.invoke(
            app,
            ["new", str(out), "--config", str(config), "--lang", "cpp",
             "--author", "Joe", "--yes"],
        )

        assert result.exit_code == 0, result.output
        content = (out / "demo.cpp").read_text()
        assert "author: Joe" in content

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a config file without [app] is reported."""
        config = tmp_path / "app.toml"
        config.write_text('[project]\nname = "demo"\n')

        result = runner.invoke(app, ["new", str(tmp_path), "--config", str(config), "--yes"])

        assert result.exit_code == 1
        assert "[app]" in result.stdout

    def test_templates_dir(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test generating from a user template directory."""
        templates = tmp_path / "templates"
        (templates / "txt").mkdir(parents=True)
        (templates / "txt" / "template.toml").write_text(
            'file = "{{.app.name}}.txt"\nsource = "body.tmpl"\n'
        )
        (templates / "txt" / "body.tmpl").write_text("{{.app.title}} by {{.app.author}}\n")
        out = tmp_path / "out"

        result = runner.invoke(
            app,
            ["new", str(out), "--templates-dir", str(templates), "--lang", "txt",
             "--name", "demo", "--title", "Demo", "--author", "Jane", "--yes"],
        )

        assert result.exit_code == 0, result.output
        assert (out / "demo.txt").read_text() == "Demo by Jane\n"


# =============================================================================
# Option Parsing Tests
# =============================================================================

class TestParseOptionArgs:
    """Tests for parse_option_args."""

    def test_parses_pairs(self) -> None:
        """Test KEY=VALUE pairs are split."""
        assert parse_option_args(["a=1", "b = x "]) == {"a": "1", "b": "x"}

    def test_value_may_contain_equals(self) -> None:
        """Test only the first '=' separates key and value."""
        assert parse_option_args(["greeting=a=b"]) == {"greeting": "a=b"}

    def test_empty_list(self) -> None:
        """Test no options yields an empty mapping."""
        assert parse_option_args([]) == {}

    @pytest.mark.parametrize("value", ["novalue", "=x"])
    def test_rejects_malformed(self, value: str) -> None:
        """Test malformed arguments raise BadParameter."""
        with pytest.raises(typer.BadParameter):
            parse_option_args([value])
