"""
Smoke tests — verify the package is healthy.

These tests ensure the basic scaffolding works:
- Package imports successfully
- Every CLI command is registered
- Version is set
"""

from click.testing import CliRunner

from restartmonkey import __version__
from restartmonkey.main import cli


class TestBootstrap:
    """Verify the package bootstrap is healthy."""

    def test_version_is_set(self):
        """Version string should be defined and non-empty."""
        assert __version__
        assert isinstance(__version__, str)

    def test_cli_version(self):
        """CLI --version should print the version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_commands_registered(self):
        """Every subcommand should answer --help."""
        runner = CliRunner()
        for args in (["run"], ["scan"], ["facts"], ["config", "check"]):
            result = runner.invoke(cli, [*args, "--help"])
            assert result.exit_code == 0, args
