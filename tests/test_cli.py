"""
Tests for CLI commands — run, scan, config check, facts, global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from restartmonkey.core.use_cases import scan as scan_use_case
from restartmonkey.main import cli


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "restart services that still use replaced libraries" in result.output
        assert "--wait-count" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_negative_wait_count_rejected(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--wait-count", "-1", "run"])
        assert result.exit_code == 2


class TestRunCommand:
    """Tests for the run command (and the bare invocation)."""

    def test_requires_root(self, monkeypatch):
        monkeypatch.setattr("restartmonkey.core.context.os.geteuid", lambda: 1000)
        runner = CliRunner()
        result = runner.invoke(cli, ["run"])
        assert result.exit_code == 1
        assert "Must run as root" in result.output

    def test_bare_invocation_runs(self, monkeypatch):
        monkeypatch.setattr("restartmonkey.core.context.os.geteuid", lambda: 1000)
        runner = CliRunner()
        result = runner.invoke(cli, ["--cron"])
        assert result.exit_code == 1
        assert "Must run as root" in result.output

    def test_requires_root_json(self, monkeypatch):
        monkeypatch.setattr("restartmonkey.core.context.os.geteuid", lambda: 1000)
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output) == {"error": "Must run as root"}


class TestConfigCheck:
    """Tests for the config check command."""

    def _write_config(self, tmp_path: Path, content: str) -> Path:
        config = tmp_path / "restartmonkey.conf"
        config.write_text(textwrap.dedent(content))
        return config

    def test_valid(self, tmp_path: Path):
        config = self._write_config(tmp_path, """\
            whitelist:
              - nginx
              - crond
            blacklist:
              default:
                - postgresql
        """)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Whitelist: crond, nginx" in result.output
        assert "postgresql" in result.output
        assert "sshd" in result.output

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--config", str(tmp_path / "none.conf"), "config", "check"],
        )
        assert result.exit_code == 0
        assert "missing, defaults only" in result.output
        assert "Whitelist: -" in result.output

    def test_invalid(self, tmp_path: Path):
        config = self._write_config(tmp_path, "whitelist: [nginx\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "Configuration errors" in result.output
        assert "Invalid YAML" in result.output

    def test_json(self, tmp_path: Path):
        config = self._write_config(tmp_path, "whitelist: [nginx]\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["whitelist"] == ["nginx"]
        assert "halt" in data["blacklist"]


class TestScanCommand:
    """Tests for the read-only scan command."""

    @pytest.fixture
    def scan_root(self, fake_proc, monkeypatch):
        real = scan_use_case.run_scan

        def run_scan(proc_root=None, reboot_file=None):
            return real(fake_proc.root, reboot_file)

        monkeypatch.setattr(scan_use_case, "run_scan", run_scan)
        return fake_proc

    def test_clean(self, scan_root, tmp_path):
        scan_root.add(100, "/usr/sbin/nginx")
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "--reboot-file", str(tmp_path / "none")])
        assert result.exit_code == 0
        assert "No processes use replaced libraries or executables" in result.output

    def test_affected(self, scan_root, tmp_path):
        scan_root.add(100, "/usr/sbin/nginx", deleted=True, cmdline=["nginx: master"])
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "--reboot-file", str(tmp_path / "none")])
        assert result.exit_code == 0
        assert "Affected Exes:" in result.output
        assert "* /usr/sbin/nginx [100] (nginx: master)" in result.output

    def test_json(self, scan_root, tmp_path):
        scan_root.add(100, "/usr/sbin/nginx", deleted=True)
        runner = CliRunner()
        result = runner.invoke(
            cli, ["scan", "--json", "--reboot-file", str(tmp_path / "none")],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["updated_pids"] == [100]
        assert data["reboot_services"] == []


class TestFactsCommand:
    """Tests for the facts command."""

    def test_pending_reboot(self, tmp_path: Path):
        marker = tmp_path / "reboot-monkey"
        marker.write_text("vm-reboot\ndbus")
        runner = CliRunner()
        result = runner.invoke(cli, ["facts", "--reboot-file", str(marker)])
        assert result.exit_code == 0
        assert result.output.strip() == "reboot_monkey_services=vm-reboot,dbus"

    def test_no_marker(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["facts", "--reboot-file", str(tmp_path / "none")])
        assert result.exit_code == 0
        assert result.output.strip() == "reboot_monkey_services="
