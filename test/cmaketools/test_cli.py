"""Tests for the cmaketools command line."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cmaketools.cli import TopLevelCommands, top_level
from cmaketools.ls_config import Architecture, HostPlatform, Os


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path):
    monkeypatch.setenv("CMAKETOOLS_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


class TestAssetName:
    def test_explicit_platform(self, cli_runner) -> None:
        result = cli_runner.invoke(TopLevelCommands.asset_name, ["--os", "mac", "--arch", "aarch64"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "neocmakelsp-aarch64-apple-darwin"

    def test_unsupported_platform(self, cli_runner) -> None:
        result = cli_runner.invoke(TopLevelCommands.asset_name, ["--os", "windows", "--arch", "aarch64"])
        assert result.exit_code == 1
        assert "unsupported platform" in result.output

    def test_current_platform_is_default(self, cli_runner) -> None:
        host_platform = HostPlatform(os=Os.LINUX, arch=Architecture.X86_64)
        with patch("cmaketools.cli.PlatformUtils.get_host_platform", return_value=host_platform):
            result = cli_runner.invoke(top_level, ["asset-name", "--arch", "aarch64"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "neocmakelsp-aarch64-unknown-linux-gnu"


class TestCommand:
    def test_prints_launch_command_for_binary_on_path(self, cli_runner, tmp_path) -> None:
        with patch("cmaketools.resolver.shutil.which", return_value="/usr/bin/neocmakelsp"):
            result = cli_runner.invoke(top_level, ["command", "--work-dir", str(tmp_path / "work")])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output.strip().splitlines()[-1]) == {"command": "/usr/bin/neocmakelsp", "args": ["stdio"], "env": {}}

    def test_reports_provisioning_errors(self, cli_runner, tmp_path) -> None:
        host_platform = HostPlatform(os=Os.LINUX, arch=Architecture.X86)
        with patch("cmaketools.provisioner.PlatformUtils.get_host_platform", return_value=host_platform):
            result = cli_runner.invoke(top_level, ["command", "--work-dir", str(tmp_path / "work"), "--no-system-binary"])
        assert result.exit_code == 1
        assert "unsupported platform x86 on linux" in result.output

    def test_reports_malformed_configuration(self, cli_runner, isolated_home, tmp_path) -> None:
        isolated_home.mkdir()
        (isolated_home / "cmaketools_config.yml").write_text("use_system_binary: maybe\n", encoding="utf-8")
        result = cli_runner.invoke(top_level, ["command", "--work-dir", str(tmp_path / "work")])
        assert result.exit_code == 1
        assert "Invalid value for 'use_system_binary'" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
