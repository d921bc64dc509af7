"""Tests for chanlog.cli — CLI argument parsing and dispatch."""

import io
import json
import subprocess
import sys
from pathlib import Path

import pytest

from chanlog.cli import _extract_global_flags, main
from chanlog.lib.log_lib import ChannelKind, get_log


@pytest.fixture(autouse=True)
def _cli_env(tmp_config_home, monkeypatch):
    """Isolate from the user's global config and pin the viewer."""
    monkeypatch.setenv("CHANLOG_VIEWER", "view")


def _body(path):
    """Records in a channel file written with the real clock banner."""
    banner, _, rest = path.read_bytes().partition(b"\r\n")
    assert banner.startswith(b"File created ")
    return rest


class TestGlobalFlagExtraction:
    """Test the Docker-style two-pass global flag parsing."""

    def test_base_before_subcommand(self):
        """--base before subcommand should be extracted."""
        global_args, remaining = _extract_global_flags(
            ["--base", "build/Run", "write", "note", "hi"]
        )
        assert global_args.base_path == "build/Run"
        assert remaining == ["write", "note", "hi"]

    def test_base_after_subcommand(self):
        """--base after subcommand args should also be extracted."""
        global_args, remaining = _extract_global_flags(
            ["write", "note", "hi", "-b", "Run"]
        )
        assert global_args.base_path == "Run"
        assert "-b" not in remaining

    def test_status_and_no_viewer(self):
        global_args, _ = _extract_global_flags(
            ["-s", "Nightly", "--no-viewer", "write", "err", "x"]
        )
        assert global_args.status == "Nightly"
        assert global_args.launch_viewer is False

    def test_no_global_flags(self):
        """When no global flags, all args pass through."""
        global_args, remaining = _extract_global_flags(["channels"])
        assert global_args.base_path is None
        assert global_args.status is None
        assert global_args.launch_viewer is None
        assert global_args.config is None
        assert remaining == ["channels"]

    def test_extraction_is_repeatable(self):
        """The flag table is not consumed by a first parse."""
        _extract_global_flags(["-b", "One"])
        global_args, _ = _extract_global_flags(["-b", "Two"])
        assert global_args.base_path == "Two"


class TestMainEntryPoint:
    """Test the main() function with various argv inputs."""

    def test_version_flag(self, capsys):
        """--version should print version and exit 0."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "chanlog" in capsys.readouterr().out

    def test_no_args_shows_help(self, capsys):
        """Bare 'chanlog' with no args should show help and return 0."""
        assert main([]) == 0
        captured = capsys.readouterr()
        assert "write" in captured.out
        assert "channels" in captured.out

    def test_unknown_subcommand_fails(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["nonexistent"])
        assert exc_info.value.code != 0

    def test_channels_command(self, capsys, tmp_path):
        assert main(["channels"]) == 0
        assert "Available channels:" in capsys.readouterr().out
        assert list(tmp_path.glob("Log.*")) == []


class TestWriteCommand:
    """chanlog write end to end."""

    def test_write_error(self, tmp_path, capsys):
        result = main(["--no-viewer", "write", "error", "link failed"])
        assert result == 0
        assert capsys.readouterr().err == "Error: link failed\r\n"
        assert _body(tmp_path / "Log.err") == b"Error: link failed\r\n"

    def test_several_messages(self, tmp_path, capsys):
        main(["write", "note", "one", "two"])
        assert capsys.readouterr().out == "one\r\ntwo\r\n"
        assert _body(tmp_path / "Log.log") == b"one\r\ntwo\r\n"

    def test_percent_written_verbatim(self, capsys):
        main(["write", "scrn", "50% done"])
        assert capsys.readouterr().out == "50% done\r\n"

    def test_base_and_status(self, tmp_path):
        main(["write", "file", "step 1", "--base", "Build", "--status", "CI"])
        assert _body(tmp_path / "Build.file") == b"CI: step 1\r\n"

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("first\nsecond\r\n"))
        main(["write", "screen"])
        assert capsys.readouterr().out == "first\r\nsecond\r\n"

    def test_dash_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("piped\n"))
        main(["write", "screen", "-"])
        assert capsys.readouterr().out == "piped\r\n"

    def test_viewer_launched_for_errors(self, default_launches):
        main(["write", "err", "boom"])
        assert default_launches == ['view "Log.err"']

    def test_no_viewer_flag(self, default_launches):
        main(["--no-viewer", "write", "err", "boom"])
        assert default_launches == []

    def test_no_viewer_for_warnings(self, default_launches):
        main(["write", "warn", "careful"])
        assert default_launches == []

    def test_project_config_used(self, tmp_path):
        (tmp_path / ".chanlog.json").write_text(
            '{"base_path": "FromConfig", "launch_viewer": false}')
        main(["write", "note", "configured"])
        assert _body(tmp_path / "FromConfig.log") == b"configured\r\n"

    def test_string_false_disables_viewer(self, tmp_path, default_launches):
        (tmp_path / ".chanlog.json").write_text('{"launch_viewer": "false"}')
        main(["write", "err", "boom"])
        assert default_launches == []

    def test_unknown_channel(self, capsys, tmp_path):
        """Bad channel names fail before any log file is created."""
        assert main(["write", "debug", "x"]) == 2
        assert "Unknown channel 'debug'" in capsys.readouterr().err
        assert list(tmp_path.glob("Log.*")) == []

    def test_singleton_configured(self):
        main(["--no-viewer", "write", "note", "x", "--base", "Run"])
        assert get_log().path_of(ChannelKind.NOTE) == Path("Run.log")


@pytest.mark.slow
class TestEntryPoints:
    """Run the CLI as a real process."""

    def test_python_m_chanlog_version(self):
        result = subprocess.run(
            [sys.executable, "-m", "chanlog", "--version"],
            capture_output=True, text=True, timeout=30,
        )
        assert result.returncode == 0
        assert "chanlog" in result.stdout

    def test_python_m_chanlog_write(self, tmp_path):
        result = subprocess.run(
            [sys.executable, "-m", "chanlog", "--no-viewer",
             "write", "warn", "disk low"],
            capture_output=True, text=True, timeout=30, cwd=tmp_path,
        )
        assert result.returncode == 0
        assert "Warning: disk low" in result.stderr
        assert (tmp_path / "Log.warn").read_bytes().endswith(b"Warning: disk low\r\n")


class TestConfigCommand:
    """chanlog config show/set/unset."""

    def test_show_defaults(self, capsys):
        assert main(["config"]) == 0
        out = capsys.readouterr().out
        assert "base_path: Log" in out
        assert "viewer: view" in out
        assert "launch_viewer: True" in out

    def test_show_applies_global_flags(self, capsys):
        main(["config", "show", "--base", "Run"])
        assert "base_path: Run" in capsys.readouterr().out

    def test_set_writes_project_config(self, tmp_path, capsys):
        assert main(["config", "set", "base_path", "logs/Run"]) == 0
        data = json.loads((tmp_path / ".chanlog.json").read_text())
        assert data == {"base_path": "logs/Run"}
        assert "[OK] base_path saved to" in capsys.readouterr().out

    def test_set_keeps_other_keys(self, tmp_path):
        main(["config", "set", "status", "CI"])
        main(["config", "set", "base-path", "Run"])
        data = json.loads((tmp_path / ".chanlog.json").read_text())
        assert data == {"status": "CI", "base_path": "Run"}

    def test_set_bool_stored_as_bool(self, tmp_path):
        main(["config", "set", "launch_viewer", "off"])
        data = json.loads((tmp_path / ".chanlog.json").read_text())
        assert data["launch_viewer"] is False

    def test_set_global(self, tmp_config_home, tmp_path):
        assert main(["config", "set", "viewer", "less", "--global"]) == 0
        data = json.loads((tmp_config_home / ".chanlog" / "config.json").read_text())
        assert data == {"viewer": "less"}
        assert not (tmp_path / ".chanlog.json").exists()

    def test_setting_used_by_write(self, tmp_path):
        main(["config", "set", "base_path", "Saved"])
        main(["--no-viewer", "write", "note", "x"])
        assert _body(tmp_path / "Saved.log") == b"x\r\n"

    def test_unset(self, tmp_path):
        main(["config", "set", "status", "CI"])
        assert main(["config", "unset", "status"]) == 0
        assert json.loads((tmp_path / ".chanlog.json").read_text()) == {}

    def test_unknown_key(self, capsys, tmp_path):
        assert main(["config", "set", "colour", "red"]) == 2
        assert "Unknown config key 'colour'" in capsys.readouterr().err
        assert not (tmp_path / ".chanlog.json").exists()

    def test_bad_bool(self, capsys, tmp_path):
        assert main(["config", "set", "launch_viewer", "maybe"]) == 2
        assert "not an on/off value" in capsys.readouterr().err
        assert not (tmp_path / ".chanlog.json").exists()

    def test_missing_value(self, capsys):
        assert main(["config", "set", "status"]) == 2
        assert "No value given" in capsys.readouterr().err
