"""Tests for the command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from sshcon import __version__, cli
from sshcon.commands import Invocation
from sshcon.errors import ChildProcessFailure

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def launched(monkeypatch):
    calls: list[Invocation] = []

    def fake_run(invocation):
        calls.append(invocation)
        return 0

    monkeypatch.setattr(cli, "run", fake_run)
    return calls


def invoke(ssh_config: Path, *args, **kwargs):
    return runner.invoke(cli.app, ["--config", str(ssh_config), *args], **kwargs)


class TestShow:
    def test_table(self, ssh_config):
        result = invoke(ssh_config, "show")
        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "beta" in result.output
        assert "10.0.0.6" in result.output

    def test_filter(self, ssh_config):
        result = invoke(ssh_config, "show", "--filter", "admin")
        assert result.exit_code == 0
        assert "beta" in result.output
        assert "alpha" not in result.output

    def test_missing_config(self, tmp_path):
        result = invoke(tmp_path / "missing", "show")
        assert result.exit_code == 1
        assert "does not exist" in " ".join(result.output.split())

    def test_invalid_utf8_config(self, tmp_path):
        path = tmp_path / "config"
        path.write_bytes(b"Host a\n  HostName \xff\xfe\n")

        result = invoke(path, "show")
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "not valid UTF-8" in " ".join(result.output.split())

    def test_bracketed_alias(self, tmp_path):
        path = tmp_path / "config"
        path.write_text("Host we[/b]\n    HostName h\n")

        result = invoke(path, "show")
        assert result.exit_code == 0
        assert "we[/b]" in result.output

    def test_version(self):
        result = runner.invoke(cli.app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestUse:
    def test_by_index(self, ssh_config, launched):
        result = invoke(ssh_config, "use", "1")
        assert result.exit_code == 0
        assert launched == [Invocation("ssh", ["beta"])]

    def test_by_name_with_args(self, ssh_config, launched):
        result = invoke(ssh_config, "use", "alpha", "-a", "-t", "--command", "mosh")
        assert result.exit_code == 0
        assert launched == [Invocation("mosh", ["alpha", "-t"])]

    def test_unknown_name(self, ssh_config, launched):
        result = invoke(ssh_config, "use", "gamma")
        assert result.exit_code == 1
        assert "gamma" in result.output
        assert launched == []

    def test_index_out_of_range(self, ssh_config, launched):
        result = invoke(ssh_config, "use", "5")
        assert result.exit_code == 1
        assert "incorrect index (5)" in result.output

    def test_child_status_propagates(self, ssh_config, monkeypatch):
        def failing_run(invocation):
            raise ChildProcessFailure(invocation.program, 255)

        monkeypatch.setattr(cli, "run", failing_run)

        result = invoke(ssh_config, "use", "alpha")
        assert result.exit_code == 255


class TestExport:
    def test_clipboard(self, ssh_config, monkeypatch):
        copied = []
        monkeypatch.setattr(cli, "copy_to_clipboard", copied.append)

        result = invoke(ssh_config, "export", "0", "-a", "-v")
        assert result.exit_code == 0
        assert copied == ["ssh alpha -v"]


    def test_bracketed_extra_arg(self, ssh_config, monkeypatch):
        copied = []
        monkeypatch.setattr(cli, "copy_to_clipboard", copied.append)

        result = invoke(ssh_config, "export", "alpha", "-a", "-o[/x]")
        assert result.exit_code == 0
        assert copied == ["ssh alpha -o[/x]"]
        assert "-o[/x]" in result.output


class TestCopy:
    def test_rewrites_paths(self, ssh_config, launched):
        result = invoke(ssh_config, "copy", "beta", "con:/var/log/syslog", ".")
        assert result.exit_code == 0
        assert launched == [Invocation("scp", ["beta:/var/log/syslog", "."])]


class TestTunnel:
    def test_local(self, ssh_config, launched):
        result = invoke(
            ssh_config, "tunnel", "alpha", "local", "-l", "8080", "-r", "80", "-H", "10.0.0.1"
        )
        assert result.exit_code == 0
        assert launched[0].args == ["-L", "8080", ":", "10.0.0.1", ":", "80", "alpha"]

    def test_remote_default_host(self, ssh_config, launched):
        result = invoke(ssh_config, "tunnel", "0", "remote", "-l", "3000", "-r", "9000")
        assert result.exit_code == 0
        assert launched[0].args == ["-R", "9000", ":", "127.0.0.1", ":", "3000", "alpha"]

    def test_dynamic(self, ssh_config, launched):
        result = invoke(ssh_config, "tunnel", "beta", "dynamic", "-l", "1080")
        assert result.exit_code == 0
        assert launched[0].args == ["-D", "1080", "beta"]

    def test_mode_required(self, ssh_config, launched):
        result = invoke(ssh_config, "tunnel", "beta")
        assert result.exit_code == 1
        assert "tunnel mode not specified" in result.output
        assert launched == []

    def test_missing_remote_port(self, ssh_config, launched):
        result = invoke(ssh_config, "tunnel", "beta", "local", "-l", "8080")
        assert result.exit_code == 2
        assert launched == []

    def test_port_out_of_range(self, ssh_config, launched):
        result = invoke(ssh_config, "tunnel", "beta", "dynamic", "-l", "70000")
        assert result.exit_code == 2


class TestEditing:
    def test_add(self, ssh_config):
        result = invoke(
            ssh_config, "add", "gamma", "10.0.0.7", "-u", "ops", "-i", "~/.ssh/gamma"
        )
        assert result.exit_code == 0
        text = ssh_config.read_text()
        assert "Host gamma\n" in text
        assert "    IdentityFile ~/.ssh/gamma\n" in text
        assert "IdentityFilesOnly" not in text

    def test_delete_confirmed(self, ssh_config):
        result = invoke(ssh_config, "delete", "0", input="yes\n")
        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "Host alpha" not in ssh_config.read_text()
        assert "Host beta" in ssh_config.read_text()

    def test_delete_cancelled(self, ssh_config, sample_text):
        result = invoke(ssh_config, "delete", "0", input="no\n")
        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert ssh_config.read_text() == sample_text

    def test_delete_no_such_index(self, ssh_config, sample_text):
        result = invoke(ssh_config, "delete", "7")
        assert result.exit_code == 0
        assert "nothing deleted" in result.output
        assert ssh_config.read_text() == sample_text

    def test_delete_bad_index(self, ssh_config, sample_text):
        result = invoke(ssh_config, "delete", "alpha")
        assert result.exit_code == 1
        assert ssh_config.read_text() == sample_text

    def test_add_bracketed_alias(self, ssh_config):
        result = invoke(ssh_config, "add", "we[/b]", "10.0.0.9", "-u", "ops")
        assert result.exit_code == 0
        assert "we[/b]" in result.output
        assert "Host we[/b]\n" in ssh_config.read_text()

    def test_delete_bracketed_alias(self, tmp_path):
        path = tmp_path / "config"
        path.write_text("Host we[/b]\n    HostName h\nHost keep\n")

        result = invoke(path, "delete", "0", input="yes\n")
        assert result.exit_code == 0
        assert "we[/b]" in result.output
        assert path.read_text() == "Host keep\n"


class TestSettings:
    def test_save_and_use(self, ssh_config, isolated_home, launched):
        result = runner.invoke(
            cli.app,
            ["settings", "--ssh-config", str(ssh_config), "--ssh-command", "mosh"],
        )
        assert result.exit_code == 0
        assert (isolated_home / ".config" / "sshcon" / "config.json").exists()

        result = runner.invoke(cli.app, ["use", "beta"])
        assert result.exit_code == 0
        assert launched == [Invocation("mosh", ["beta"])]
