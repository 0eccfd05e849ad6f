import subprocess

import pytest

from fleet_print_service.errors import TransportError
from fleet_print_service.runner import run_command


class FakeProc:
    def __init__(self, returncode=0, stdout="", stderr=""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def test_run_command_captures_output_with_stdin_closed(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return FakeProc(returncode=0, stdout="ok\n", stderr="")

    monkeypatch.setattr("subprocess.run", fake_run)

    result = run_command("rpcclient", ["-c", "enumprinters"])

    assert result.exit_code == 0
    assert result.stdout == "ok\n"
    assert result.ok

    cmd, kwargs = calls[0]
    assert cmd == ["rpcclient", "-c", "enumprinters"]
    assert kwargs["stdin"] is subprocess.DEVNULL
    assert kwargs["capture_output"] is True
    assert kwargs["text"] is True
    assert kwargs["timeout"] is None


def test_run_command_does_not_raise_on_non_zero_exit(monkeypatch):
    monkeypatch.setattr("subprocess.run", lambda *a, **k: FakeProc(1, "", "NT_STATUS_LOGON_FAILURE"))

    result = run_command("rpcclient", [])

    assert result.exit_code == 1
    assert not result.ok
    assert result.failure_reason() == "NT_STATUS_LOGON_FAILURE"


def test_run_command_missing_program_is_transport_error(monkeypatch):
    def fake_run(*a, **k):
        raise FileNotFoundError("rpcclient")

    monkeypatch.setattr("subprocess.run", fake_run)

    with pytest.raises(TransportError, match="not found in PATH"):
        run_command("rpcclient", [])


def test_run_command_timeout_is_transport_error(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr("subprocess.run", fake_run)

    with pytest.raises(TransportError, match="timed out"):
        run_command("smbclient", ["-L", "//host"], timeout=2)


def test_failure_reason_falls_back_to_stdout(monkeypatch):
    monkeypatch.setattr("subprocess.run", lambda *a, **k: FakeProc(2, "error on stdout\n", ""))
    assert run_command("lp", []).failure_reason() == "error on stdout"
