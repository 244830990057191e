import pytest

from serversetup.bootstrap.executor import RemoteExecutor
from serversetup.errors import ExecError


def test_success(fake_host):
    outcome = RemoteExecutor().run_as_root("10.0.0.5", 22, "x", "echo ok")
    assert outcome.exit_code == 0
    assert outcome.succeeded
    assert outcome.stdout == "ok\n"
    assert fake_host.commands == [("root", "echo ok")]
    assert fake_host.connects[0]["timeout"] == 20.0


def test_failed_command_is_an_outcome_not_an_error(fake_host):
    outcome = RemoteExecutor().run_as_root("10.0.0.5", 22, "x", "exit 1")
    assert outcome.exit_code == 1
    assert outcome.succeeded is False


def test_auth_rejected_is_exec_error(fake_host):
    with pytest.raises(ExecError):
        RemoteExecutor().run_as_root("10.0.0.5", 22, "wrong", "echo ok")
    assert fake_host.commands == []


def test_network_error_is_exec_error(fake_host):
    fake_host.connect_error = ConnectionRefusedError(111, "Connection refused")
    with pytest.raises(ExecError):
        RemoteExecutor().run_as_root("10.0.0.5", 22, "x", "echo ok")


def test_session_dropped_before_exit_status(fake_host):
    fake_host.responses["reboot"] = ("", "", -1)
    with pytest.raises(ExecError):
        RemoteExecutor().run_as_root("10.0.0.5", 22, "x", "reboot")
