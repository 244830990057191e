import os
import types
from pathlib import Path

import pytest

import serversetup.bootstrap.identity as identity
from serversetup.bootstrap.identity import LocalIdentityManager
from serversetup.errors import KeyGenError


def _fake_keygen(calls, rc=0, stderr=""):
    def fake_run(argv, **kw):
        calls.append(argv)
        if rc == 0:
            path = Path(argv[argv.index("-f") + 1])
            path.write_text("PRIVATE")
            Path(str(path) + ".pub").write_text("ssh-rsa AAAA generated")
        return types.SimpleNamespace(returncode=rc, stdout="", stderr=stderr)
    return fake_run


def test_generates_when_missing(monkeypatch, tmp_path: Path):
    calls = []
    monkeypatch.setattr(identity.subprocess, "run", _fake_keygen(calls))
    key = tmp_path / ".ssh" / "id_rsa"

    pair = LocalIdentityManager(private_key_path=key).ensure_key_pair()

    assert pair.private_key_path == key
    assert pair.public_key_path == tmp_path / ".ssh" / "id_rsa.pub"
    assert key.exists() and pair.public_key_path.exists()
    assert len(calls) == 1
    argv = calls[0]
    assert argv[0] == "ssh-keygen"
    assert argv[argv.index("-t") + 1] == "rsa"
    assert argv[argv.index("-b") + 1] == "2048"
    assert argv[argv.index("-N") + 1] == ""


def test_existing_key_is_reused(monkeypatch, tmp_path: Path):
    calls = []
    monkeypatch.setattr(identity.subprocess, "run", _fake_keygen(calls))
    key = tmp_path / "id_rsa"
    key.write_text("EXISTING")
    (tmp_path / "id_rsa.pub").write_text("ssh-rsa EXISTING")
    os.utime(key, (1_000_000, 1_000_000))

    mgr = LocalIdentityManager(private_key_path=key)
    first = mgr.ensure_key_pair()
    second = mgr.ensure_key_pair()

    assert first == second
    assert calls == []
    assert key.stat().st_mtime == 1_000_000
    assert key.read_text() == "EXISTING"


def test_second_call_does_not_regenerate(monkeypatch, tmp_path: Path):
    calls = []
    monkeypatch.setattr(identity.subprocess, "run", _fake_keygen(calls))
    mgr = LocalIdentityManager(private_key_path=tmp_path / "id_rsa")
    mgr.ensure_key_pair()
    mtime = (tmp_path / "id_rsa").stat().st_mtime
    mgr.ensure_key_pair()
    assert len(calls) == 1
    assert (tmp_path / "id_rsa").stat().st_mtime == mtime


def test_keygen_failure(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(identity.subprocess, "run", _fake_keygen([], rc=1, stderr="Saving key failed"))
    with pytest.raises(KeyGenError) as ei:
        LocalIdentityManager(private_key_path=tmp_path / "id_rsa").ensure_key_pair()
    assert ei.value.exit_code == 1
    assert "Saving key failed" in str(ei.value)


def test_keygen_not_installed(monkeypatch, tmp_path: Path):
    def boom(argv, **kw):
        raise FileNotFoundError(2, "No such file or directory", "ssh-keygen")
    monkeypatch.setattr(identity.subprocess, "run", boom)
    with pytest.raises(KeyGenError):
        LocalIdentityManager(private_key_path=tmp_path / "id_rsa").ensure_key_pair()


def test_rejects_short_keys(tmp_path: Path):
    with pytest.raises(ValueError):
        LocalIdentityManager(private_key_path=tmp_path / "id_rsa", bits=1024)


def test_default_path_is_home_ssh(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert LocalIdentityManager().key_pair.private_key_path == tmp_path / ".ssh" / "id_rsa"
