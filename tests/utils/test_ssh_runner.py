import types

from serversetup.utils.ssh_runner import SSHRunner


class _ChattyChannel:
    """
    A command that writes a lot to stderr and only finishes (and lets
    stdout reach EOF) once somebody has read all of it.
    """

    def __init__(self, out: bytes, err: bytes, rc: int = 0):
        self._out = out
        self._err = err
        self._rc = rc

    def recv_ready(self):
        return bool(self._out) and not self._err

    def recv(self, n):
        chunk, self._out = self._out[:n], self._out[n:]
        return chunk

    def recv_stderr_ready(self):
        return bool(self._err)

    def recv_stderr(self, n):
        chunk, self._err = self._err[:n], self._err[n:]
        return chunk

    def exit_status_ready(self):
        return not self._out and not self._err

    def recv_exit_status(self):
        return self._rc


class _Stream:
    def __init__(self, channel, stderr=False):
        self.channel = channel
        self._stderr = stderr

    def read(self):
        # a blocking read of stdout while stderr is full would hang for real
        assert self._stderr or not self.channel._err, "stdout read while stderr still pending"
        return b""


class _Client:
    def __init__(self, channel):
        self.channel = channel
        self.closed = False

    def exec_command(self, cmd, timeout=None):
        stdin = types.SimpleNamespace(write=lambda *a: None, flush=lambda: None)
        return stdin, _Stream(self.channel), _Stream(self.channel, stderr=True)

    def close(self):
        self.closed = True


def test_stderr_is_drained_alongside_stdout():
    err = b"warning: deprecated option\n" * 50_000
    chan = _ChattyChannel(out=b"done\n", err=err, rc=3)

    rc, out, got_err = SSHRunner(_Client(chan), poll_interval=0).run("apt-get -y upgrade")

    assert rc == 3
    assert out == "done\n"
    assert got_err.encode() == err


def test_closes_client_on_exit():
    client = _Client(_ChattyChannel(b"", b""))
    with SSHRunner(client) as runner:
        assert runner.run("true") == (0, "", "")
    assert client.closed
