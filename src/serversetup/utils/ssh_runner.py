# src/serversetup/utils/ssh_runner.py

from __future__ import annotations

import time
from typing import Optional

import paramiko

# Bytes pulled per recv/recv_stderr call
RECV_CHUNK = 32768


class SSHRunner:
    """A connected root/admin session on the host being bootstrapped."""

    def __init__(self, client: paramiko.SSHClient, poll_interval: float = 0.05):
        self.client = client
        self.poll_interval = poll_interval

    def run(
        self,
        cmd: str,
        *,
        timeout: Optional[float] = None,
    ) -> tuple[int, str, str]:
        """
        Run *cmd* in the remote user's shell and wait for it to exit.

        stdout and stderr are drained as they arrive: both share one channel
        window, so leaving either unread can stall a chatty command.
        rc is -1 when the channel closed without reporting an exit status.
        """
        stdin, stdout, stderr = self.client.exec_command(cmd, timeout=timeout)
        chan = stdout.channel

        out_chunks: list[bytes] = []
        err_chunks: list[bytes] = []
        while True:
            if chan.recv_ready():
                out_chunks.append(chan.recv(RECV_CHUNK))
                continue
            if chan.recv_stderr_ready():
                err_chunks.append(chan.recv_stderr(RECV_CHUNK))
                continue
            if chan.exit_status_ready():
                break
            time.sleep(self.poll_interval)

        out_chunks.append(stdout.read())
        err_chunks.append(stderr.read())
        rc = chan.recv_exit_status()

        out = b"".join(out_chunks).decode("utf-8", errors="replace")
        err = b"".join(err_chunks).decode("utf-8", errors="replace")
        return rc, out, err

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "SSHRunner":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
