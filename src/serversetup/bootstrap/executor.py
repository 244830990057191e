# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/executor.py

from __future__ import annotations

import logging
from typing import Optional

from serversetup.errors import ExecError
from serversetup.utils.ssh import SSH_SESSION_ERRORS, open_password_ssh
from .models import CommandOutcome

log = logging.getLogger("serversetup")

ROOT_USER = "root"


class RemoteExecutor:
    """
    Runs administrative commands on the target as root.

    Connection problems raise ExecError. A command that ran and exited
    non-zero is a normal CommandOutcome with succeeded == False; what to
    do about it is up to the installer that asked for it.
    """

    def __init__(self, connect_timeout: float = 20.0, command_timeout: Optional[float] = None):
        self.connect_timeout = connect_timeout
        self.command_timeout = command_timeout

    def run_as_root(self, host: str, port: int, root_password: str, command: str) -> CommandOutcome:
        log.debug("[exec] (%s:%d) $ %s", host, port, command)
        try:
            with open_password_ssh(
                host, port, ROOT_USER, root_password, connect_timeout=self.connect_timeout,
            ) as runner:
                rc, out, err = runner.run(command, timeout=self.command_timeout)
        except SSH_SESSION_ERRORS as e:
            raise ExecError(
                f"Could not run command on {ROOT_USER}@{host}:{port}: {type(e).__name__}: {e}"
            ) from e

        if rc < 0:
            raise ExecError(f"Session to {host}:{port} closed before the command reported an exit status")

        outcome = CommandOutcome(exit_code=rc, stdout=out, stderr=err)
        if outcome.succeeded:
            log.debug("[exec] (%s:%d) exit 0", host, port)
        else:
            log.warning("[exec] (%s:%d) '%s' exited with %d", host, port, command, rc)
        return outcome
