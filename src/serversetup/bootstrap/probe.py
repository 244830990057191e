# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/probe.py

from __future__ import annotations

import logging
import socket

from serversetup.utils.ssh import SSH_SESSION_ERRORS, open_password_ssh
from .models import Reachability

log = logging.getLogger("serversetup")

ROOT_USER = "root"


class ReachabilityProbe:
    """
    Two ordered checks against a host's SSH port:

      1. transport  - can we open a TCP connection at all?
      2. auth       - does root's password get us a working session?

    UNREACHABLE is worth waiting on (the host may still be booting).
    AUTH_FAILED is not: somebody has to fix the credentials.
    """

    def __init__(self, transport_timeout: float = 3.0, auth_timeout: float = 10.0):
        self.transport_timeout = transport_timeout
        self.auth_timeout = auth_timeout

    def probe(self, host: str, port: int, root_password: str) -> Reachability:
        if not self.check_transport(host, port):
            return Reachability.UNREACHABLE
        if not self.check_auth(host, port, root_password):
            return Reachability.AUTH_FAILED
        log.info("[probe] %s:%d ready", host, port)
        return Reachability.READY

    def check_transport(self, host: str, port: int) -> bool:
        log.debug("[probe] transport %s:%d (timeout %ss)", host, port, self.transport_timeout)
        try:
            sock = socket.create_connection((host, port), timeout=self.transport_timeout)
        except OSError as e:
            log.warning("[probe] %s:%d unreachable: %s", host, port, e)
            return False
        sock.close()
        return True

    def check_auth(self, host: str, port: int, root_password: str) -> bool:
        log.debug("[probe] auth %s@%s:%d (timeout %ss)", ROOT_USER, host, port, self.auth_timeout)
        try:
            with open_password_ssh(
                host, port, ROOT_USER, root_password, connect_timeout=self.auth_timeout,
            ) as runner:
                rc, _, _ = runner.run("exit", timeout=self.auth_timeout)
        except SSH_SESSION_ERRORS as e:
            log.error("[probe] %s:%d root login failed: %s: %s", host, port, type(e).__name__, e)
            return False

        if rc != 0:
            log.error("[probe] %s:%d root session exited with %d", host, port, rc)
            return False
        return True
