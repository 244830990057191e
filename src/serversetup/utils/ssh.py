# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

import paramiko
from serversetup.utils.ssh_runner import SSHRunner

log = logging.getLogger("serversetup")

# What a failed password session can raise: auth rejection and protocol
# errors are SSHException subclasses, refused/timeout/DNS are OSError.
SSH_SESSION_ERRORS = (paramiko.SSHException, OSError, EOFError)


def open_password_ssh(
    host: str,
    port: int,
    username: str,
    password: str,
    *,
    connect_timeout: float = 20.0,
) -> SSHRunner:
    """
    Open a password-authenticated session.

    Host keys are accepted on first use: the targets are freshly
    provisioned and not yet in the operator's known_hosts.
    """
    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    log.debug("[ssh] connecting to %s@%s:%d", username, host, port)
    try:
        client.connect(
            hostname=host,
            port=port,
            username=username,
            password=password,
            timeout=connect_timeout,
            auth_timeout=connect_timeout,
            banner_timeout=connect_timeout,
            allow_agent=False,
            look_for_keys=False,
        )
    except SSH_SESSION_ERRORS:
        client.close()
        raise

    return SSHRunner(client)
