# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/provisioner.py

from __future__ import annotations

import logging
import shlex

from serversetup.errors import ProvisionError
from serversetup.utils.ssh import SSH_SESSION_ERRORS, open_password_ssh
from .models import KeyPair

log = logging.getLogger("serversetup")


def authorized_keys_command(public_key: str) -> str:
    """
    Shell snippet that installs *public_key* for the login user.
    Appends only when the exact line is missing, so re-running is harmless.
    A last line without a trailing newline is terminated first so the new
    key never ends up glued onto it.
    """
    key = shlex.quote(public_key)
    return (
        "umask 077 && mkdir -p ~/.ssh && chmod 700 ~/.ssh"
        " && touch ~/.ssh/authorized_keys && chmod 600 ~/.ssh/authorized_keys"
        f" && (grep -qxF {key} ~/.ssh/authorized_keys"
        " || { if [ -s ~/.ssh/authorized_keys ] && [ -n \"$(tail -c1 ~/.ssh/authorized_keys)\" ];"
        " then echo >> ~/.ssh/authorized_keys; fi;"
        f" echo {key} >> ~/.ssh/authorized_keys; }})"
    )


class KeyProvisioner:
    def __init__(self, connect_timeout: float = 20.0):
        self.connect_timeout = connect_timeout

    def provision_key(
        self,
        host: str,
        port: int,
        admin_user: str,
        admin_password: str,
        key_pair: KeyPair,
    ) -> None:
        """
        Log in once as *admin_user* with its password and install the local
        public key so later sessions need no password.
        """
        try:
            public_key = key_pair.public_key_path.read_text().strip()
        except OSError as e:
            raise ProvisionError(f"Cannot read public key {key_pair.public_key_path}: {e}") from e
        if not public_key:
            raise ProvisionError(f"Public key {key_pair.public_key_path} is empty")

        log.info("[provision] uploading %s to %s@%s:%d",
                 key_pair.public_key_path, admin_user, host, port)
        try:
            with open_password_ssh(
                host, port, admin_user, admin_password, connect_timeout=self.connect_timeout,
            ) as runner:
                rc, _, err = runner.run(authorized_keys_command(public_key))
        except SSH_SESSION_ERRORS as e:
            raise ProvisionError(
                f"Key upload to {admin_user}@{host}:{port} failed: {type(e).__name__}: {e}"
            ) from e

        if rc != 0:
            raise ProvisionError(
                f"Key upload to {admin_user}@{host}:{port} exited with {rc}: {err.strip()}",
                exit_code=rc,
            )
        log.info("[provision] key installed for %s@%s", admin_user, host)
