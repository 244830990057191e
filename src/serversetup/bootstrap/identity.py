# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/identity.py

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from serversetup.errors import KeyGenError
from .models import KeyPair

log = logging.getLogger("serversetup")

MIN_RSA_BITS = 2048


def default_private_key_path() -> Path:
    return Path.home() / ".ssh" / "id_rsa"


class LocalIdentityManager:
    """
    Makes sure the operator has an RSA key pair to push to new hosts.

    An existing private key is never touched; its .pub sibling is assumed
    to exist next to it.
    """

    def __init__(self, private_key_path: Optional[Path] = None, bits: int = MIN_RSA_BITS):
        if bits < MIN_RSA_BITS:
            raise ValueError(f"RSA keys must be at least {MIN_RSA_BITS} bits, got {bits}")
        self.key_pair = KeyPair.for_private_key(private_key_path or default_private_key_path())
        self.bits = bits

    def ensure_key_pair(self) -> KeyPair:
        if self.key_pair.private_key_path.exists():
            log.debug("[identity] using existing key %s", self.key_pair.private_key_path)
            return self.key_pair
        self._generate()
        return self.key_pair

    def _generate(self) -> None:
        path = self.key_pair.private_key_path
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

        cmd = [
            "ssh-keygen",
            "-t", "rsa",
            "-b", str(self.bits),
            "-f", str(path),
            "-N", "",
            "-q",
        ]
        log.info("[identity] generating %d-bit RSA key at %s", self.bits, path)
        try:
            cp = subprocess.run(cmd, capture_output=True, text=True, stdin=subprocess.DEVNULL)
        except OSError as e:
            raise KeyGenError(f"Failed to run ssh-keygen: {e}") from e

        if cp.returncode != 0:
            raise KeyGenError(
                f"ssh-keygen exited with {cp.returncode}: {cp.stderr.strip()}",
                exit_code=cp.returncode,
            )
