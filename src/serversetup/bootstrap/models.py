# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Tuple

from serversetup.errors import DependencyMissing


@dataclass(frozen=True)
class HostCredential:
    """
    Connection tuple for the host being bootstrapped.
    Built once from the settings document and passed to every stage.
    """
    host: str
    ssh_port: int = 22
    root_password: str = field(default="", repr=False)
    admin_user_name: str = ""
    admin_user_password: str = field(default="", repr=False)


@dataclass(frozen=True)
class KeyPair:
    private_key_path: Path
    public_key_path: Path

    @classmethod
    def for_private_key(cls, private_key_path: Path) -> "KeyPair":
        private_key_path = Path(private_key_path)
        return cls(
            private_key_path=private_key_path,
            public_key_path=private_key_path.with_name(private_key_path.name + ".pub"),
        )


class Reachability(str, Enum):
    UNREACHABLE = "unreachable"   # TCP connect failed
    AUTH_FAILED = "auth_failed"   # port open, root login rejected
    READY = "ready"


@dataclass(frozen=True)
class CommandOutcome:
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class ApplicationRequirement:
    application: str   # executable looked up on PATH
    package: str       # what the operator installs to get it


@dataclass(frozen=True)
class DependencyReport:
    missing: Tuple[ApplicationRequirement, ...] = ()
    message: str = ""

    @property
    def ok(self) -> bool:
        return not self.missing

    def raise_for_missing(self) -> None:
        if self.missing:
            raise DependencyMissing(self.missing, self.message)
