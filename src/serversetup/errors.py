# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/errors.py
from __future__ import annotations

from typing import Optional, Sequence


class ServerSetupError(RuntimeError):
    """Base class for bootstrap failures."""


class DependencyMissing(ServerSetupError):
    """Raised when required local applications are not installed."""

    def __init__(self, missing: Sequence, message: str = ""):
        self.missing = tuple(missing)
        names = ", ".join(req.package for req in self.missing)
        super().__init__(message or f"Missing local dependencies: {names}")


class ValidationError(ServerSetupError):
    """Raised when the settings document cannot produce a host credential."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class MissingRequiredField(ValidationError):
    def __init__(self, field: str):
        super().__init__(
            field,
            f"'{field}' is not set. Edit the settings file and set it before running again.",
        )


class InvalidField(ValidationError):
    def __init__(self, field: str, reason: str):
        super().__init__(field, f"'{field}' is invalid: {reason}")


class KeyGenError(ServerSetupError):
    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message)


class HostUnreachable(ServerSetupError):
    """TCP connection to the SSH port failed. Retry later or check the network."""

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        super().__init__(f"{host}:{port} is not reachable")


class AuthenticationFailed(ServerSetupError):
    """Host answered on the SSH port but rejected the root credentials."""

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        super().__init__(f"{host}:{port} is reachable but root authentication failed")


class ProvisionError(ServerSetupError):
    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message)


class ExecError(ServerSetupError):
    """The remote session could not be established; the command never ran."""
