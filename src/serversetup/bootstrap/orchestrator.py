# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/orchestrator.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from serversetup.config.loader import load_and_validate
from serversetup.errors import AuthenticationFailed, HostUnreachable, ServerSetupError
from serversetup.observers.dispatcher import EventBus
from serversetup.observers.events import (
    BootstrapSummary,
    StageFailed,
    StageStarted,
    StageSucceeded,
    new_ctx,
)
from serversetup.utils.retry import retry
from .executor import RemoteExecutor
from .identity import LocalIdentityManager
from .models import (
    ApplicationRequirement,
    CommandOutcome,
    HostCredential,
    KeyPair,
    Reachability,
)
from .precheck import REQUIRED_APPLICATIONS, check_dependencies
from .probe import ReachabilityProbe
from .provisioner import KeyProvisioner

log = logging.getLogger("serversetup")


@dataclass(frozen=True)
class BootstrapResult:
    credential: HostCredential
    key_pair: KeyPair


class HostBootstrapper:
    """
    Runs the bootstrap stages for one host, in order:

      precheck -> settings -> identity -> probe -> provision

    Every stage must finish before the next starts. A typed ServerSetupError
    stops the run. An unreachable host is retried up to unreachable_retries
    attempts; rejected root credentials are not retried.
    """

    def __init__(
        self,
        identity: Optional[LocalIdentityManager] = None,
        probe: Optional[ReachabilityProbe] = None,
        provisioner: Optional[KeyProvisioner] = None,
        executor: Optional[RemoteExecutor] = None,
        *,
        bus: Optional[EventBus] = None,
        run_id: Optional[str] = None,
        requirements: Sequence[ApplicationRequirement] = REQUIRED_APPLICATIONS,
        unreachable_retries: int = 1,
        retry_delay: float = 10.0,
    ):
        self.identity = identity or LocalIdentityManager()
        self.probe = probe or ReachabilityProbe()
        self.provisioner = provisioner or KeyProvisioner()
        self.executor = executor or RemoteExecutor()
        self.bus = bus or EventBus()
        self.run_id = run_id
        self.requirements = requirements
        self.unreachable_retries = unreachable_retries
        self.retry_delay = retry_delay

    # ------------------ events ------------------

    def _ctx(self, host: Optional[str]) -> dict:
        ctx = new_ctx(host=host, run_id=self.run_id)
        self.run_id = ctx["run_id"]
        return ctx

    def _stage(self, stage: str, host: Optional[str], fn, *args):
        self.bus.emit(StageStarted(**self._ctx(host), stage=stage))
        try:
            result = fn(*args)
        except ServerSetupError as exc:
            self.bus.emit(StageFailed(**self._ctx(host), stage=stage, error=str(exc)))
            raise
        self.bus.emit(StageSucceeded(**self._ctx(host), stage=stage))
        return result

    # ------------------ stages ------------------

    def _precheck(self) -> None:
        check_dependencies(self.requirements).raise_for_missing()

    def _wait_until_ready(self, cred: HostCredential) -> None:
        def on_retry(attempt: int, exc: Exception) -> None:
            if attempt < self.unreachable_retries:
                log.info(
                    "[%s] not reachable (attempt %d/%d), retrying in %ss...",
                    cred.host, attempt, self.unreachable_retries, self.retry_delay,
                )

        @retry(
            retries=self.unreachable_retries,
            delay=self.retry_delay,
            retry_on=(HostUnreachable,),
            on_retry=on_retry,
            reraise=True,
        )
        def attempt() -> None:
            result = self.probe.probe(cred.host, cred.ssh_port, cred.root_password)
            if result is Reachability.UNREACHABLE:
                raise HostUnreachable(cred.host, cred.ssh_port)
            if result is Reachability.AUTH_FAILED:
                raise AuthenticationFailed(cred.host, cred.ssh_port)

        attempt()

    def _provision(self, cred: HostCredential, key_pair: KeyPair) -> None:
        self.provisioner.provision_key(
            cred.host,
            cred.ssh_port,
            cred.admin_user_name,
            cred.admin_user_password,
            key_pair,
        )

    # ------------------ public API ------------------

    def bootstrap(self, source: str | Path | Mapping) -> BootstrapResult:
        cred: Optional[HostCredential] = None
        try:
            self._stage("precheck", None, self._precheck)
            cred = self._stage("settings", None, load_and_validate, source)
            log.info("[%s] Bootstrapping %s:%d...", cred.host, cred.host, cred.ssh_port)
            key_pair = self._stage("identity", cred.host, self.identity.ensure_key_pair)
            self._stage("probe", cred.host, self._wait_until_ready, cred)
            self._stage("provision", cred.host, self._provision, cred, key_pair)
        except ServerSetupError as exc:
            host = cred.host if cred else None
            self.bus.emit(BootstrapSummary(**self._ctx(host), status="FAILED", error=str(exc)))
            raise

        self.bus.emit(BootstrapSummary(**self._ctx(cred.host), status="OK"))
        log.info("[%s] Bootstrap complete", cred.host)
        return BootstrapResult(credential=cred, key_pair=key_pair)

    def run(self, cred: HostCredential, command: str) -> CommandOutcome:
        return self.executor.run_as_root(cred.host, cred.ssh_port, cred.root_password, command)
