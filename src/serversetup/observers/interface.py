# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/observers/interface.py

from __future__ import annotations
from typing import Protocol, runtime_checkable
from .events import BaseEvent


@runtime_checkable
class Observer(Protocol):
    """
    Receives every lifecycle event of a bootstrap run: StageStarted,
    StageSucceeded, StageFailed for precheck/settings/identity/probe/provision,
    then one BootstrapSummary. Events carry run_id and the target host.
    """

    def notify(self, event: BaseEvent) -> None: ...
