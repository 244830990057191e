# src/serversetup/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str                 # ISO timestamp
    run_id: str             # correlates all events of one bootstrap run
    host: Optional[str]     # target host, None before settings are loaded

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(host: Optional[str] = None, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "host": host,
    }


# ---------------------------------------------------------------------
# Bootstrap stages
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class StageStarted(BaseEvent):
    stage: str

@dataclass(frozen=True)
class StageSucceeded(BaseEvent):
    stage: str
    message: str = ""

@dataclass(frozen=True)
class StageFailed(BaseEvent):
    stage: str
    error: str

@dataclass(frozen=True)
class BootstrapSummary(BaseEvent):
    status: str             # "OK" | "FAILED"
    error: Optional[str] = None
