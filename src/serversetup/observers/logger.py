from __future__ import annotations
import logging
from .events import BaseEvent, StageFailed, BootstrapSummary


class LoggerObserver:
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        etype = event.__class__.__name__
        msg = ", ".join(f"{k}={v}" for k, v in d.items() if k not in ("ts",))

        failed = isinstance(event, StageFailed) or (
            isinstance(event, BootstrapSummary) and event.status != "OK"
        )
        level = logging.ERROR if failed else logging.INFO
        self.logger.log(level, f"[EVENT] {etype}: {msg}")
