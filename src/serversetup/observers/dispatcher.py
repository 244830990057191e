# src/serversetup/observers/dispatcher.py
from __future__ import annotations
import logging
from typing import List
from .events import BaseEvent
from .interface import Observer

log = logging.getLogger("serversetup")

class EventBus:
    def __init__(self, observers: List[Observer] = None):
        self._observers = observers or []

    def emit(self, event: BaseEvent) -> None:
        for ob in self._observers:
            try:
                ob.notify(event)
            except Exception:
                # observers must not break a bootstrap
                log.debug("observer %r failed on %s", ob, type(event).__name__, exc_info=True)
