"""Minimal listener registry shared by request handles and transport requests."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Per-instance event subscriptions.

    Every emitter owns its own table, so subscribing on one object never
    subscribes on another one it happens to wrap or delegate to.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event: str, listener: Listener) -> "EventEmitter":
        self._listeners.setdefault(event, []).append(listener)
        return self

    def once(self, event: str, listener: Listener) -> "EventEmitter":
        def wrapper(*args: Any) -> Any:
            self.off(event, wrapper)
            return listener(*args)

        return self.on(event, wrapper)

    def off(self, event: str, listener: Listener) -> "EventEmitter":
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)
        return self

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        listeners = list(self._listeners.get(event, ()))
        if not listeners:
            if event == "error":
                # an unobserved error must not take the event loop down
                logger.warning("Unhandled error event on %r: %s", self, args[0] if args else None)
            return False
        for listener in listeners:
            listener(*args)
        return True


__all__ = ["EventEmitter", "Listener"]
