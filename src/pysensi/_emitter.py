"""Minimal named-event emitter used by :class:`pysensi.client.SensiClient`."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventEmitter:
    """Synchronous listener registry keyed by event name.

    Listeners run in registration order on the caller's task.  A failing
    listener is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for *event*; returns a callable that removes it."""
        self._listeners.setdefault(event, []).append(listener)

        def _remove() -> None:
            self.off(event, listener)

        return _remove

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            del self._listeners[event]

    def emit(self, event: str, payload: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(payload)
            except Exception:
                _logger.warning("Listener for %s failed", event, exc_info=True)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
