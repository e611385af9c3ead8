"""In-process relay for recalculation signals.

Decouples "a queue message arrived" from "who reacts to it".  Delivery is
synchronous, on the publishing thread, in subscription order.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from app.models.events import RecalculateSignal

logger = logging.getLogger(__name__)

SignalHandler = Callable[[RecalculateSignal], object]


class RecalculationNotifier:
    """Publish/subscribe relay for ``RecalculateSignal`` events."""

    def __init__(self) -> None:
        self._handlers: list[SignalHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: SignalHandler) -> None:
        """Register *handler*; a handler already registered is kept once."""
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def unsubscribe(self, handler: SignalHandler) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def publish(self, signal: RecalculateSignal) -> None:
        """Deliver *signal* to every subscriber in registration order.

        Handlers are expected not to raise; an exception from one handler
        propagates to the publisher and skips the remaining handlers.
        """
        with self._lock:
            handlers = list(self._handlers)
        logger.debug(
            "recalculate_signal_published",
            extra={"candidate_id": signal.candidate_id, "subscribers": len(handlers)},
        )
        for handler in handlers:
            handler(signal)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)


# Module-level notifier instance (singleton)
notifier = RecalculationNotifier()
