"""BaseViewModel — pure Python, no Qt dependency.

Tracks ``EventBus`` subscriptions and signal connections so that
``dispose()`` releases everything a view model attached to.
"""

from __future__ import annotations

from typing import Callable, Type

from fireeats.events.bus import EventBus, Subscription
from fireeats.gui.viewmodels.signal import Signal


class BaseViewModel:
    def __init__(self) -> None:
        self._subscriptions: list[tuple[EventBus, Subscription]] = []
        self._connections: list[tuple[Signal, Callable]] = []
        self._disposed = False

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append((event_bus, sub))
        return sub

    def connect_signal(self, signal: Signal, handler: Callable) -> None:
        """Connect *handler* to *signal* and disconnect it on dispose."""
        signal.connect(handler)
        self._connections.append((signal, handler))

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        for bus, sub in self._subscriptions:
            bus.unsubscribe(sub)
        self._subscriptions.clear()
        for signal, handler in self._connections:
            try:
                signal.disconnect(handler)
            except ValueError:
                pass
        self._connections.clear()
        self._disposed = True
