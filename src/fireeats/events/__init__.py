from .bus import Event, EventBus, Subscription
from .domain_events import DomainEvent
from .restaurant_events import (
    DeleteFailedEvent,
    FiltersAppliedEvent,
    MalformedDocumentEvent,
    RestaurantsPopulatedEvent,
    SnapshotAppliedEvent,
)

__all__ = [
    "DeleteFailedEvent",
    "DomainEvent",
    "Event",
    "EventBus",
    "FiltersAppliedEvent",
    "MalformedDocumentEvent",
    "RestaurantsPopulatedEvent",
    "SnapshotAppliedEvent",
    "Subscription",
]
