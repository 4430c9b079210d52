from dataclasses import dataclass
from typing import Any, Optional

from .domain_events import DomainEvent


@dataclass(frozen=True)
class SnapshotAppliedEvent(DomainEvent):
    row_count: int = 0


@dataclass(frozen=True)
class FiltersAppliedEvent(DomainEvent):
    category: Optional[str] = None
    city: Optional[str] = None
    price: Optional[int] = None
    sort_by: Optional[str] = None


@dataclass(frozen=True)
class MalformedDocumentEvent(DomainEvent):
    document_id: str = ""
    reason: str = ""
    data: Any = None


@dataclass(frozen=True)
class DeleteFailedEvent(DomainEvent):
    document_id: str = ""
    reason: str = ""


@dataclass(frozen=True)
class RestaurantsPopulatedEvent(DomainEvent):
    count: int = 0
    collection: str = ""
