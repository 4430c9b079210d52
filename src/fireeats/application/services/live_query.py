"""Live query subscription: one store listener at a time, typed pushes out."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Protocol, Sequence

from fireeats.domain.models.core import Restaurant
from fireeats.domain.models.query import QueryDefinition
from fireeats.domain.store import DocumentHandle, IDocumentStore, ListenerHandle, StoredDocument
from fireeats.errors import DocumentConversionError
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import MalformedDocumentEvent

_logger = logging.getLogger(__name__)


class SnapshotConsumer(Protocol):
    def on_snapshot(self, records: Sequence[Restaurant], handles: Sequence[DocumentHandle]) -> None:
        ...

    def on_subscription_error(self, error: Exception) -> None:
        ...


class LiveQuerySubscription:
    """Owns at most one active listener registration on the document store.

    ``attach`` removes the previous registration before adding the new one.
    Every registration is tagged with a generation number; once ``detach``
    returns, pushes that were already in flight for an older generation are
    dropped instead of reaching the consumer.

    Malformed documents are skipped with a warning and the rest of the batch
    is still delivered.
    """

    def __init__(self, store: IDocumentStore, event_bus: Optional[EventBus] = None) -> None:
        self._store = store
        self._events = event_bus
        self._lock = threading.RLock()
        self._consumer: Optional[SnapshotConsumer] = None
        self._handle: Optional[ListenerHandle] = None
        self._query: Optional[QueryDefinition] = None
        self._generation = 0
        self._discarded = 0

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    def set_consumer(self, consumer: Optional[SnapshotConsumer]) -> None:
        with self._lock:
            self._consumer = consumer

    @property
    def consumer(self) -> Optional[SnapshotConsumer]:
        return self._consumer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def query(self) -> Optional[QueryDefinition]:
        return self._query

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._handle is not None

    @property
    def discarded_push_count(self) -> int:
        """Pushes dropped because their registration had been detached."""
        return self._discarded

    def attach(self, query: QueryDefinition) -> None:
        with self._lock:
            self._detach_locked()
            self._generation += 1
            generation = self._generation
            self._query = query
            _logger.debug("Attaching generation %d to %s", generation, query)
            self._handle = self._store.register_listener(
                query,
                lambda batch: self._handle_push(generation, batch),
                lambda exc: self._handle_error(generation, exc),
            )

    def detach(self) -> None:
        with self._lock:
            self._detach_locked()

    def close(self) -> None:
        """Detach and drop the consumer; no callback fires afterwards."""
        with self._lock:
            self._detach_locked()
            self._consumer = None
            self._query = None

    def _detach_locked(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        # Bumping the generation first invalidates any push already queued.
        self._generation += 1
        handle.remove()
        _logger.debug("Detached listener, generation now %d", self._generation)

    # ------------------------------------------------------------------
    # Store callbacks (any thread)
    # ------------------------------------------------------------------
    def _handle_push(self, generation: int, batch: Sequence[StoredDocument]) -> None:
        records, handles = self._convert(batch)
        with self._lock:
            if generation != self._generation:
                self._discarded += 1
                _logger.debug("Dropping push for stale generation %d", generation)
                return
            consumer = self._consumer
            if consumer is None:
                return
            consumer.on_snapshot(records, handles)

    def _handle_error(self, generation: int, error: Exception) -> None:
        with self._lock:
            if generation != self._generation:
                return
            _logger.error("Error fetching snapshot results: %s", error)
            consumer = self._consumer
            if consumer is not None:
                consumer.on_subscription_error(error)

    def _convert(self, batch: Sequence[StoredDocument]) -> tuple[List[Restaurant], List[DocumentHandle]]:
        records: List[Restaurant] = []
        handles: List[DocumentHandle] = []
        for document in batch:
            try:
                record = Restaurant.from_mapping(document.data)
            except DocumentConversionError as exc:
                _logger.warning(
                    "Skipping document %s: unable to build a Restaurant (%s)",
                    document.document_id,
                    exc,
                )
                if self._events is not None:
                    self._events.publish(
                        MalformedDocumentEvent(
                            document_id=document.document_id,
                            reason=str(exc),
                            data=document.data,
                            source=type(self).__name__,
                        )
                    )
                continue
            records.append(record)
            handles.append(document.handle)
        return records, handles
