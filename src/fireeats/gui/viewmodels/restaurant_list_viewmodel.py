"""RestaurantListViewModel — pure Python list synchronizer.

Holds the ordered restaurants of the active query together with the
document handles they were read from. Presentation adapters read rows
through the accessors and reload on ``refresh_requested``.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional, Sequence

from fireeats.domain.models.core import Restaurant
from fireeats.domain.models.snapshot import RestaurantSnapshot
from fireeats.domain.store import DocumentHandle
from fireeats.errors.handler import ErrorHandler, ErrorSeverity
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import DeleteFailedEvent, SnapshotAppliedEvent
from fireeats.gui.viewmodels.base import BaseViewModel
from fireeats.gui.viewmodels.signal import ObservableProperty, Signal

if TYPE_CHECKING:  # pragma: no cover - typing only
    from fireeats.application.services.live_query import LiveQuerySubscription


class RestaurantListViewModel(BaseViewModel):
    """Single-writer owner of the (records, handles) snapshot.

    Pushes may arrive on any thread. The snapshot is an immutable object
    replaced under a lock, so a reader never observes new records paired
    with old handles.
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__()
        self._events = event_bus
        self._error_handler = error_handler
        self._logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._snapshot = RestaurantSnapshot()
        self._subscription: Optional["LiveQuerySubscription"] = None

        self.loaded = ObservableProperty(False)
        self.last_error = ObservableProperty(None)

        self.refresh_requested = Signal("refresh_requested")
        self.error_occurred = Signal("error_occurred")
        self.delete_failed = Signal("delete_failed")  # emits (document_id, error)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    def bind(self, subscription: "LiveQuerySubscription") -> None:
        """Become the consumer of *subscription*'s pushes."""
        self.unbind()
        subscription.set_consumer(self)
        self._subscription = subscription

    def unbind(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None and subscription.consumer is self:
            subscription.set_consumer(None)

    def dispose(self) -> None:
        self.unbind()
        super().dispose()

    # ------------------------------------------------------------------
    # SnapshotConsumer
    # ------------------------------------------------------------------
    def on_snapshot(self, records: Sequence[Restaurant], handles: Sequence[DocumentHandle]) -> None:
        snapshot = RestaurantSnapshot(tuple(records), tuple(handles))
        with self._lock:
            self._snapshot = snapshot
        self._logger.debug("Snapshot replaced with %d rows", len(snapshot))
        self.loaded.value = True
        self.last_error.value = None
        if self._events is not None:
            self._events.publish(SnapshotAppliedEvent(row_count=len(snapshot), source=type(self).__name__))
        self.refresh_requested.emit()

    def on_subscription_error(self, error: Exception) -> None:
        # The previous snapshot stays in place.
        self.last_error.value = error
        if self._error_handler is not None:
            self._error_handler.handle(error, ErrorSeverity.ERROR, {"operation": "listen"})
        else:
            self._logger.error("Error fetching snapshot results: %s", error)
        self.error_occurred.emit(error)

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------
    def snapshot(self) -> RestaurantSnapshot:
        with self._lock:
            return self._snapshot

    def row_count(self) -> int:
        return len(self.snapshot())

    def record_at(self, index: int) -> Restaurant:
        return self._row(index)[0]

    def handle_at(self, index: int) -> DocumentHandle:
        return self._row(index)[1]

    def row_at(self, index: int) -> Restaurant:
        return self.record_at(index)

    def _row(self, index: int) -> tuple[Restaurant, DocumentHandle]:
        snapshot = self.snapshot()
        # Negative rows are rejected as well.
        if not 0 <= index < len(snapshot):
            raise IndexError(f"row {index} out of range for {len(snapshot)} rows")
        return snapshot.records[index], snapshot.handles[index]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def delete_at(self, index: int) -> None:
        """Ask the store to delete the document shown at *index*.

        The row stays until a push without that document arrives.
        """
        handle = self.handle_at(index)
        self._logger.debug("Deleting row %d", index)
        self.delete_handle(handle)

    def delete_handle(self, handle: DocumentHandle) -> None:
        document_id = handle.document_id
        self._logger.info("Deleting document %s", document_id)

        def _on_deleted(error: Optional[Exception]) -> None:
            if error is None:
                return
            self._report_delete_failure(document_id, error)

        handle.delete(_on_deleted)

    def _report_delete_failure(self, document_id: str, error: Exception) -> None:
        if self._error_handler is not None:
            self._error_handler.handle(
                error, ErrorSeverity.ERROR, {"operation": "delete", "document_id": document_id}
            )
        else:
            self._logger.error("Error deleting document %s: %s", document_id, error)
        if self._events is not None:
            self._events.publish(
                DeleteFailedEvent(document_id=document_id, reason=str(error), source=type(self).__name__)
            )
        self.delete_failed.emit(document_id, error)
