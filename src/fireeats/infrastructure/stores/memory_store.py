"""Process-local document store with live query listeners.

Used by the CLI demo backend and by the tests. Queries are evaluated with
the same semantics the remote store applies: equality filters, ascending
ordering (documents lacking the order field are excluded) and a hard limit.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from fireeats.domain.models.query import QueryDefinition
from fireeats.domain.store import (
    DeleteCallback,
    DocumentHandle,
    ErrorCallback,
    IDocumentStore,
    ListenerHandle,
    SnapshotCallback,
    StoredDocument,
)
from fireeats.errors import DocumentDeleteError

_logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]


def _inline(task: Callable[[], None]) -> None:
    task()


class MemoryDocumentHandle(DocumentHandle):
    def __init__(self, store: "InMemoryDocumentStore", collection: str, document_id: str) -> None:
        self._store = store
        self._collection = collection
        self._document_id = document_id

    @property
    def document_id(self) -> str:
        return self._document_id

    @property
    def collection(self) -> str:
        return self._collection

    def delete(self, callback: Optional[DeleteCallback] = None) -> None:
        self._store.delete_document(self._collection, self._document_id, callback)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MemoryDocumentHandle):
            return NotImplemented
        return (
            self._store is other._store
            and self._collection == other._collection
            and self._document_id == other._document_id
        )

    def __hash__(self) -> int:
        return hash((id(self._store), self._collection, self._document_id))

    def __repr__(self) -> str:
        return f"MemoryDocumentHandle({self._collection}/{self._document_id})"


@dataclass
class _Listener:
    query: QueryDefinition
    on_snapshot: SnapshotCallback
    on_error: ErrorCallback
    id: int = 0
    active: bool = True
    last_delivered: Optional[Tuple[Tuple[str, Any], ...]] = None


class _MemoryListenerHandle(ListenerHandle):
    def __init__(self, store: "InMemoryDocumentStore", listener: _Listener) -> None:
        self._store = store
        self._listener = listener

    def remove(self) -> None:
        self._store._remove_listener(self._listener)


@dataclass
class _Document:
    id: str
    data: Dict[str, Any]
    seq: int = 0


class InMemoryDocumentStore(IDocumentStore):
    """Thread-safe store that pushes full result snapshots to its listeners.

    ``dispatcher`` decides where listener callbacks run. The default runs
    them inline on the mutating thread; passing a queue-backed dispatcher
    reproduces the asynchronous delivery of a remote store.
    """

    def __init__(self, dispatcher: Optional[Dispatcher] = None) -> None:
        self._dispatch = dispatcher or _inline
        self._collections: Dict[str, Dict[str, _Document]] = {}
        self._listeners: List[_Listener] = []
        self._lock = threading.RLock()
        self._seq = itertools.count()
        self._listener_ids = itertools.count(1)
        self._pending_delete_error: Optional[Exception] = None

    # ------------------------------------------------------------------
    # IDocumentStore
    # ------------------------------------------------------------------
    def register_listener(
        self,
        query: QueryDefinition,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> ListenerHandle:
        with self._lock:
            listener = _Listener(
                query=query,
                on_snapshot=on_snapshot,
                on_error=on_error,
                id=next(self._listener_ids),
            )
            self._listeners.append(listener)
            batch = self._evaluate(query)
            listener.last_delivered = self._fingerprint(batch)
        _logger.debug("Listener %d registered for %s", listener.id, query)
        self._deliver(listener, batch)
        return _MemoryListenerHandle(self, listener)

    def add_document(self, collection: str, data: Dict[str, Any]) -> None:
        self.set_document(collection, uuid.uuid4().hex[:20], data)

    # ------------------------------------------------------------------
    # Extra mutations
    # ------------------------------------------------------------------
    def set_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> MemoryDocumentHandle:
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            existing = docs.get(document_id)
            seq = existing.seq if existing is not None else next(self._seq)
            docs[document_id] = _Document(id=document_id, data=copy.deepcopy(dict(data)), seq=seq)
        self._notify(collection)
        return MemoryDocumentHandle(self, collection, document_id)

    def delete_document(
        self,
        collection: str,
        document_id: str,
        callback: Optional[DeleteCallback] = None,
    ) -> None:
        with self._lock:
            error, self._pending_delete_error = self._pending_delete_error, None
            if error is None:
                # Deleting a missing document succeeds, matching the remote store.
                self._collections.get(collection, {}).pop(document_id, None)
        if error is None:
            self._notify(collection)
        if callback is not None:
            self._dispatch(lambda: callback(error))

    def fail_next_delete(self, error: Optional[Exception] = None) -> None:
        """Make the next delete report *error* instead of removing the document."""
        with self._lock:
            self._pending_delete_error = error or DocumentDeleteError("delete rejected")

    def emit_error(self, error: Exception) -> None:
        """Report a transport failure to every active listener."""
        with self._lock:
            listeners = [lst for lst in self._listeners if lst.active]
        for listener in listeners:
            self._dispatch(lambda lst=listener: self._safe_error(lst, error))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def documents(self, collection: str) -> List[StoredDocument]:
        with self._lock:
            docs = sorted(self._collections.get(collection, {}).values(), key=lambda d: d.seq)
            return [self._stored(collection, doc) for doc in docs]

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    @property
    def listener_count(self) -> int:
        with self._lock:
            return sum(1 for lst in self._listeners if lst.active)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _remove_listener(self, listener: _Listener) -> None:
        with self._lock:
            if not listener.active:
                return
            listener.active = False
            self._listeners.remove(listener)
        _logger.debug("Listener %d removed", listener.id)

    def _evaluate(self, query: QueryDefinition) -> List[StoredDocument]:
        docs = sorted(self._collections.get(query.collection, {}).values(), key=lambda d: d.seq)
        matched = [doc for doc in docs if all(f.matches(doc.data) for f in query.filters)]
        if query.order_by:
            field_name = query.order_by
            matched = [doc for doc in matched if field_name in doc.data]
            matched.sort(key=lambda doc: doc.data[field_name])
        if query.limit is not None:
            matched = matched[: max(query.limit, 0)]
        return [self._stored(query.collection, doc) for doc in matched]

    def _stored(self, collection: str, doc: _Document) -> StoredDocument:
        return StoredDocument(
            handle=MemoryDocumentHandle(self, collection, doc.id),
            data=copy.deepcopy(doc.data),
        )

    @staticmethod
    def _fingerprint(batch: Sequence[StoredDocument]) -> Tuple[Tuple[str, Any], ...]:
        return tuple((doc.document_id, repr(sorted(doc.data.items()))) for doc in batch)

    def _notify(self, collection: str) -> None:
        deliveries: List[Tuple[_Listener, List[StoredDocument]]] = []
        with self._lock:
            for listener in self._listeners:
                if not listener.active or listener.query.collection != collection:
                    continue
                batch = self._evaluate(listener.query)
                fingerprint = self._fingerprint(batch)
                if fingerprint == listener.last_delivered:
                    continue
                listener.last_delivered = fingerprint
                deliveries.append((listener, batch))
        for listener, batch in deliveries:
            self._deliver(listener, batch)

    def _deliver(self, listener: _Listener, batch: List[StoredDocument]) -> None:
        def task() -> None:
            if not listener.active:
                return
            try:
                listener.on_snapshot(batch)
            except Exception:
                _logger.exception("Snapshot listener %d failed", listener.id)

        self._dispatch(task)

    @staticmethod
    def _safe_error(listener: _Listener, error: Exception) -> None:
        if not listener.active:
            return
        try:
            listener.on_error(error)
        except Exception:
            _logger.exception("Error listener %d failed", listener.id)
