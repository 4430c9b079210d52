"""Firestore-backed document store.

The client is always passed in; :meth:`FirestoreDocumentStore.from_credentials`
builds one from a service-account file for the CLI.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore_v1.base_query import FieldFilter as FirestoreFieldFilter

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
from fireeats.errors import DocumentDeleteError, StoreError

_logger = logging.getLogger(__name__)

_APP_NAME = "fireeats"


class FirestoreDocumentHandle(DocumentHandle):
    def __init__(self, reference: Any, executor: ThreadPoolExecutor) -> None:
        self._reference = reference
        self._executor = executor

    @property
    def document_id(self) -> str:
        return self._reference.id

    @property
    def reference(self) -> Any:
        return self._reference

    def delete(self, callback: Optional[DeleteCallback] = None) -> None:
        future = self._executor.submit(self._reference.delete)

        def _done(fut) -> None:
            exc = fut.exception()
            error = None
            if exc is not None:
                error = DocumentDeleteError(str(exc))
                error.__cause__ = exc
            if callback is not None:
                callback(error)

        future.add_done_callback(_done)

    def __repr__(self) -> str:
        return f"FirestoreDocumentHandle({self._reference.path})"


class FirestoreListenerHandle(ListenerHandle):
    """Stops a Firestore watch.

    ``unsubscribe`` joins the watch consumer thread, which may itself be
    blocked delivering a push, so teardown runs on the store executor.
    """

    def __init__(self, watch: Any, executor: ThreadPoolExecutor) -> None:
        self._watch = watch
        self._executor = executor
        self._lock = threading.Lock()
        self._removed = False

    def remove(self) -> None:
        with self._lock:
            if self._removed:
                return
            self._removed = True
        self._executor.submit(self._watch.unsubscribe)


class FirestoreDocumentStore(IDocumentStore):
    def __init__(self, client: Any, max_workers: int = 4) -> None:
        self._client = client
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="fireeats-firestore")

    @classmethod
    def from_credentials(cls, credentials_path: Path | str | None = None) -> "FirestoreDocumentStore":
        """Initialise (or reuse) the named Firebase app and wrap its client."""
        try:
            app = firebase_admin.get_app(_APP_NAME)
        except ValueError:
            cred = credentials.Certificate(str(credentials_path)) if credentials_path else None
            app = firebase_admin.initialize_app(cred, name=_APP_NAME)
        return cls(firestore.client(app=app))

    def to_native_query(self, query: QueryDefinition) -> Any:
        native = self._client.collection(query.collection)
        for item in query.filters:
            native = native.where(filter=FirestoreFieldFilter(item.field, item.op.value, item.value))
        if query.order_by:
            native = native.order_by(query.order_by)
        return native.limit(query.limit)

    def register_listener(
        self,
        query: QueryDefinition,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> ListenerHandle:
        executor = self._executor

        def _callback(docs: List[Any], changes: Any, read_time: Any) -> None:
            try:
                batch = [
                    StoredDocument(
                        handle=FirestoreDocumentHandle(doc.reference, executor),
                        data=doc.to_dict() or {},
                    )
                    for doc in docs
                ]
            except Exception as exc:
                _logger.error("Failed to read Firestore snapshot: %s", exc)
                on_error(StoreError(str(exc)))
                return
            on_snapshot(batch)

        try:
            watch = self.to_native_query(query).on_snapshot(_callback)
        except Exception as exc:
            raise StoreError(f"Unable to listen to {query.collection}: {exc}") from exc
        _logger.debug("Firestore listener attached for %s", query)
        return FirestoreListenerHandle(watch, executor)

    def add_document(self, collection: str, data: Dict[str, Any]) -> None:
        def _add() -> None:
            self._client.collection(collection).add(dict(data))

        def _done(fut) -> None:
            exc = fut.exception()
            if exc is not None:
                _logger.error("Error adding document to %s: %s", collection, exc)

        self._executor.submit(_add).add_done_callback(_done)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
