from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence

from .models.query import QueryDefinition

DeleteCallback = Callable[[Optional[Exception]], None]


class DocumentHandle(ABC):
    """Opaque reference to one stored document, used only for mutations."""

    @property
    @abstractmethod
    def document_id(self) -> str:
        pass

    @abstractmethod
    def delete(self, callback: Optional[DeleteCallback] = None) -> None:
        """Fire-and-forget delete; *callback* receives ``None`` or the failure."""
        pass


class ListenerHandle(ABC):
    @abstractmethod
    def remove(self) -> None:
        """Stop delivering snapshots. Safe to call more than once."""
        pass


@dataclass(frozen=True)
class StoredDocument:
    handle: DocumentHandle
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def document_id(self) -> str:
        return self.handle.document_id


SnapshotCallback = Callable[[Sequence[StoredDocument]], None]
ErrorCallback = Callable[[Exception], None]


class IDocumentStore(ABC):
    @abstractmethod
    def register_listener(
        self,
        query: QueryDefinition,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> ListenerHandle:
        """Deliver the full result of *query* now and after every change."""
        pass

    @abstractmethod
    def add_document(self, collection: str, data: Dict[str, Any]) -> None:
        """Create a document with a store-assigned id."""
        pass

    def shutdown(self) -> None:
        """Wait for pending writes and release background threads."""
        pass
