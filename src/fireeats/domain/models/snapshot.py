from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional, Tuple

from .core import Restaurant

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..store import DocumentHandle


@dataclass(frozen=True)
class RestaurantSnapshot:
    """Index-aligned records and the handles of the documents they came from.

    Both sequences are swapped together as one object; they are never
    updated independently.
    """

    records: Tuple[Restaurant, ...] = ()
    handles: Tuple[DocumentHandle, ...] = ()

    def __post_init__(self) -> None:
        if len(self.records) != len(self.handles):
            raise ValueError(
                f"snapshot has {len(self.records)} records but {len(self.handles)} handles"
            )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[tuple[Restaurant, DocumentHandle]]:
        return iter(zip(self.records, self.handles))

    def index_of(self, document_id: str) -> Optional[int]:
        for index, handle in enumerate(self.handles):
            if handle.document_id == document_id:
                return index
        return None
