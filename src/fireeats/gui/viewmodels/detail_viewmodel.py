"""Detail selection for a tapped row."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from fireeats.config import FOOD_IMAGE_COUNT, FOOD_IMAGE_URL_TEMPLATE
from fireeats.domain.models.core import Restaurant
from fireeats.domain.store import DocumentHandle
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import SnapshotAppliedEvent
from fireeats.gui.viewmodels.base import BaseViewModel
from fireeats.gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel
from fireeats.gui.viewmodels.signal import ObservableProperty


def random_image_url(rng: Optional[random.Random] = None) -> str:
    number = (rng or random).randint(1, FOOD_IMAGE_COUNT)
    return FOOD_IMAGE_URL_TEMPLATE.format(number=number)


@dataclass(frozen=True)
class DetailSelection:
    restaurant: Restaurant
    handle: DocumentHandle
    title_image_url: str

    @property
    def document_id(self) -> str:
        return self.handle.document_id


class RestaurantDetailViewModel(BaseViewModel):
    """Tracks the restaurant opened from the list.

    ``removed`` turns true once a snapshot arrives that no longer contains
    the selected document.
    """

    def __init__(
        self,
        restaurants: RestaurantListViewModel,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__()
        self._restaurants = restaurants
        self._rng = rng or random.Random()
        self.selection = ObservableProperty(None, name="selection")
        self.removed = ObservableProperty(False, name="removed")
        if event_bus is not None:
            self.subscribe_event(event_bus, SnapshotAppliedEvent, self._on_snapshot_applied)

    def select(self, index: int) -> DetailSelection:
        snapshot = self._restaurants.snapshot()
        if not 0 <= index < len(snapshot):
            raise IndexError(f"row {index} out of range for {len(snapshot)} rows")
        selection = DetailSelection(
            restaurant=snapshot.records[index],
            handle=snapshot.handles[index],
            title_image_url=random_image_url(self._rng),
        )
        self.selection.value = selection
        self.removed.value = False
        return selection

    def clear(self) -> None:
        self.selection.value = None
        self.removed.value = False

    def _on_snapshot_applied(self, event: SnapshotAppliedEvent) -> None:
        current: Optional[DetailSelection] = self.selection.value
        if current is None:
            return
        if self._restaurants.snapshot().index_of(current.document_id) is None:
            self.removed.value = True
