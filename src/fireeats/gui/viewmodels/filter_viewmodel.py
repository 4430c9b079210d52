"""FilterViewModel — filter panel state and query re-subscription."""

from __future__ import annotations

import logging
from typing import Optional

from fireeats.application.services.live_query import LiveQuerySubscription
from fireeats.domain.models.core import price_string
from fireeats.domain.models.query import FilterSelection, QueryDefinition, base_query, query_for_selection
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import FiltersAppliedEvent
from fireeats.gui.viewmodels.base import BaseViewModel
from fireeats.gui.viewmodels.signal import ObservableProperty


class FilterViewModel(BaseViewModel):
    """Turns filter selections into queries and re-attaches the subscription.

    Every apply builds a fresh query from the base; a filter that is left out
    of a later apply is gone from the active query.
    """

    def __init__(
        self,
        subscription: LiveQuerySubscription,
        base: Optional[QueryDefinition] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        super().__init__()
        self._subscription = subscription
        self._base = base or base_query()
        self._events = event_bus
        self._logger = logging.getLogger(__name__)

        self.selection = ObservableProperty(FilterSelection(), name="selection")
        self.query = ObservableProperty(self._base, name="query")

    @property
    def base(self) -> QueryDefinition:
        return self._base

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Attach the current query (view appearing)."""
        self._subscription.attach(self.query.value)

    def stop(self) -> None:
        """Detach the live query (view disappearing)."""
        self._subscription.detach()

    def dispose(self) -> None:
        self.stop()
        super().dispose()

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def apply_filters(
        self,
        category: Optional[str] = None,
        city: Optional[str] = None,
        price: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> QueryDefinition:
        selection = FilterSelection(
            category=category or None,
            city=city or None,
            price=price,
            sort_by=sort_by or None,
        )
        return self.apply_selection(selection)

    def apply_selection(self, selection: FilterSelection) -> QueryDefinition:
        query = query_for_selection(self._base, selection)
        self.selection.value = selection
        self.query.value = query
        self._logger.info("Applying filters %s", selection)
        self._subscription.attach(query)
        if self._events is not None:
            self._events.publish(
                FiltersAppliedEvent(
                    category=selection.category,
                    city=selection.city,
                    price=selection.price,
                    sort_by=selection.sort_by,
                    source=type(self).__name__,
                )
            )
        return query

    def clear_filters(self) -> QueryDefinition:
        return self.apply_selection(FilterSelection())

    # ------------------------------------------------------------------
    # Labels for the active-filter strip; None hides the label
    # ------------------------------------------------------------------
    @property
    def category_label(self) -> Optional[str]:
        return self.selection.value.category or None

    @property
    def city_label(self) -> Optional[str]:
        return self.selection.value.city or None

    @property
    def price_label(self) -> Optional[str]:
        price = self.selection.value.price
        if price is None:
            return None
        return price_string(price)

    @property
    def has_active_filters(self) -> bool:
        return not self.selection.value.is_empty
