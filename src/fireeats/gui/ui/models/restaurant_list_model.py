from __future__ import annotations

import logging
from typing import Any

from PySide6.QtCore import QAbstractListModel, QModelIndex, QObject, Qt, Signal, Slot

from fireeats.domain.models.snapshot import RestaurantSnapshot
from fireeats.gui.ui.models.roles import Roles, role_names
from fireeats.gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel

_LOGGER = logging.getLogger(__name__)


class RestaurantListModel(QAbstractListModel):
    """
    Qt list model over a RestaurantListViewModel.
    Keeps its own copy of the snapshot, swapped inside a model reset on the
    model's thread, so views never read rows from a snapshot they were not
    reset for.
    """

    # Re-emitted from whatever thread delivered the push; Qt queues the slot.
    _refreshRequested = Signal()

    def __init__(self, view_model: RestaurantListViewModel, parent: QObject | None = None):
        super().__init__(parent)
        self._view_model = view_model
        self._snapshot: RestaurantSnapshot = view_model.snapshot()
        self._refreshRequested.connect(self._reload)
        self._view_model.refresh_requested.connect(self._on_refresh_requested)

    def dispose(self) -> None:
        try:
            self._view_model.refresh_requested.disconnect(self._on_refresh_requested)
        except ValueError:
            pass

    def rowCount(self, parent=QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._snapshot)

    def roleNames(self) -> dict[int, bytes]:
        return role_names(super().roleNames())

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._snapshot):
            return None

        restaurant = self._snapshot.records[index.row()]
        role_int = int(role)

        if role_int == Qt.ItemDataRole.DisplayRole:
            return restaurant.name
        if role_int == Qt.ItemDataRole.ToolTipRole:
            return f"{restaurant.category}, {restaurant.city}"

        if role_int == Roles.NAME:
            return restaurant.name
        if role_int == Roles.CATEGORY:
            return restaurant.category
        if role_int == Roles.CITY:
            return restaurant.city
        if role_int == Roles.PRICE:
            return restaurant.price
        if role_int == Roles.PRICE_LABEL:
            return restaurant.price_label
        if role_int == Roles.RATING_COUNT:
            return restaurant.rating_count
        if role_int == Roles.AVERAGE_RATING:
            return restaurant.average_rating
        if role_int == Roles.STARS:
            return restaurant.star_count
        if role_int == Roles.DOCUMENT_ID:
            return self._snapshot.handles[index.row()].document_id
        if role_int == Roles.RESTAURANT:
            return restaurant
        return None

    @Slot(int)
    def delete_row(self, row: int) -> None:
        """Swipe-to-delete entry point; the row disappears with the next push."""
        if not 0 <= row < len(self._snapshot):
            raise IndexError(f"row {row} out of range for {len(self._snapshot)} rows")
        self._view_model.delete_handle(self._snapshot.handles[row])

    def _on_refresh_requested(self) -> None:
        self._refreshRequested.emit()

    @Slot()
    def _reload(self) -> None:
        self.beginResetModel()
        self._snapshot = self._view_model.snapshot()
        self.endResetModel()
        _LOGGER.debug("RestaurantListModel reset to %d rows", len(self._snapshot))
