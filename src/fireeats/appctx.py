"""Application-wide context: settings, store and view models wired together."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .application.services.live_query import LiveQuerySubscription
from .application.use_cases.populate import PopulateRestaurantsUseCase
from .di.bootstrap import bootstrap
from .di.container import Container
from .domain.models.query import FilterSelection, base_query
from .domain.store import IDocumentStore
from .errors import SettingsError
from .errors.handler import ErrorHandler, ErrorSeverity
from .events.bus import EventBus
from .gui.viewmodels.detail_viewmodel import RestaurantDetailViewModel
from .gui.viewmodels.filter_viewmodel import FilterViewModel
from .gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .settings.manager import SettingsManager


def _create_settings_manager(path: Optional[Path] = None) -> "SettingsManager":
    from .settings.manager import SettingsManager

    manager = SettingsManager(path)
    manager.load()
    return manager


def create_store(settings: "SettingsManager", backend: Optional[str] = None) -> IDocumentStore:
    """Build the document store selected by *backend* or ``store.backend``."""

    backend = backend or settings.get("store.backend", "memory")
    if backend == "firestore":
        from .infrastructure.stores.firestore_store import FirestoreDocumentStore

        return FirestoreDocumentStore.from_credentials(settings.get("store.credentials_path"))

    from .infrastructure.stores.memory_store import InMemoryDocumentStore

    return InMemoryDocumentStore()


@dataclass
class AppContext:
    """Container object shared by the CLI and GUI front ends."""

    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    store: Optional[IDocumentStore] = None
    container: Container = field(init=False)
    _started: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = create_store(self.settings)
        base = base_query(
            collection=self.settings.get("store.collection"),
            limit=self.settings.get("store.limit"),
        )
        self.container = Container()
        bootstrap(self.container, self.store, base=base)

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------
    @property
    def events(self) -> EventBus:
        return self.container.resolve(EventBus)

    @property
    def subscription(self) -> LiveQuerySubscription:
        return self.container.resolve(LiveQuerySubscription)

    @property
    def restaurants(self) -> RestaurantListViewModel:
        return self.container.resolve(RestaurantListViewModel)

    @property
    def filters(self) -> FilterViewModel:
        return self.container.resolve(FilterViewModel)

    @property
    def detail(self) -> RestaurantDetailViewModel:
        return self.container.resolve(RestaurantDetailViewModel)

    def populate_use_case(self) -> PopulateRestaurantsUseCase:
        return self.container.resolve(PopulateRestaurantsUseCase)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, selection: Optional[FilterSelection] = None) -> None:
        """Bind the list to the live query and attach it.

        Without an explicit *selection* the filters saved in the settings are
        restored.
        """

        if self._started:
            return
        self.restaurants.bind(self.subscription)
        self.filters.selection.changed.connect(self._remember_filters)
        if selection is None:
            selection = self.stored_filters()
        if selection.is_empty:
            self.filters.start()
        else:
            self.filters.apply_selection(selection)
        self._started = True

    def shutdown(self) -> None:
        """Detach the live query, release every subscription and stop the store."""

        if self._started:
            try:
                self.filters.selection.changed.disconnect(self._remember_filters)
            except ValueError:
                pass
            self.filters.dispose()
            self.detail.dispose()
            self.restaurants.dispose()
            self.subscription.close()
            self._started = False
        self.store.shutdown()

    # ------------------------------------------------------------------
    # Filters persistence
    # ------------------------------------------------------------------
    def stored_filters(self) -> FilterSelection:
        stored = self.settings.get("filters", {}) or {}
        return FilterSelection(
            category=stored.get("category"),
            city=stored.get("city"),
            price=stored.get("price"),
            sort_by=stored.get("sort_by"),
        )

    def _remember_filters(self, selection: FilterSelection, _old: FilterSelection) -> None:
        try:
            self.settings.set(
                "filters",
                {
                    "category": selection.category,
                    "city": selection.city,
                    "price": selection.price,
                    "sort_by": selection.sort_by,
                },
            )
        except SettingsError as exc:
            # The live query already uses the selection; only saving it failed.
            self.container.resolve(ErrorHandler).handle(
                exc, ErrorSeverity.ERROR, {"operation": "save_filters"}
            )
