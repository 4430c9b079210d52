import random
from typing import Optional

from .container import Container
from fireeats.application.services.live_query import LiveQuerySubscription
from fireeats.application.use_cases.populate import PopulateRestaurantsUseCase
from fireeats.domain.models.query import QueryDefinition, base_query
from fireeats.domain.store import IDocumentStore
from fireeats.errors.handler import ErrorHandler
from fireeats.events.bus import EventBus
from fireeats.gui.viewmodels.detail_viewmodel import RestaurantDetailViewModel
from fireeats.gui.viewmodels.filter_viewmodel import FilterViewModel
from fireeats.gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel
from fireeats.utils.logging import get_logger


def bootstrap(
    container: Container,
    store: IDocumentStore,
    base: Optional[QueryDefinition] = None,
    rng: Optional[random.Random] = None,
) -> None:
    """Register all application services in the DI container."""
    query_base = base or base_query()

    container.register_instance(IDocumentStore, store)
    container.register_singleton(EventBus, EventBus)
    container.register_factory(
        ErrorHandler,
        lambda c: ErrorHandler(get_logger("errors"), c.resolve(EventBus)),
        singleton=True,
    )
    container.register_factory(
        LiveQuerySubscription,
        lambda c: LiveQuerySubscription(c.resolve(IDocumentStore), c.resolve(EventBus)),
        singleton=True,
    )
    container.register_factory(
        RestaurantListViewModel,
        lambda c: RestaurantListViewModel(c.resolve(EventBus), c.resolve(ErrorHandler)),
        singleton=True,
    )
    container.register_factory(
        FilterViewModel,
        lambda c: FilterViewModel(c.resolve(LiveQuerySubscription), query_base, c.resolve(EventBus)),
        singleton=True,
    )
    container.register_factory(
        RestaurantDetailViewModel,
        lambda c: RestaurantDetailViewModel(c.resolve(RestaurantListViewModel), c.resolve(EventBus), rng),
        singleton=True,
    )
    container.register_factory(
        PopulateRestaurantsUseCase,
        lambda c: PopulateRestaurantsUseCase(c.resolve(IDocumentStore), c.resolve(EventBus), rng),
    )
