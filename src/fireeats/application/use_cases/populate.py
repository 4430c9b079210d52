import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .base import UseCase, UseCaseRequest, UseCaseResponse
from fireeats.config import (
    MAX_PRICE,
    MIN_PRICE,
    RESTAURANTS_COLLECTION,
    SEED_BATCH_SIZE,
    SEED_CATEGORIES,
    SEED_CITIES,
    SEED_NAME_WORDS,
)
from fireeats.domain.models.core import Restaurant
from fireeats.domain.store import IDocumentStore
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import RestaurantsPopulatedEvent


@dataclass(frozen=True)
class PopulateRequest(UseCaseRequest):
    count: int = SEED_BATCH_SIZE
    collection: str = RESTAURANTS_COLLECTION


@dataclass(frozen=True)
class PopulateResponse(UseCaseResponse):
    restaurants: List[Restaurant] = field(default_factory=list)


def random_restaurant(
    rng: random.Random,
    words: Sequence[str] = SEED_NAME_WORDS,
    cities: Sequence[str] = SEED_CITIES,
    categories: Sequence[str] = SEED_CATEGORIES,
) -> Restaurant:
    # Two independent picks; the same word twice is allowed.
    name = f"{rng.choice(words)} {rng.choice(words)}"
    return Restaurant(
        name=name,
        category=rng.choice(categories),
        city=rng.choice(cities),
        price=rng.randint(MIN_PRICE, MAX_PRICE),
        rating_count=0,
        average_rating=0.0,
    )


class PopulateRestaurantsUseCase(UseCase):
    """Write a batch of random restaurants for demo purposes."""

    def __init__(self, store: IDocumentStore, event_bus: Optional[EventBus] = None, rng: Optional[random.Random] = None):
        self._store = store
        self._events = event_bus
        self._rng = rng or random.Random()
        self._logger = logging.getLogger(__name__)

    def execute(self, request: PopulateRequest) -> PopulateResponse:
        if request.count < 0:
            return PopulateResponse(success=False, error="count must not be negative")

        written: List[Restaurant] = []
        for _ in range(request.count):
            restaurant = random_restaurant(self._rng)
            try:
                self._store.add_document(request.collection, restaurant.to_mapping())
            except Exception as exc:
                self._logger.error("Error adding restaurant %s: %s", restaurant.name, exc)
                return PopulateResponse(success=False, error=str(exc), restaurants=written)
            written.append(restaurant)

        self._logger.info("Added %d restaurants to %s", len(written), request.collection)
        if self._events is not None:
            self._events.publish(
                RestaurantsPopulatedEvent(count=len(written), collection=request.collection, source=type(self).__name__)
            )
        return PopulateResponse(success=True, restaurants=written)
