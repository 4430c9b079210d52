"""Tests for PopulateRestaurantsUseCase."""

import random

from fireeats.application.use_cases.populate import (
    PopulateRequest,
    PopulateRestaurantsUseCase,
    random_restaurant,
)
from fireeats.config import SEED_CATEGORIES, SEED_CITIES, SEED_NAME_WORDS
from fireeats.domain.models.core import Restaurant
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import RestaurantsPopulatedEvent


class _FailingStore:
    def __init__(self, fail_after):
        self.added = []
        self._fail_after = fail_after

    def add_document(self, collection, data):
        if len(self.added) == self._fail_after:
            raise ConnectionError("network down")
        self.added.append((collection, data))


def test_random_restaurant_uses_seed_vocabulary():
    rng = random.Random(7)

    for _ in range(50):
        restaurant = random_restaurant(rng)
        assert restaurant.category in SEED_CATEGORIES
        assert restaurant.city in SEED_CITIES
        assert 1 <= restaurant.price <= 3
        assert restaurant.rating_count == 0
        assert restaurant.average_rating == 0.0
        assert any(restaurant.name.startswith(word) for word in SEED_NAME_WORDS)


def test_default_request_writes_twenty(store):
    use_case = PopulateRestaurantsUseCase(store, rng=random.Random(1))

    response = use_case.execute(PopulateRequest())

    assert response.success
    assert len(response.restaurants) == 20
    assert store.count("restaurants") == 20


def test_written_documents_convert_back(store):
    use_case = PopulateRestaurantsUseCase(store, rng=random.Random(3))

    response = use_case.execute(PopulateRequest(count=5))

    stored = [Restaurant.from_mapping(doc.data) for doc in store.documents("restaurants")]
    assert stored == response.restaurants


def test_seeded_rng_is_deterministic(store):
    a = PopulateRestaurantsUseCase(store, rng=random.Random(42)).execute(PopulateRequest(count=3))
    b = PopulateRestaurantsUseCase(store, rng=random.Random(42)).execute(PopulateRequest(count=3))

    assert a.restaurants == b.restaurants


def test_negative_count_rejected(store):
    response = PopulateRestaurantsUseCase(store).execute(PopulateRequest(count=-1))

    assert not response.success
    assert store.count("restaurants") == 0


def test_stops_at_first_failure():
    failing = _FailingStore(fail_after=2)

    response = PopulateRestaurantsUseCase(failing, rng=random.Random(0)).execute(PopulateRequest(count=5))

    assert not response.success
    assert "network down" in response.error
    assert len(response.restaurants) == 2
    assert len(failing.added) == 2


def test_publishes_populated_event(store):
    bus = EventBus()
    events = []
    bus.subscribe(RestaurantsPopulatedEvent, events.append)

    PopulateRestaurantsUseCase(store, bus).execute(PopulateRequest(count=4, collection="places"))

    assert [(e.count, e.collection) for e in events] == [(4, "places")]
    assert store.count("places") == 4
