"""Tests for FilterViewModel and the live list scenarios built on it."""

import pytest

from fireeats.application.services.live_query import LiveQuerySubscription
from fireeats.domain.models.query import FilterSelection, base_query, build_query
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import FiltersAppliedEvent
from fireeats.gui.viewmodels.filter_viewmodel import FilterViewModel
from fireeats.gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel


@pytest.fixture
def stack(seeded_store):
    bus = EventBus()
    subscription = LiveQuerySubscription(seeded_store, bus)
    restaurants = RestaurantListViewModel(bus)
    restaurants.bind(subscription)
    filters = FilterViewModel(subscription, base_query(), bus)
    yield filters, restaurants, subscription, seeded_store, bus
    filters.dispose()
    restaurants.dispose()


def _names(restaurants):
    return [r.name for r in restaurants.snapshot().records]


def test_start_attaches_base_query(stack):
    filters, restaurants, subscription, store, _ = stack

    filters.start()

    assert subscription.query == base_query()
    assert restaurants.row_count() == 3
    assert store.listener_count == 1


def test_filter_then_clear_scenario(stack):
    filters, restaurants, _, _, _ = stack
    filters.start()
    assert restaurants.row_count() == 3

    filters.apply_filters(category="Pizza")
    assert _names(restaurants) == ["Prime Place"]

    filters.apply_filters()
    assert restaurants.row_count() == 3


def test_active_query_reflects_last_apply(stack):
    filters, _, subscription, _, _ = stack

    filters.apply_filters(category="Burgers", city="San Jose")
    filters.apply_filters(city="Palo Alto", sort_by="price")

    expected = build_query(base_query(), city="Palo Alto", sort_by="price")
    assert subscription.query == expected
    assert filters.query.value == expected
    assert expected.filter_value("category") is None


def test_each_apply_leaves_one_listener(stack):
    filters, _, _, store, _ = stack

    for category in ("Pizza", "Burgers", "", "Pho"):
        filters.apply_filters(category=category)

    assert store.listener_count == 1


def test_reapplying_same_filters_resubscribes(stack):
    filters, restaurants, _, store, _ = stack
    refreshes = []
    restaurants.refresh_requested.connect(lambda: refreshes.append(1))

    filters.apply_filters(price=1)
    filters.apply_filters(price=1)

    assert len(refreshes) == 2
    assert store.listener_count == 1


def test_sorted_results(stack):
    filters, restaurants, _, _, _ = stack

    filters.apply_filters(sort_by="price")

    assert [r.price for r in restaurants.snapshot().records] == [1, 2, 3]


def test_empty_strings_normalised(stack):
    filters, _, _, _, _ = stack

    filters.apply_filters(category="", city="", sort_by="")

    assert filters.selection.value == FilterSelection()
    assert not filters.has_active_filters


def test_selection_observable_and_event(stack):
    filters, _, _, _, bus = stack
    changes, events = [], []
    filters.selection.changed.connect(lambda new, old: changes.append(new))
    bus.subscribe(FiltersAppliedEvent, events.append)

    filters.apply_filters(city="Belmont", price=2)

    assert changes == [FilterSelection(city="Belmont", price=2)]
    assert (events[0].city, events[0].price) == ("Belmont", 2)


def test_labels(stack):
    filters, _, _, _, _ = stack
    filters.apply_filters(category="Pho", price=3)

    assert filters.category_label == "Pho"
    assert filters.city_label is None
    assert filters.price_label == "$$$"
    assert filters.has_active_filters

    filters.clear_filters()
    assert filters.category_label is None
    assert filters.price_label is None


def test_stop_detaches(stack, make_data):
    filters, restaurants, subscription, store, _ = stack
    filters.start()

    filters.stop()
    filters.stop()
    store.add_document("restaurants", make_data("Ignored"))

    assert not subscription.is_active
    assert restaurants.row_count() == 3


def test_custom_base_limit(seeded_store):
    subscription = LiveQuerySubscription(seeded_store)
    restaurants = RestaurantListViewModel()
    restaurants.bind(subscription)
    filters = FilterViewModel(subscription, base_query(limit=2))

    filters.apply_filters()

    assert restaurants.row_count() == 2
    filters.apply_filters(category="Pizza")
    assert restaurants.row_count() == 1
