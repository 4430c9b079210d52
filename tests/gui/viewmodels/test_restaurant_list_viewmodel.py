"""Tests for RestaurantListViewModel."""

import logging
import threading

import pytest

from fireeats.application.services.live_query import LiveQuerySubscription
from fireeats.domain.models.core import Restaurant
from fireeats.domain.models.query import base_query
from fireeats.errors import DocumentDeleteError, StoreError
from fireeats.errors.handler import ErrorHandler, ErrorOccurredEvent
from fireeats.events.bus import EventBus
from fireeats.events.restaurant_events import DeleteFailedEvent, SnapshotAppliedEvent
from fireeats.gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel


def _rows(store, count):
    records, handles = [], []
    for i in range(count):
        restaurant = Restaurant(f"R{i}", "Pizza", "Belmont", 1 + i % 3, i, 0.0)
        handles.append(store.set_document("restaurants", f"doc{i}", restaurant.to_mapping()))
        records.append(restaurant)
    return records, handles


@pytest.fixture
def bound(seeded_store):
    bus = EventBus()
    vm = RestaurantListViewModel(bus, ErrorHandler(logging.getLogger("fireeats.tests"), bus))
    subscription = LiveQuerySubscription(seeded_store, bus)
    vm.bind(subscription)
    subscription.attach(base_query())
    yield vm, subscription, seeded_store, bus
    vm.dispose()
    subscription.close()


def test_initially_empty():
    vm = RestaurantListViewModel()

    assert vm.row_count() == 0
    assert not vm.loaded.value


@pytest.mark.parametrize("size", [0, 1, 2, 17, 49, 50])
def test_records_and_handles_aligned(store, size):
    vm = RestaurantListViewModel()
    records, handles = _rows(store, size)

    vm.on_snapshot(records, handles)

    assert vm.row_count() == size
    for i in range(size):
        assert vm.record_at(i).name == f"R{i}"
        assert vm.handle_at(i).document_id == f"doc{i}"
        assert vm.row_at(i) is vm.record_at(i)


def test_out_of_range_raises(store):
    vm = RestaurantListViewModel()
    vm.on_snapshot(*_rows(store, 2))

    with pytest.raises(IndexError):
        vm.record_at(2)
    with pytest.raises(IndexError):
        vm.handle_at(-1)
    with pytest.raises(IndexError):
        vm.delete_at(5)


def test_mismatched_push_rejected(store):
    vm = RestaurantListViewModel()
    records, handles = _rows(store, 2)

    with pytest.raises(ValueError):
        vm.on_snapshot(records, handles[:1])
    assert vm.row_count() == 0


def test_snapshot_replaced_wholesale(store):
    vm = RestaurantListViewModel()
    vm.on_snapshot(*_rows(store, 5))
    records, handles = _rows(store, 2)

    vm.on_snapshot(records[::-1], handles[::-1])

    assert [r.name for r in vm.snapshot().records] == ["R1", "R0"]
    assert [h.document_id for h in vm.snapshot().handles] == ["doc1", "doc0"]


def test_refresh_emitted_after_swap(store):
    vm = RestaurantListViewModel()
    seen = []
    vm.refresh_requested.connect(lambda: seen.append(vm.row_count()))

    vm.on_snapshot(*_rows(store, 3))

    assert seen == [3]
    assert vm.loaded.value


def test_snapshot_applied_event(store):
    bus = EventBus()
    events = []
    bus.subscribe(SnapshotAppliedEvent, events.append)
    vm = RestaurantListViewModel(bus)

    vm.on_snapshot(*_rows(store, 4))

    assert [e.row_count for e in events] == [4]


def test_error_keeps_previous_snapshot(bound):
    vm, _, store, bus = bound
    errors, reported = [], []
    vm.error_occurred.connect(errors.append)
    bus.subscribe(ErrorOccurredEvent, reported.append)
    error = StoreError("network")

    store.emit_error(error)

    assert vm.row_count() == 3
    assert errors == [error]
    assert vm.last_error.value is error
    assert reported[0].context == {"operation": "listen"}


def test_bound_list_follows_store(bound, make_data):
    vm, _, store, _ = bound

    store.add_document("restaurants", make_data("Spot Fire"))

    assert vm.row_count() == 4
    assert vm.record_at(3).name == "Spot Fire"


def test_delete_at_does_not_touch_local_rows(store):
    vm = RestaurantListViewModel()
    vm.on_snapshot(*_rows(store, 3))
    before = vm.snapshot()

    # Unbound: the store change has nowhere to go.
    vm.delete_at(0)

    assert vm.snapshot() is before
    assert store.count("restaurants") == 2


def test_delete_row_disappears_with_next_push(bound):
    vm, _, store, _ = bound
    queue = []
    store._dispatch = queue.append

    vm.delete_at(0)

    assert vm.row_count() == 3
    while queue:
        queue.pop(0)()
    assert vm.row_count() == 2
    assert [r.name for r in vm.snapshot().records] == ["Prime Place", "Bar Spot"]


def test_delete_failure_reported(bound):
    vm, _, store, bus = bound
    failures, events = [], []
    vm.delete_failed.connect(lambda document_id, error: failures.append((document_id, error)))
    bus.subscribe(DeleteFailedEvent, events.append)

    store.fail_next_delete(DocumentDeleteError("permission denied"))
    vm.delete_at(1)

    assert vm.row_count() == 3
    assert failures[0][0] == "b"
    assert isinstance(failures[0][1], DocumentDeleteError)
    assert events[0].document_id == "b"
    assert "permission denied" in events[0].reason


def test_delete_failure_logged_without_handler(store, caplog):
    vm = RestaurantListViewModel()
    vm.on_snapshot(*_rows(store, 1))

    store.fail_next_delete()
    with caplog.at_level(logging.ERROR):
        vm.delete_at(0)

    assert "Error deleting document doc0" in caplog.text


def test_dispose_unbinds(bound, make_data):
    vm, subscription, store, _ = bound

    vm.dispose()
    store.add_document("restaurants", make_data("Later"))

    assert subscription.consumer is None
    assert vm.row_count() == 3


def test_readers_never_see_torn_snapshot(store):
    vm = RestaurantListViewModel()
    small, large = _rows(store, 2), _rows(store, 40)
    vm.on_snapshot(*small)
    stop = threading.Event()
    torn = []

    def writer():
        while not stop.is_set():
            vm.on_snapshot(*large)
            vm.on_snapshot(*small)

    thread = threading.Thread(target=writer)
    thread.start()
    try:
        for _ in range(2000):
            snapshot = vm.snapshot()
            if len(snapshot.records) != len(snapshot.handles):
                torn.append(snapshot)
    finally:
        stop.set()
        thread.join()

    assert torn == []
