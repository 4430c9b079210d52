import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt tests run headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from fireeats.config import RESTAURANTS_COLLECTION  # noqa: E402
from fireeats.infrastructure.stores.memory_store import InMemoryDocumentStore  # noqa: E402


def restaurant_data(name="Best Spot", category="Pizza", city="San Francisco", price=1,
                    rating_count=0, average_rating=0.0):
    return {
        "name": name,
        "category": category,
        "city": city,
        "price": price,
        "ratingCount": rating_count,
        "averageRating": average_rating,
    }


@pytest.fixture
def make_data():
    return restaurant_data


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def seeded_store(store):
    """Three restaurants: one pizza place and two burger joints."""
    store.set_document(RESTAURANTS_COLLECTION, "a", restaurant_data("Fire Grill", "Burgers", "Palo Alto", 2))
    store.set_document(RESTAURANTS_COLLECTION, "b", restaurant_data("Prime Place", "Pizza", "San Jose", 1))
    store.set_document(RESTAURANTS_COLLECTION, "c", restaurant_data("Bar Spot", "Burgers", "San Jose", 3))
    return store


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PySide6.QtWidgets")
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app
