"""Default configuration values for FireEats."""

from __future__ import annotations

from typing import Final

# Name of the collection every query starts from.
RESTAURANTS_COLLECTION: Final[str] = "restaurants"

# Every query is capped at this many results; there is no pagination.
RESULT_LIMIT: Final[int] = 50

# Field names as stored in the document store.
FIELD_NAME: Final[str] = "name"
FIELD_CATEGORY: Final[str] = "category"
FIELD_CITY: Final[str] = "city"
FIELD_PRICE: Final[str] = "price"
FIELD_RATING_COUNT: Final[str] = "ratingCount"
FIELD_AVERAGE_RATING: Final[str] = "averageRating"

# Fields the filter panel offers for ordering.
SORTABLE_FIELDS: Final[tuple[str, ...]] = (FIELD_NAME, FIELD_AVERAGE_RATING, FIELD_PRICE, FIELD_RATING_COUNT)

MIN_PRICE: Final[int] = 1
MAX_PRICE: Final[int] = 3
MAX_RATING: Final[float] = 5.0

# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

SEED_BATCH_SIZE: Final[int] = 20
SEED_NAME_WORDS: Final[tuple[str, ...]] = (
    "Bar", "Fire", "Grill", "Drive Thru", "Place", "Best", "Spot", "Prime", "Eatin'",
)
SEED_CITIES: Final[tuple[str, ...]] = (
    "San Francisco", "Mountain View", "Palo Alto", "Redwood City", "San Mateo",
    "Cupertino", "San Jose", "Daly City", "Millbrae", "Belmont",
)
SEED_CATEGORIES: Final[tuple[str, ...]] = (
    "Pizza", "Burgers", "American", "Dim Sum", "Pho", "Mexican", "Hot Pot",
)

# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

FOOD_IMAGE_COUNT: Final[int] = 22
FOOD_IMAGE_URL_TEMPLATE: Final[str] = (
    "https://storage.googleapis.com/firestorequickstarts.appspot.com/food_{number}.png"
)
