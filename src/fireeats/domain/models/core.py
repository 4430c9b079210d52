from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ...config import (
    FIELD_AVERAGE_RATING,
    FIELD_CATEGORY,
    FIELD_CITY,
    FIELD_NAME,
    FIELD_PRICE,
    FIELD_RATING_COUNT,
    MAX_PRICE,
    MAX_RATING,
    MIN_PRICE,
)
from ...errors import DocumentConversionError

_PRICE_LABELS = {1: "$", 2: "$$", 3: "$$$"}


def price_string(price: int | None) -> str:
    """Return the dollar-sign label for *price*, or an empty string."""
    return _PRICE_LABELS.get(price, "") if isinstance(price, int) else ""


def _require(data: Mapping[str, Any], key: str, kinds: tuple[type, ...]) -> Any:
    if key not in data:
        raise DocumentConversionError(f"missing field '{key}'", data=dict(data))
    value = data[key]
    # bool is an int subclass; a stored true/false is never a count or a price
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise DocumentConversionError(
            f"field '{key}' has type {type(value).__name__}", data=dict(data)
        )
    return value


def _check_range(data: Mapping[str, Any], key: str, value: float, low: float, high: float | None) -> None:
    # Written as "not within" so that NaN is rejected too.
    if not low <= value or (high is not None and not value <= high):
        bound = f"{low}..{high}" if high is not None else f">= {low}"
        raise DocumentConversionError(f"field '{key}' is {value}, expected {bound}", data=dict(data))


@dataclass(frozen=True)
class Restaurant:
    name: str
    category: str
    city: str
    price: int
    rating_count: int
    average_rating: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Restaurant:
        """Build a restaurant from a stored document payload.

        Raises :class:`DocumentConversionError` when a field is absent, has
        the wrong type or lies outside its range. Unknown keys are ignored.
        """
        if not isinstance(data, Mapping):
            raise DocumentConversionError(
                f"document payload is {type(data).__name__}, not a mapping", data=data
            )
        price = _require(data, FIELD_PRICE, (int,))
        rating_count = _require(data, FIELD_RATING_COUNT, (int,))
        average_rating = float(_require(data, FIELD_AVERAGE_RATING, (int, float)))
        _check_range(data, FIELD_PRICE, price, MIN_PRICE, MAX_PRICE)
        _check_range(data, FIELD_RATING_COUNT, rating_count, 0, None)
        _check_range(data, FIELD_AVERAGE_RATING, average_rating, 0.0, MAX_RATING)
        return cls(
            name=_require(data, FIELD_NAME, (str,)),
            category=_require(data, FIELD_CATEGORY, (str,)),
            city=_require(data, FIELD_CITY, (str,)),
            price=price,
            rating_count=rating_count,
            average_rating=average_rating,
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            FIELD_NAME: self.name,
            FIELD_CATEGORY: self.category,
            FIELD_CITY: self.city,
            FIELD_PRICE: self.price,
            FIELD_RATING_COUNT: self.rating_count,
            FIELD_AVERAGE_RATING: self.average_rating,
        }

    @property
    def price_label(self) -> str:
        return price_string(self.price)

    @property
    def star_count(self) -> int:
        """Whole stars shown for the average rating."""
        return int(round(self.average_rating))
