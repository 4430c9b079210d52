from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Tuple

from ...config import FIELD_CATEGORY, FIELD_CITY, FIELD_PRICE, RESTAURANTS_COLLECTION, RESULT_LIMIT


class FilterOp(str, Enum):
    EQUAL = "=="


@dataclass(frozen=True)
class FieldFilter:
    field: str
    value: Any
    op: FilterOp = FilterOp.EQUAL

    def matches(self, data: dict) -> bool:
        return self.field in data and data[self.field] == self.value


@dataclass(frozen=True)
class QueryDefinition:
    """Declarative description of which documents to fetch and in what order.

    Instances are never patched in place; a filter change always produces a
    new definition from :func:`base_query`.
    """

    collection: str = RESTAURANTS_COLLECTION
    limit: int = RESULT_LIMIT
    filters: Tuple[FieldFilter, ...] = ()
    order_by: Optional[str] = None

    def where(self, field: str, value: Any) -> "QueryDefinition":
        return replace(self, filters=self.filters + (FieldFilter(field, value),))

    def ordered_by(self, field: str) -> "QueryDefinition":
        return replace(self, order_by=field)

    def filter_value(self, field: str) -> Any:
        for item in self.filters:
            if item.field == field:
                return item.value
        return None

    @property
    def is_base(self) -> bool:
        return not self.filters and self.order_by is None


@dataclass(frozen=True)
class FilterSelection:
    """Filter panel state; ``None`` or an empty string means no constraint."""

    category: Optional[str] = None
    city: Optional[str] = None
    price: Optional[int] = None
    sort_by: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.category or self.city or self.price is not None or self.sort_by)


def base_query(collection: str = RESTAURANTS_COLLECTION, limit: int = RESULT_LIMIT) -> QueryDefinition:
    return QueryDefinition(collection=collection, limit=limit)


def build_query(
    base: QueryDefinition,
    category: Optional[str] = None,
    city: Optional[str] = None,
    price: Optional[int] = None,
    sort_by: Optional[str] = None,
) -> QueryDefinition:
    """Compose *base* with the selected filters.

    Constraints are always added in the order category, city, price, so equal
    selections yield equal definitions.
    """
    query = base
    if category:
        query = query.where(FIELD_CATEGORY, category)
    if city:
        query = query.where(FIELD_CITY, city)
    if price is not None:
        query = query.where(FIELD_PRICE, price)
    if sort_by:
        query = query.ordered_by(sort_by)
    return query


def query_for_selection(base: QueryDefinition, selection: FilterSelection) -> QueryDefinition:
    return build_query(
        base,
        category=selection.category,
        city=selection.city,
        price=selection.price,
        sort_by=selection.sort_by,
    )
