from .core import Restaurant, price_string
from .query import FieldFilter, FilterSelection, QueryDefinition, base_query, build_query
from .snapshot import RestaurantSnapshot

__all__ = [
    "FieldFilter",
    "FilterSelection",
    "QueryDefinition",
    "Restaurant",
    "RestaurantSnapshot",
    "base_query",
    "build_query",
    "price_string",
]
