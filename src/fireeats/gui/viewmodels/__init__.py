from .detail_viewmodel import DetailSelection, RestaurantDetailViewModel
from .filter_viewmodel import FilterViewModel
from .restaurant_list_viewmodel import RestaurantListViewModel
from .signal import ObservableProperty, Signal

__all__ = [
    "DetailSelection",
    "FilterViewModel",
    "ObservableProperty",
    "RestaurantDetailViewModel",
    "RestaurantListViewModel",
    "Signal",
]
