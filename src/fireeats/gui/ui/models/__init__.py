from .restaurant_list_model import RestaurantListModel
from .roles import Roles, role_names

__all__ = ["RestaurantListModel", "Roles", "role_names"]
