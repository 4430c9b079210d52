"""FireEats: a restaurant directory bound to a live document query."""

__version__ = "0.1.0"
