"""Role definitions exposed by the restaurant list model."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to QML or widgets."""

    NAME = Qt.UserRole + 1
    CATEGORY = Qt.UserRole + 2
    CITY = Qt.UserRole + 3
    PRICE = Qt.UserRole + 4
    PRICE_LABEL = Qt.UserRole + 5
    RATING_COUNT = Qt.UserRole + 6
    AVERAGE_RATING = Qt.UserRole + 7
    STARS = Qt.UserRole + 8
    DOCUMENT_ID = Qt.UserRole + 9
    RESTAURANT = Qt.UserRole + 10


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.NAME: b"name",
            Roles.CATEGORY: b"category",
            Roles.CITY: b"city",
            Roles.PRICE: b"price",
            Roles.PRICE_LABEL: b"priceLabel",
            Roles.RATING_COUNT: b"ratingCount",
            Roles.AVERAGE_RATING: b"averageRating",
            Roles.STARS: b"stars",
            Roles.DOCUMENT_ID: b"documentId",
            Roles.RESTAURANT: b"restaurant",
        }
    )
    return mapping
