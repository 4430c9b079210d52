"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import RESTAURANTS_COLLECTION, RESULT_LIMIT

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "fireeats/settings.schema.json",
    "type": "object",
    "required": ["schema", "store", "filters"],
    "properties": {
        "schema": {"const": "fireeats/settings@1"},
        "store": {
            "type": "object",
            "required": ["backend"],
            "properties": {
                "backend": {"type": "string", "enum": ["memory", "firestore"]},
                "credentials_path": {"type": ["string", "null"]},
                "collection": {"type": "string", "minLength": 1},
                "limit": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
        "filters": {
            "type": "object",
            "properties": {
                "category": {"type": ["string", "null"]},
                "city": {"type": ["string", "null"]},
                "price": {"type": ["integer", "null"], "minimum": 1, "maximum": 3},
                "sort_by": {"type": ["string", "null"], "minLength": 1},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "fireeats/settings@1",
    "store": {
        "backend": "memory",
        "credentials_path": None,
        "collection": RESTAURANTS_COLLECTION,
        "limit": RESULT_LIMIT,
    },
    "filters": {
        "category": None,
        "city": None,
        "price": None,
        "sort_by": None,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_SECTIONS = ("store", "filters")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                merged.setdefault(key, {}).update(value)
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
