"""Tests for the settings schema and manager."""

import json

import pytest

pytest.importorskip("PySide6")

from fireeats.errors import SettingsLoadError, SettingsValidationError  # noqa: E402
from fireeats.settings import SettingsManager  # noqa: E402
from fireeats.settings.manager import default_settings_path  # noqa: E402
from fireeats.settings.schema import DEFAULT_SETTINGS, merge_with_defaults  # noqa: E402


def test_load_creates_defaults(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)

    manager.load()

    assert path.exists()
    assert manager.get("store.backend") == "memory"
    assert manager.get("store.limit") == 50
    assert manager.get("store.collection") == "restaurants"
    assert json.loads(path.read_text(encoding="utf-8"))["schema"] == "fireeats/settings@1"


def test_partial_file_merged(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"store": {"limit": 10}}), encoding="utf-8")
    manager = SettingsManager(path)

    manager.load()

    assert manager.get("store.limit") == 10
    assert manager.get("store.backend") == "memory"


def test_invalid_file_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"store": {"backend": "sqlite"}}), encoding="utf-8")

    with pytest.raises(SettingsValidationError):
        SettingsManager(path).load()


def test_unreadable_file_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SettingsLoadError):
        SettingsManager(path).load()


def test_set_persists_and_emits(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)
    manager.load()
    changes = []
    manager.settingsChanged.connect(lambda key, value: changes.append((key, value)))

    manager.set("filters", {"category": "Pizza", "city": None, "price": 2, "sort_by": "name"})

    assert changes == [("filters", {"category": "Pizza", "city": None, "price": 2, "sort_by": "name"})]
    reloaded = SettingsManager(path)
    reloaded.load()
    assert reloaded.get("filters.price") == 2


def test_set_rejects_invalid_value(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()

    with pytest.raises(SettingsValidationError):
        manager.set("filters.price", 9)
    assert manager.get("filters.price") is None


def test_get_returns_copies_and_defaults(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()

    manager.get("store")["limit"] = 1

    assert manager.get("store.limit") == 50
    assert manager.get("missing.key", "fallback") == "fallback"


def test_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("FIREEATS_SETTINGS", str(tmp_path / "custom.json"))

    assert default_settings_path() == tmp_path / "custom.json"


def test_merge_does_not_mutate_defaults():
    merge_with_defaults({"store": {"limit": 3}})

    assert DEFAULT_SETTINGS["store"]["limit"] == 50


def test_any_sort_field_accepted(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()

    manager.set("filters.sort_by", "city")

    assert manager.get("filters.sort_by") == "city"
    with pytest.raises(SettingsValidationError):
        manager.set("filters.sort_by", "")
