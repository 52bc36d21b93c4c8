from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from container_secrets.preferences import Preferences, PreferencesStore


def test_load_missing_file(tmp_path: Path) -> None:
    store = PreferencesStore(tmp_path / "config.json")

    assert store.load() == Preferences()


def test_load_corrupted_file_warns(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        prefs = PreferencesStore(path).load()

    assert prefs == Preferences()
    assert any(record.levelno == logging.WARNING for record in caplog.records)


def test_load_ignores_invalid_entries(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"lastUsedApp": ["a", 1, ""], "lastUsedResourceGroup": "rg"}), encoding="utf-8")

    prefs = PreferencesStore(path).load()

    assert prefs.last_used_app == ["a"]
    assert prefs.last_used_resource_group == []


def test_update_prepends_dedupes_and_truncates(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    store = PreferencesStore(path)
    for app in ("a1", "a2", "a3", "a4", "a5", "a6"):
        store.update(app, "rg1")
    store.update("a3", "rg2")

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload == {
        "lastUsedApp": ["a3", "a6", "a5", "a4", "a2"],
        "lastUsedResourceGroup": ["rg2", "rg1"],
    }


def test_update_write_failure_is_not_fatal(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = PreferencesStore(blocker / "config.json")

    with caplog.at_level(logging.WARNING):
        prefs = store.update("app", "rg")

    assert prefs.last_used_app == ["app"]
    assert "Не удалось сохранить настройки" in caplog.text
