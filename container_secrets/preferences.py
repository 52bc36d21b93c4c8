"""Хранение последних использованных приложений и групп ресурсов."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

MAX_HISTORY = 5


@dataclass
class Preferences:
    """История значений, самые свежие первыми."""

    last_used_app: list[str] = field(default_factory=list)
    last_used_resource_group: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[str]]:
        return {
            "lastUsedApp": list(self.last_used_app),
            "lastUsedResourceGroup": list(self.last_used_resource_group),
        }


def _merge_history(value: str, history: Iterable[str]) -> list[str]:
    """Добавляет значение в начало, убирает повторы и обрезает до MAX_HISTORY."""
    merged: list[str] = []
    for item in (value, *history):
        if item and item not in merged:
            merged.append(item)
    return merged[:MAX_HISTORY]


def _as_history(raw: object) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str) and item]


class PreferencesStore:
    """JSON-файл с историей; ошибки чтения и записи не прерывают запуск."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Preferences:
        """Читает историю; при отсутствии или повреждении файла возвращает пустую."""
        if not self._path.exists():
            return Preferences()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Не удалось загрузить сохраненные настройки %s: %s", self._path, exc)
            return Preferences()
        if not isinstance(payload, dict):
            logger.warning("Некорректный формат файла настроек %s", self._path)
            return Preferences()
        return Preferences(
            last_used_app=_as_history(payload.get("lastUsedApp"))[:MAX_HISTORY],
            last_used_resource_group=_as_history(payload.get("lastUsedResourceGroup"))[:MAX_HISTORY],
        )

    def update(self, app_name: str, resource_group: str) -> Preferences:
        """Запоминает значения текущего запуска и сохраняет файл."""
        current = self.load()
        updated = Preferences(
            last_used_app=_merge_history(app_name, current.last_used_app),
            last_used_resource_group=_merge_history(resource_group, current.last_used_resource_group),
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(updated.as_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Не удалось сохранить настройки %s: %s", self._path, exc)
        return updated


__all__: Sequence[str] = ("MAX_HISTORY", "Preferences", "PreferencesStore")
