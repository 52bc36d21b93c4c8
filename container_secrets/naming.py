"""Преобразование ключей .env в имена секретов и поиск коллизий."""

from __future__ import annotations

import logging
from typing import Sequence

from .models import CollisionReport

logger = logging.getLogger(__name__)


class NameCollisionError(RuntimeError):
    """Несколько ключей дают одно и то же имя секрета."""

    def __init__(self, report: CollisionReport) -> None:
        self.report = report
        super().__init__("Обнаружены коллизии имен секретов: " + "; ".join(report.describe()))


def normalize_secret_name(key: str, style: str, prefix: str | None = None) -> str:
    """Возвращает имя секрета для ключа в выбранном стиле."""
    if style == "kebab-lower":
        name = key.lower().replace("_", "-")
    elif style == "lower":
        name = key.lower()
    elif style == "preserve":
        name = key
    else:
        raise ValueError(f"Неизвестный стиль имен секретов: {style}")
    if prefix:
        name = f"{prefix}{name}"
    return name


def ensure_unique_names(report: CollisionReport) -> None:
    """Прерывает запуск, если хотя бы одно имя получено из нескольких ключей."""
    if not report:
        return
    for line in report.describe():
        logger.debug("Коллизия имени секрета: %s", line)
    raise NameCollisionError(report)


__all__: Sequence[str] = ("NameCollisionError", "ensure_unique_names", "normalize_secret_name")
