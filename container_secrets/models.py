"""Общие модели данных."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

SKIP_EMPTY = "empty"
SKIP_EXCLUDED_PREFIX = "excluded-prefix"
SKIP_NOT_INCLUDED_PREFIX = "not-included-prefix"
SKIP_REASONS: tuple[str, ...] = (SKIP_EMPTY, SKIP_EXCLUDED_PREFIX, SKIP_NOT_INCLUDED_PREFIX)


@dataclass(frozen=True)
class RawEntry:
    """Одна разобранная строка .env."""

    key: str
    value: str
    line_number: int = 0


@dataclass(frozen=True)
class FilterDecision:
    """Решение фильтра по ключу."""

    included: bool
    reason: str | None = None


@dataclass(frozen=True)
class NormalizedEntry:
    """Запись, прошедшая фильтры, с целевым именем секрета."""

    key: str
    target_name: str
    value: str

    @property
    def is_multiline(self) -> bool:
        return "\n" in self.value or "\r" in self.value


@dataclass
class CollisionReport:
    """Соответствие целевого имени исходным ключам."""

    names: dict[str, list[str]] = field(default_factory=dict)

    def add(self, target_name: str, key: str) -> None:
        self.names.setdefault(target_name, []).append(key)

    @property
    def collisions(self) -> dict[str, list[str]]:
        """Имена, полученные из двух и более ключей."""
        return {name: keys for name, keys in self.names.items() if len(keys) > 1}

    def __bool__(self) -> bool:
        return bool(self.collisions)

    def describe(self) -> list[str]:
        return [f"{name}: {', '.join(keys)}" for name, keys in self.collisions.items()]


@dataclass
class NormalizationResult:
    """Итог разбора и фильтрации файла."""

    entries: list[NormalizedEntry] = field(default_factory=list)
    skipped: list[tuple[str, str | None]] = field(default_factory=list)
    malformed_lines: list[int] = field(default_factory=list)
    report: CollisionReport = field(default_factory=CollisionReport)

    @property
    def processed_keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    @property
    def skipped_keys(self) -> list[str]:
        return [key for key, _ in self.skipped]

    @property
    def skip_counts(self) -> dict[str, int]:
        """Количество пропущенных ключей по причинам."""
        counts = {reason: 0 for reason in SKIP_REASONS}
        for _, reason in self.skipped:
            counts[reason] += 1
        return counts

    @property
    def has_multiline_values(self) -> bool:
        return any(entry.is_multiline for entry in self.entries)


__all__: Sequence[str] = (
    "CollisionReport",
    "FilterDecision",
    "NormalizationResult",
    "NormalizedEntry",
    "RawEntry",
    "SKIP_EMPTY",
    "SKIP_EXCLUDED_PREFIX",
    "SKIP_NOT_INCLUDED_PREFIX",
    "SKIP_REASONS",
)
