"""Разбор .env-файла, очистка значений и фильтрация по префиксам."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable, Sequence

from .models import (
    SKIP_EMPTY,
    SKIP_EXCLUDED_PREFIX,
    SKIP_NOT_INCLUDED_PREFIX,
    FilterDecision,
    NormalizationResult,
    NormalizedEntry,
    RawEntry,
)
from .naming import normalize_secret_name

logger = logging.getLogger(__name__)

_EXPORT_PATTERN = re.compile(r"^export\s+")
_QUOTES = ("'", '"')
_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")
_INLINE_COMMENT = re.compile(r"\s+#.*$")
_QUOTED_WITH_COMMENT = re.compile(r"""^(["'])(.*)\1\s+#.*$""", re.DOTALL)


class InputFileError(RuntimeError):
    """Входной файл отсутствует или не читается."""


def read_env_file(path: str | os.PathLike[str]) -> str:
    """Читает содержимое .env-файла."""
    env_path = Path(path)
    if not env_path.is_file():
        raise InputFileError(f"Файл не найден: {env_path}")
    try:
        return env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFileError(f"Не удалось прочитать файл {env_path}: {exc}") from exc


def parse_env_text(text: str) -> tuple[list[RawEntry], list[int]]:
    """Считывает пары ключ-значение и номера некорректных строк.

    Значение в кавычках может занимать несколько строк. Повторяющийся ключ
    сохраняет позицию первого вхождения и значение последнего.
    """
    entries: dict[str, RawEntry] = {}
    malformed: list[int] = []
    lines = text.splitlines()
    index = 0
    while index < len(lines):
        number = index + 1
        stripped = lines[index].strip()
        index += 1
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            malformed.append(number)
            continue
        key, value = stripped.split("=", 1)
        key = _EXPORT_PATTERN.sub("", key.strip()).strip()
        if not _KEY_PATTERN.match(key):
            malformed.append(number)
            continue
        value = value.strip()
        if _opens_multiline(value):
            closing = _find_closing_line(lines, index, value[0])
            if closing is not None:
                value = "\n".join([value, *lines[index:closing], lines[closing].rstrip()])
                index = closing + 1
        entries[key] = RawEntry(key=key, value=_strip_inline_comment(value), line_number=number)
    return list(entries.values()), malformed


def _opens_multiline(value: str) -> bool:
    """Открывающая кавычка без парной на той же строке."""
    return value[:1] in _QUOTES and value.count(value[0]) == 1


def _find_closing_line(lines: Sequence[str], start: int, quote: str) -> int | None:
    for index in range(start, len(lines)):
        if lines[index].rstrip().endswith(quote):
            return index
    return None


def _strip_inline_comment(value: str) -> str:
    """Убирает комментарий ' # ...' после значения."""
    if value[:1] in _QUOTES:
        match = _QUOTED_WITH_COMMENT.match(value)
        if match:
            return f"{match.group(1)}{match.group(2)}{match.group(1)}"
        return value
    return _INLINE_COMMENT.sub("", value)


def clean_value(raw: str) -> str:
    """Снимает один слой парных кавычек; в двойных кавычках раскрывает \\n и \\r."""
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        quote = value[0]
        value = value[1:-1]
        if quote == '"':
            value = value.replace("\\n", "\n").replace("\\r", "\r")
    return value


def check_prefixes(
    key: str,
    include_prefixes: Sequence[str],
    exclude_prefixes: Sequence[str],
) -> FilterDecision:
    """Проверяет исходный ключ: исключение важнее включения."""
    if any(key.startswith(prefix) for prefix in exclude_prefixes):
        return FilterDecision(included=False, reason=SKIP_EXCLUDED_PREFIX)
    if include_prefixes and not any(key.startswith(prefix) for prefix in include_prefixes):
        return FilterDecision(included=False, reason=SKIP_NOT_INCLUDED_PREFIX)
    return FilterDecision(included=True)


def normalize_entries(
    entries: Iterable[RawEntry],
    include_prefixes: Sequence[str] = (),
    exclude_prefixes: Sequence[str] = (),
    style: str = "kebab-lower",
    secret_prefix: str | None = None,
) -> NormalizationResult:
    """Фильтрует записи и строит целевые имена секретов."""
    result = NormalizationResult()
    for raw in entries:
        value = clean_value(raw.value)
        if not value:
            result.skipped.append((raw.key, SKIP_EMPTY))
            continue
        decision = check_prefixes(raw.key, include_prefixes, exclude_prefixes)
        if not decision.included:
            result.skipped.append((raw.key, decision.reason))
            continue
        target_name = normalize_secret_name(raw.key, style, secret_prefix)
        result.report.add(target_name, raw.key)
        result.entries.append(NormalizedEntry(key=raw.key, target_name=target_name, value=value))
    return result


def process_env_text(
    text: str,
    include_prefixes: Sequence[str] = (),
    exclude_prefixes: Sequence[str] = (),
    style: str = "kebab-lower",
    secret_prefix: str | None = None,
) -> NormalizationResult:
    """Полный проход по тексту .env: разбор, очистка, фильтры, имена."""
    raw_entries, malformed = parse_env_text(text)
    for number in malformed:
        logger.debug("Строка %d пропущена: нет ключа или символа '='", number)
    result = normalize_entries(raw_entries, include_prefixes, exclude_prefixes, style, secret_prefix)
    result.malformed_lines = malformed
    return result


__all__: Sequence[str] = (
    "InputFileError",
    "check_prefixes",
    "clean_value",
    "normalize_entries",
    "parse_env_text",
    "process_env_text",
    "read_env_file",
)
