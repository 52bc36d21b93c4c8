"""Настройка логирования приложения."""

from __future__ import annotations

import logging
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING") -> None:
    """Настраивает корневой логгер с выводом в stderr через rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


__all__: Sequence[str] = ("setup_logging",)
