"""Подготовка секретов и переменных окружения Azure Container Apps из .env."""

__version__ = "1.1.0"
