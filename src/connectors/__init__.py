"""Connectors module - external service integrations."""

from src.connectors.telegram import (
    SessionEntry,
    SessionMemory,
    TelegramClient,
    TelegramError,
)
from src.connectors.translator import TranslationError, Translator

__all__ = [
    "SessionEntry",
    "SessionMemory",
    "TelegramClient",
    "TelegramError",
    "TranslationError",
    "Translator",
]
