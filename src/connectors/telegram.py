"""Telegram Bot API client and per-chat session memory."""

import logging
import threading
from dataclasses import dataclass
from typing import Any

import requests


logger = logging.getLogger(__name__)


TELEGRAM_API_BASE = "https://api.telegram.org"
TELEGRAM_TIMEOUT_SECONDS = 10.0


class TelegramError(Exception):
    """Raised when a Bot API call fails."""

    pass


@dataclass(frozen=True)
class SessionEntry:
    """Last joke delivered to a chat and whether translation is on offer."""
    text: str
    offer_translation: bool = True


class SessionMemory:
    """In-memory map from chat id to the last delivered joke.

    Entries are replaced whole under a lock, so a chat's text and its
    translation flag always change together. Entries never expire.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[int, SessionEntry] = {}

    def set(self, chat_id: int, text: str, offer_translation: bool = True) -> None:
        """Remember the last joke sent to a chat and whether it can be translated."""
        with self._lock:
            self._entries[chat_id] = SessionEntry(text=text, offer_translation=offer_translation)

    def get(self, chat_id: int) -> str | None:
        entry = self.entry(chat_id)
        return entry.text if entry else None

    def entry(self, chat_id: int) -> SessionEntry | None:
        with self._lock:
            return self._entries.get(chat_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class TelegramClient:
    """Minimal Bot API client covering the methods the bot uses.

    Attributes:
        token: Bot API token
    """

    def __init__(self, token: str, timeout: float = TELEGRAM_TIMEOUT_SECONDS):
        self.token = token
        self.timeout = timeout

    def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict[str, Any] | None = None,
    ) -> Any:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        return self._call("sendMessage", payload)

    def answer_callback_query(self, callback_query_id: str, text: str = "") -> Any:
        return self._call(
            "answerCallbackQuery",
            {"callback_query_id": callback_query_id, "text": text},
        )

    def clear_reply_markup(self, chat_id: int, message_id: int) -> Any:
        """Remove the inline keyboard from a sent message."""
        return self._call(
            "editMessageReplyMarkup",
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "reply_markup": {"inline_keyboard": []},
            },
        )

    def _call(self, method: str, payload: dict[str, Any]) -> Any:
        """POST a Bot API method and return its result.

        Raises:
            TelegramError: On network errors or a response with ok=false
        """
        url = f"{TELEGRAM_API_BASE}/bot{self.token}/{method}"
        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
            data = response.json()
        except requests.RequestException as e:
            raise TelegramError(f"{method} failed: {e}") from e
        except ValueError as e:
            raise TelegramError(f"{method} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise TelegramError(f"{method} returned an unexpected payload")
        if not data.get("ok"):
            raise TelegramError(f"{method} rejected: {data.get('description', 'unknown error')}")
        return data.get("result")
