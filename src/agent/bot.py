"""Telegram bot logic: command routing and deferred translation.

Feature: joke-aggregator
"""

import logging
from typing import Any

from src.agent.workflow import FETCH_TIMEOUT_SECONDS, fetch_joke, fetch_native_joke
from src.connectors.telegram import SessionMemory, TelegramClient, TelegramError
from src.connectors.translator import TranslationError, Translator
from src.engines.errors import JokeFetchError
from src.engines.selector import ProviderRegistry


logger = logging.getLogger(__name__)


TRANSLATE_CALLBACK = "translate_joke"

GREETING_TEXT = (
    "Привет! Я бот-анекдотчик 🤖\n\n"
    "Я умею присылать случайные анекдоты из разных источников. "
    "Просто отправь команду /joke, чтобы получить свежий анекдот!\n\n"
    "Также я могу переводить анекдоты на русский язык, если потребуется.\n\n"
    "Пиши /joke — и улыбка гарантирована!"
)
USAGE_TEXT = "Используйте /joke для получения случайного анекдота."
UNAVAILABLE_TEXT = "Анекдоты временно недоступны"
NATIVE_UNAVAILABLE_TEXT = "Русские анекдоты временно недоступны"
TRANSLATE_BUTTON_TEXT = "Перевести на русский"
TRANSLATED_ACK_TEXT = "Переведено"
TRANSLATION_FAILED_TEXT = "Ошибка перевода"


def parse_command(message: dict[str, Any]) -> str | None:
    """Return the command name of a message, or None if it is not a command.

    Handles the ``/command@BotName`` form used in group chats.

    Example:
        >>> parse_command({"text": "/joke@JokeBot extra"})
        'joke'
    """
    text = message.get("text") or ""
    if not text.startswith("/"):
        return None

    entities = message.get("entities")
    if entities is not None and not any(
        e.get("type") == "bot_command" and e.get("offset") == 0 for e in entities
    ):
        return None

    command = text.split(maxsplit=1)[0][1:]
    return command.split("@", 1)[0].lower()


def translate_keyboard() -> dict[str, Any]:
    """Inline keyboard offering a translation of the joke it is attached to."""
    return {
        "inline_keyboard": [[
            {"text": TRANSLATE_BUTTON_TEXT, "callback_data": TRANSLATE_CALLBACK},
        ]],
    }


class JokeBot:
    """Processes Telegram updates.

    Attributes:
        client: Bot API client used for replies
        memory: Per-chat memory of the last non-native joke
        registry: Provider table for joke fetches
        translator: Translation connector for deferred translations
        fetch_timeout: Budget for each joke fetch
    """

    def __init__(
        self,
        client: TelegramClient,
        memory: SessionMemory,
        registry: ProviderRegistry,
        translator: Translator,
        fetch_timeout: float = FETCH_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.memory = memory
        self.registry = registry
        self.translator = translator
        self.fetch_timeout = fetch_timeout

    def process_update(self, update: dict[str, Any]) -> None:
        """Handle one update; Bot API failures are logged, not raised."""
        try:
            callback = update.get("callback_query")
            if callback is not None:
                self._handle_callback(callback)
                return

            message = update.get("message")
            if message is None:
                return

            command = parse_command(message)
            if command is None:
                return
            chat_id = (message.get("chat") or {}).get("id")
            if chat_id is None:
                logger.warning("Ignoring command without a chat id")
                return
            self._handle_command(command, chat_id)
        except TelegramError as e:
            logger.error(f"Telegram API call failed: {e}")

    def _handle_command(self, command: str, chat_id: int) -> None:
        logger.info(f"Command /{command} from chat {chat_id}")
        if command == "start":
            self.client.send_message(chat_id, GREETING_TEXT)
        elif command == "joke":
            self._send_random_joke(chat_id)
        elif command == "joke_ru":
            self._send_native_joke(chat_id)
        else:
            self.client.send_message(chat_id, USAGE_TEXT)

    def _send_random_joke(self, chat_id: int) -> None:
        try:
            joke = fetch_joke(self.registry, timeout=self.fetch_timeout)
        except JokeFetchError as e:
            logger.error(f"Failed to fetch joke for chat {chat_id}: {e}")
            self.client.send_message(chat_id, UNAVAILABLE_TEXT)
            return

        if joke.is_native_language:
            self.memory.set(chat_id, joke.text, offer_translation=False)
            self.client.send_message(chat_id, joke.text)
            return

        self.memory.set(chat_id, joke.text)
        self.client.send_message(chat_id, joke.text, reply_markup=translate_keyboard())

    def _send_native_joke(self, chat_id: int) -> None:
        try:
            joke = fetch_native_joke(self.registry, timeout=self.fetch_timeout)
        except JokeFetchError as e:
            logger.error(f"Failed to fetch native joke for chat {chat_id}: {e}")
            self.client.send_message(chat_id, NATIVE_UNAVAILABLE_TEXT)
            return
        self.memory.set(chat_id, joke.text, offer_translation=False)
        self.client.send_message(chat_id, joke.text)

    def _handle_callback(self, callback: dict[str, Any]) -> None:
        if callback.get("data") != TRANSLATE_CALLBACK:
            return

        message = callback.get("message") or {}
        chat_id = (message.get("chat") or {}).get("id")
        if "id" in callback:
            self.client.answer_callback_query(callback["id"], TRANSLATED_ACK_TEXT)
        if chat_id is None:
            return
        if "message_id" in message:
            self.client.clear_reply_markup(chat_id, message["message_id"])

        entry = self.memory.entry(chat_id)
        if entry is None or not entry.offer_translation:
            logger.info(f"No joke to translate for chat {chat_id}")
            return

        try:
            translation = self.translator.translate(entry.text)
        except TranslationError as e:
            logger.error(f"Translation failed for chat {chat_id}: {e}")
            self.client.send_message(chat_id, TRANSLATION_FAILED_TEXT)
            return
        self.client.send_message(chat_id, translation)
