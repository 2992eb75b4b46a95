"""HTTP service exposing jokes, translation and the Telegram webhook.

Feature: joke-aggregator
"""

import logging
import time
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel

from src.agent.bot import JokeBot
from src.agent.workflow import fetch_joke
from src.config.settings import Settings
from src.connectors.telegram import SessionMemory, TelegramClient
from src.connectors.translator import TranslationError, Translator
from src.engines.errors import JokeFetchError
from src.engines.observability import fetch_stats
from src.engines.selector import ProviderRegistry, build_default_registry


logger = logging.getLogger(__name__)


UNAVAILABLE_DETAIL = "Jokes are temporarily unavailable"
TRANSLATION_FAILED_DETAIL = "Translation failed"
BAD_REQUEST_DETAIL = "Invalid request"


class TranslatePayload(BaseModel):
    text: str


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def create_app(
    settings: Settings,
    registry: ProviderRegistry | None = None,
    translator: Translator | None = None,
    bot: JokeBot | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service configuration
        registry: Provider table, the default five sources if None
        translator: Translation connector, built from settings if None
        bot: Telegram bot, built from settings if None and a token is set

    Returns:
        Configured FastAPI application
    """
    registry = registry or build_default_registry(settings)
    translator = translator or Translator(settings)
    if bot is None and settings.telegram_bot_token:
        bot = JokeBot(
            TelegramClient(settings.telegram_bot_token),
            SessionMemory(),
            registry,
            translator,
            fetch_timeout=settings.fetch_timeout_seconds,
        )

    static_root = Path(settings.static_dir).resolve()

    app = FastAPI(title="Joke Aggregator")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - started
        logger.info(f"[HTTP] {request.method} {request.url.path} {response.status_code} {elapsed:.3f}s")
        return response

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
        return _error(400, BAD_REQUEST_DETAIL)

    @app.get("/random-joke")
    def random_joke():
        try:
            joke = fetch_joke(registry, timeout=settings.fetch_timeout_seconds)
        except JokeFetchError as e:
            logger.error(f"Failed to fetch joke: {e}")
            return _error(500, UNAVAILABLE_DETAIL)
        return joke.to_dict()

    @app.post("/translate")
    def translate(payload: TranslatePayload):
        if not payload.text.strip():
            return _error(400, BAD_REQUEST_DETAIL)
        try:
            translation = translator.translate(payload.text)
        except TranslationError as e:
            logger.error(f"Translation failed: {e}")
            return _error(500, TRANSLATION_FAILED_DETAIL)
        return {"translation": translation}

    @app.post("/telegram-webhook")
    def telegram_webhook(update: dict[str, Any] = Body(...)):
        if bot is None:
            logger.error("Telegram update received but TELEGRAM_BOT_TOKEN is not set")
            return _error(500, "Telegram bot is not configured")
        bot.process_update(update)
        return {"ok": True}

    @app.get("/stats")
    def stats():
        return {"providers": registry.names, "fetches": fetch_stats.snapshot()}

    @app.get("/{full_path:path}", include_in_schema=False)
    def spa(full_path: str):
        candidate = (static_root / full_path).resolve()
        if candidate.is_relative_to(static_root) and candidate.is_file():
            return FileResponse(candidate)
        index = static_root / "index.html"
        if index.is_file():
            return FileResponse(index)
        return _error(404, "Not Found")

    return app
