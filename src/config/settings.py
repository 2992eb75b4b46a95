"""Configuration settings for the joke aggregator service."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv


DEFAULT_ALLOWED_ORIGINS: list[str] = [
    "http://localhost:5173",
    "http://localhost",
]

DEFAULT_USER_AGENT = "JokeAggregator/1.0 (+https://icanhazdadjoke.com/)"


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class Settings:
    """Configuration settings for the joke aggregator.

    Attributes:
        port: TCP port the HTTP service listens on
        fetch_timeout_seconds: Budget for a single provider fetch
        translate_timeout_seconds: Budget for a single translation call
        native_provider_weight: Selection weight of native-language providers
        foreign_provider_weight: Selection weight of the other providers
        allowed_origins: Origins allowed by the CORS middleware
        telegram_bot_token: Bot API token, empty disables the webhook
        static_dir: Directory holding the single-page frontend
        user_agent: User-Agent header sent to every joke source
        translate_source_lang: Language translated from
        translate_target_lang: Language translated into
    """

    port: int = 8888
    fetch_timeout_seconds: float = 3.0
    translate_timeout_seconds: float = 8.0
    native_provider_weight: int = 3
    foreign_provider_weight: int = 1
    allowed_origins: list[str] = field(default_factory=lambda: DEFAULT_ALLOWED_ORIGINS.copy())
    telegram_bot_token: str = ""
    static_dir: str = "static"
    user_agent: str = DEFAULT_USER_AGENT
    translate_source_lang: str = "en"
    translate_target_lang: str = "ru"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.
        """
        errors: list[str] = []

        if self.port < 1 or self.port > 65535:
            errors.append("port must be between 1 and 65535")

        if self.fetch_timeout_seconds <= 0.0:
            errors.append("fetch_timeout_seconds must be positive")

        if self.translate_timeout_seconds <= 0.0:
            errors.append("translate_timeout_seconds must be positive")

        # Zero weights would make a provider unreachable and break the draw
        if self.native_provider_weight < 1:
            errors.append("native_provider_weight must be at least 1")

        if self.foreign_provider_weight < 1:
            errors.append("foreign_provider_weight must be at least 1")

        if not self.user_agent.strip():
            errors.append("user_agent must not be empty")

        if not self.translate_source_lang.strip() or not self.translate_target_lang.strip():
            errors.append("translation languages must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))


def _parse_float(value: str | None, default: float) -> float:
    """Parse a string to float, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str | None, default: int) -> int:
    """Parse a string to int, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_list(value: str | None, default: list[str]) -> list[str]:
    """Parse a comma separated string, returning a copy of default if unset."""
    if value is None:
        return default.copy()
    return [item.strip() for item in value.split(",") if item.strip()]


def load_settings(env_path: str | Path | None = None, validate: bool = True) -> Settings:
    """Load settings from environment variables and .env file.

    Args:
        env_path: Optional path to .env file. If None, searches for .env
                  in current directory and parent directories.
        validate: If True, validate settings after loading.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ConfigurationError: If validate=True and configuration is invalid.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    settings = Settings(
        port=_parse_int(os.getenv("PORT"), 8888),
        fetch_timeout_seconds=_parse_float(
            os.getenv("FETCH_TIMEOUT_SECONDS"), 3.0
        ),
        translate_timeout_seconds=_parse_float(
            os.getenv("TRANSLATE_TIMEOUT_SECONDS"), 8.0
        ),
        native_provider_weight=_parse_int(
            os.getenv("NATIVE_PROVIDER_WEIGHT"), 3
        ),
        foreign_provider_weight=_parse_int(
            os.getenv("FOREIGN_PROVIDER_WEIGHT"), 1
        ),
        allowed_origins=_parse_list(
            os.getenv("ALLOWED_ORIGINS"), DEFAULT_ALLOWED_ORIGINS
        ),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        static_dir=os.getenv("STATIC_DIR", "static"),
        user_agent=os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
        translate_source_lang=os.getenv("TRANSLATE_SOURCE_LANG", "en"),
        translate_target_lang=os.getenv("TRANSLATE_TARGET_LANG", "ru"),
    )

    if validate:
        settings.validate()

    return settings
