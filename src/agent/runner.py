"""Runner module for the joke aggregator.

This module wires together settings, logging and the provider registry and
executes the CLI commands.
"""

import logging
import sys

import uvicorn

from src.agent.http_app import create_app
from src.agent.workflow import fetch_joke
from src.config.settings import ConfigurationError, Settings, load_settings
from src.engines.errors import JokeFetchError
from src.engines.selector import build_default_registry, select_native


# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_FETCH_ERROR = 2


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def _load(logger: logging.Logger) -> Settings | None:
    try:
        settings = load_settings(validate=True)
        logger.info("Configuration loaded successfully")
        return settings
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return None


def run_joke(
    native: bool = False,
    provider_name: str | None = None,
    verbose: bool = False,
) -> int:
    """Fetch one joke and print it.

    Args:
        native: If True, use the pinned native-language provider.
        provider_name: Fetch from this source instead of a weighted pick.
        verbose: If True, enable verbose/debug logging.

    Returns:
        Exit code:
        - 0: Success
        - 1: Configuration error or unknown provider
        - 2: The fetch failed
    """
    _setup_logging(verbose)
    logger = logging.getLogger(__name__)

    settings = _load(logger)
    if settings is None:
        return EXIT_CONFIG_ERROR

    registry = build_default_registry(settings)
    provider = None
    if native:
        provider = select_native(registry)
    elif provider_name:
        try:
            provider = registry.by_name(provider_name)
        except KeyError:
            logger.error(f"Unknown provider '{provider_name}', choose from: {', '.join(registry.names)}")
            return EXIT_CONFIG_ERROR

    try:
        joke = fetch_joke(registry, provider=provider, timeout=settings.fetch_timeout_seconds)
    except JokeFetchError as e:
        logger.error(f"Failed to fetch joke: {e}")
        return EXIT_FETCH_ERROR

    print(joke.text)
    print(f"-- {joke.source}")
    return EXIT_SUCCESS


def run_server(host: str = "0.0.0.0", port: int | None = None, verbose: bool = False) -> int:
    """Run the HTTP service until interrupted.

    Args:
        host: Interface to bind.
        port: Port to listen on, the configured port if None.
        verbose: If True, enable verbose/debug logging.

    Returns:
        Exit code (0 on clean shutdown, 1 on configuration error).
    """
    _setup_logging(verbose)
    logger = logging.getLogger(__name__)

    settings = _load(logger)
    if settings is None:
        return EXIT_CONFIG_ERROR

    app = create_app(settings)
    listen_port = port or settings.port
    logger.info(f"Joke service starting on {host}:{listen_port}")
    uvicorn.run(app, host=host, port=listen_port, log_level="debug" if verbose else "info")
    return EXIT_SUCCESS
