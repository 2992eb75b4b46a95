#!/usr/bin/env python3
"""Main entry point for the joke aggregator.

This module provides the CLI interface for fetching jokes and running the
HTTP service.

Usage:
    python -m src.main joke                       # Weighted random joke
    python -m src.main joke --native              # Native-language joke
    python -m src.main joke --provider baneks.ru  # Joke from one source
    python -m src.main serve --port 8888          # Run the HTTP service
    python -m src.main -v joke                    # Verbose logging
"""

import argparse
import sys

from src.agent.runner import run_joke, run_server


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="joke-aggregator",
        description="Joke Aggregator - random jokes from several sources",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    joke_parser = subparsers.add_parser("joke", help="Print one joke")
    source_group = joke_parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "--native",
        action="store_true",
        help="Fetch from the native-language source only",
    )
    source_group.add_argument(
        "--provider",
        help="Fetch from this source (e.g. baneks.ru)",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """Main entry point for the joke aggregator.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parsed = parse_args(args)
    if parsed.command == "serve":
        return run_server(host=parsed.host, port=parsed.port, verbose=parsed.verbose)
    return run_joke(native=parsed.native, provider_name=parsed.provider, verbose=parsed.verbose)


if __name__ == "__main__":
    sys.exit(main())
