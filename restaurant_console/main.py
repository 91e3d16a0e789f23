"""Entry point for the restaurant console Textual app."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from restaurant_console.config import DEBUG_LOG_PATH, RESTAURANT_ID_ENV, TOKEN_ENV
from restaurant_console.console_app import RestaurantConsoleApp
from restaurant_console.models import ConsoleSession
from restaurant_console.store import RestaurantStore


def configure_logging(path: str = DEBUG_LOG_PATH) -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if os.environ.get("RESTAURANT_CONSOLE_DEBUG") else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def session_from_env() -> ConsoleSession:
    restaurant_id = os.environ.get(RESTAURANT_ID_ENV)
    token = os.environ.get(TOKEN_ENV)
    if not restaurant_id or not token:
        raise SystemExit(f"Set {RESTAURANT_ID_ENV} and {TOKEN_ENV} to sign in.")
    return ConsoleSession(restaurant_id=restaurant_id, token=token)


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    session = session_from_env()
    result = RestaurantConsoleApp(RestaurantStore(session)).run()
    if result:
        print(result, file=sys.stderr)


if __name__ == "__main__":
    main()
