"""Runtime configuration defaults for the store client and console."""

from __future__ import annotations

import os

API_BASE_URL = os.environ.get("RESTAURANT_CONSOLE_API_URL", "http://localhost:3000")
REQUEST_TIMEOUT_SECONDS = float(os.environ.get("RESTAURANT_CONSOLE_TIMEOUT", "30"))
ORDER_POLL_SECONDS = float(os.environ.get("RESTAURANT_CONSOLE_POLL_SECONDS", "5"))
DEBUG_LOG_PATH = os.environ.get("RESTAURANT_CONSOLE_LOG_PATH", "/tmp/restaurant-console-debug.log")

# Issued by the auth service; the console only forwards them.
RESTAURANT_ID_ENV = "RESTAURANT_CONSOLE_RESTAURANT_ID"
TOKEN_ENV = "RESTAURANT_CONSOLE_TOKEN"
