"""
Runtime settings, read once from the environment.

- Loads a local .env if present (dev convenience; in prod the platform injects env vars)
- Exposes plain module-level constants with sensible defaults
- configure_logging() sets up the root logger for the API process

DATABASE_URL is read by db.py, not here.
"""

import logging
import os
from typing import Tuple

from dotenv import load_dotenv

from .types import ALL_COLORS, EXTENDED_COLORS, Color

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Attempt budget per session
MAX_GUESSES = int(os.getenv("MAX_GUESSES", 20))

# "classic" = 8 colors, "extended" = all 14
COLOR_SET = os.getenv("COLOR_SET", "classic")

# Practice games may draw their secret from random.org (falls back to local randomness)
RANDOM_ORG_ENABLED = os.getenv("RANDOM_ORG_ENABLED", "false").lower() == "true"

BOT_HANDLE = os.getenv("BOT_HANDLE", "@play_mastermind_bot")
SHARE_BASE_URL = os.getenv("SHARE_BASE_URL", "https://t.me/share/url")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def active_colors() -> Tuple[Color, ...]:
    if COLOR_SET == "extended":
        return EXTENDED_COLORS
    return ALL_COLORS


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
