"""
Daily challenge: same date -> same palette and same secret, everywhere.

The puzzle travels to the client inside an opaque token:
    urlsafe_base64(json({"code": [...], "palette": [...], "date": "YYYY-MM-DD"}))
with the "=" padding stripped so it can sit in a URL path segment.

NOTE: the encoding is NOT encryption. Anyone can decode a token and read the
secret. What the token does guarantee is that it cannot carry a puzzle that
differs from the one derived from its own date: parse_token() re-derives the
palette and code from the embedded date and rejects any mismatch.
"""

import base64
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel

from .types import ALL_COLORS, CODE_LENGTH, PALETTE_SIZE, Code, Color, Palette

logger = logging.getLogger(__name__)

# Step between the palette indices picked for consecutive code positions
CODE_STRIDE = 7

# URL-safe base64, padding optional
TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]*={0,2}\Z")


class _TokenPayload(BaseModel):
    code: List[Color]
    palette: List[Color]
    date: str


@dataclass(frozen=True)
class ParsedChallenge:
    code: Code = field(default_factory=list)
    palette: Palette = field(default_factory=list)
    date_key: str = ""
    valid: bool = False


def _rolling_hash(text: str) -> int:
    # 32-bit polynomial hash (h = h*31 + byte), read as signed int32, then abs()
    h = 0
    for byte in text.encode("utf-8"):
        h = (h * 31 + byte) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def derive_seed(date_key: str) -> int:
    return _rolling_hash(date_key)


def derive_palette(seed: int, colors: Sequence[Color] = ALL_COLORS) -> Palette:
    """
    Order the color set by a seed-mixed hash and keep the first 8.
    sorted() is stable, so ties keep the enumeration order.
    """
    if len(colors) < PALETTE_SIZE:
        raise ValueError(f"Need at least {PALETTE_SIZE} colors, got {len(colors)}.")
    ordered = sorted(colors, key=lambda color: _rolling_hash(f"{seed}:{color}"))
    return list(ordered[:PALETTE_SIZE])


def derive_secret_code(seed: int, palette: Sequence[Color]) -> Code:
    if not palette:
        raise ValueError("Palette must not be empty.")
    return [palette[(seed + i * CODE_STRIDE) % len(palette)] for i in range(CODE_LENGTH)]


def daily_challenge(date_key: str, colors: Sequence[Color] = ALL_COLORS) -> Tuple[Code, Palette]:
    """Returns (code, palette) for a date key."""
    seed = derive_seed(date_key)
    palette = derive_palette(seed, colors)
    return (derive_secret_code(seed, palette), palette)


def today_key(today: Optional[date] = None) -> str:
    """YYYY-MM-DD for today (or the given date)."""
    return (today or date.today()).isoformat()


def _encode(payload: dict) -> str:
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode(token: str) -> _TokenPayload:
    if not TOKEN_PATTERN.match(token):
        raise ValueError("Token contains characters outside the URL-safe base64 alphabet.")
    padded = token + "=" * (-len(token) % 4)
    raw = base64.urlsafe_b64decode(padded.encode("ascii"))
    return _TokenPayload.model_validate_json(raw)


def mint_token(date_key: str, colors: Sequence[Color] = ALL_COLORS) -> str:
    if not date_key:
        raise ValueError("date_key must not be empty.")
    code, palette = daily_challenge(date_key, colors)
    return _encode({"code": code, "palette": palette, "date": date_key})


def parse_token(token: str, colors: Sequence[Color] = ALL_COLORS) -> ParsedChallenge:
    """
    Never raises. Any decode or verification problem -> ParsedChallenge(valid=False)
    with empty fields; callers must not start a session from it.
    """
    # binascii.Error, UnicodeError and pydantic's ValidationError are all ValueErrors
    try:
        payload = _decode(token)
    except ValueError as exc:
        logger.debug("Rejected undecodable challenge token: %s", exc)
        return ParsedChallenge()

    expected_code, expected_palette = daily_challenge(payload.date, colors)
    if payload.code != expected_code or payload.palette != expected_palette:
        logger.info("Rejected tampered challenge token for date %s", payload.date)
        return ParsedChallenge()

    return ParsedChallenge(
        code=list(payload.code),
        palette=list(payload.palette),
        date_key=payload.date,
        valid=True,
    )


def challenge_path(token: str) -> str:
    return f"/game/{token}/daily"
