"""
Practice games: a random palette and a random secret.

- The caller passes the random source (random.Random) so tests can pin it.
- Optionally the secret's palette indices come from random.org over HTTP.
  If anything goes wrong (no internet, timeout, bad response), we fall back
  to the local random source so the game still works.
"""

import logging
import random
from typing import List, Optional, Sequence, Tuple

import requests

from .types import ALL_COLORS, CODE_LENGTH, PALETTE_SIZE, Code, Color, Palette

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"


def fetch_indices(count: int, upper: int, rng: random.Random, use_network: bool = False) -> List[int]:
    """
    Returns `count` integers in 0..upper-1.
    """
    if not use_network:
        return [rng.randrange(upper) for _ in range(count)]

    params = {
        "num": count,
        "min": 0,
        "max": upper - 1,
        "col": 1,           # one number per line
        "base": 10,
        "format": "plain",  # plain text response
        "rnd": "new",
    }

    # keep network quick; if it takes too long, we just fall back
    timeout_seconds = 3.0

    try:
        response = requests.get(RANDOM_URL, params=params, timeout=timeout_seconds)
        response.raise_for_status()

        # The body looks like: 0\n3\n1\n2\n
        indices = [int(line) for line in response.text.splitlines() if line.strip()]

        if len(indices) != count:
            raise ValueError(f"random.org returned {len(indices)} values, expected {count}.")
        for value in indices:
            if value < 0 or value >= upper:
                raise ValueError(f"random.org number {value} out of range 0..{upper - 1}.")
        return indices

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable, using local randomness: %s", exc)
        return [rng.randrange(upper) for _ in range(count)]


def generate_game_colors(
    rng: Optional[random.Random] = None,
    colors: Sequence[Color] = ALL_COLORS,
    use_network: bool = False,
) -> Tuple[Code, Palette]:
    """
    Returns (secret, palette): 8 distinct colors, then 5 picks from them (repeats allowed).
    """
    rng = rng or random.Random()
    palette: Palette = rng.sample(list(colors), PALETTE_SIZE)
    indices = fetch_indices(CODE_LENGTH, len(palette), rng, use_network=use_network)
    secret: Code = [palette[i] for i in indices]
    return (secret, palette)
