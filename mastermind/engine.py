"""
Pure game logic (no HTTP, no storage).
Each guess gets 5 hint slots:
- exact: right color, right position
- color: color is in the secret but somewhere else
- none:  nothing left in the secret to match

Duplicates are allowed in both the secret and the guess, so scoring is a
two-pass multiset match: exact positions are consumed first, then every
remaining guess color consumes at most one remaining secret color.

Disclosure:
- positional: hint i describes guess position i (easy mode)
- aggregated: hints sorted exact -> color -> none so the player cannot tell
  which color earned which hint (hard mode, daily challenges)
"""

from typing import Iterable, Optional, Sequence, Tuple

from .types import (
    CODE_LENGTH,
    EXTENDED_COLORS,
    Color,
    DisclosureMode,
    GameMode,
    Hint,
    HintSet,
)

_HINT_RANK = {"exact": 0, "color": 1, "none": 2}


def validate_code(code: Sequence[Color], palette: Optional[Iterable[Color]] = None) -> None:
    """
    Fail fast on anything the scorer should never see:
    wrong length, unknown colors, or (when a palette is given) colors outside it.
    """
    if len(code) != CODE_LENGTH:
        raise ValueError(f"A code must have exactly {CODE_LENGTH} colors, got {len(code)}.")

    allowed = set(palette) if palette is not None else set(EXTENDED_COLORS)
    for color in code:
        if color not in allowed:
            if palette is not None:
                raise ValueError(f"Color {color!r} is not available in this game.")
            raise ValueError(f"Unknown color {color!r}.")


def disclosure_for(mode: GameMode) -> DisclosureMode:
    return "aggregated" if mode == "hard" else "positional"


def score(guess: Sequence[Color], secret: Sequence[Color], mode: DisclosureMode = "positional") -> HintSet:
    """
    Example:
      secret = [red, blue, green, yellow, purple]
      guess  = [red, green, blue, yellow, orange]
      positional -> [exact, color, color, exact, none]
      aggregated -> [exact, exact, color, color, none]
    """
    if mode not in ("positional", "aggregated"):
        raise ValueError(f"Unknown disclosure mode {mode!r}.")
    validate_code(guess)
    validate_code(secret)

    n = len(secret)
    hints: HintSet = ["none"] * n
    guess_used = [False] * n
    secret_used = [False] * n

    # 1. Exact pass
    for i in range(n):
        if guess[i] == secret[i]:
            hints[i] = "exact"
            guess_used[i] = True
            secret_used[i] = True

    # 2. Color pass: each secret slot can be consumed once
    for i in range(n):
        if guess_used[i]:
            continue
        for j in range(n):
            if not secret_used[j] and secret[j] == guess[i]:
                hints[i] = "color"
                secret_used[j] = True
                break

    if mode == "aggregated":
        # sorted() is stable, so each category keeps its input order
        return sorted(hints, key=lambda hint: _HINT_RANK[hint])
    return hints


def count_hints(hints: Iterable[Hint]) -> Tuple[int, int]:
    """Returns (exact, color)."""
    exact = 0
    color = 0
    for hint in hints:
        if hint == "exact":
            exact += 1
        elif hint == "color":
            color += 1
    return (exact, color)


def is_winning_guess(guess: Sequence[Color], secret: Sequence[Color]) -> bool:
    """
    Win = every color matches in order.
    """
    if len(guess) != len(secret) or len(secret) == 0:
        return False
    return all(g == s for g, s in zip(guess, secret))
