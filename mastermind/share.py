"""
Share messages for finished games (plain string templating).
"""

from typing import Sequence, Tuple
from urllib.parse import quote

from . import config
from .types import Color

COLOR_EMOJIS = {
    "red": "🔴",
    "blue": "🔵",
    "green": "🟢",
    "yellow": "🟡",
    "purple": "🟣",
    "orange": "🟠",
    "pink": "🩷",
    "cyan": "🔵",
    "lime": "🟢",
    "teal": "🔵",
    "indigo": "🟣",
    "violet": "🟣",
    "maroon": "🔴",
    "navy": "🔵",
}


def format_time(seconds: int) -> str:
    """90 -> '01:30'"""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def achievement_for(guesses: int, seconds: int) -> Tuple[str, str, str]:
    """Returns (title, emoji, challenge line)."""
    if guesses <= 4 and seconds <= 90:
        return ("🎯 MASTERMIND GRANDMASTER!", "👑", "Can you match this perfection?")
    if guesses <= 6 and seconds <= 180:
        return ("🚀 CODE CRACKING CHAMPION!", "⚡", "Think you can beat my speed?")
    if guesses <= 8 and seconds <= 300:
        return ("🎯 PUZZLE MASTER!", "🧠", "Your turn to crack the code!")
    if guesses <= 10:
        return ("🎨 COLOR DETECTIVE!", "🔍", "Show me your detective skills!")
    return ("🎯 CODE BREAKER!", "💪", "Persistence pays off!")


def practice_share_text(guesses: int, seconds: int, secret: Sequence[Color], max_guesses: int) -> str:
    title, emoji, challenge = achievement_for(guesses, seconds)
    code_emojis = "".join(COLOR_EMOJIS[color] for color in secret)
    tries = "try" if guesses == 1 else "tries"
    return (
        "🎯 MASTERMIND CHALLENGE 🎯\n\n"
        f"{emoji} {title} {emoji}\n\n"
        "━━━━━━━━━━━━━━━━━━━━━━\n"
        "🧩 SECRET CODE CRACKED!\n"
        f"{code_emojis}\n"
        "━━━━━━━━━━━━━━━━━━━━━━\n\n"
        f"⏱️ Time: {format_time(seconds)}\n"
        f"🎲 Attempts: {guesses}/{max_guesses}\n\n"
        f"💡 I cracked the color code with just {guesses} {tries}!\n"
        f"{challenge}\n\n"
        "🎮 Think you can beat my score?\n"
        f"👉 Play now: {config.BOT_HANDLE}\n\n"
        "#Mastermind #CodeBreaker #PuzzleGame"
    )


def daily_share_text(guesses: int, seconds: int, max_guesses: int) -> str:
    # The daily secret is never put in the message
    return (
        "🎯 MASTERMIND DAILY CHALLENGE 🎯\n\n"
        "I just cracked today's color code challenge! 🏆\n\n"
        "Can you beat my time and extend your streak? 🔥\n\n"
        f"⏱️ My time: {format_time(seconds)}\n"
        f"🎲 My attempts: {guesses}/{max_guesses}\n\n"
        "Think you can solve today's mystery code? 🤔\n\n"
        f"🎮 Take the challenge: {config.BOT_HANDLE}\n\n"
        "#MastermindChallenge #DailyPuzzle #ColorCode"
    )


def share_url(text: str) -> str:
    return f"{config.SHARE_BASE_URL}?text={quote(text, safe='')}"
