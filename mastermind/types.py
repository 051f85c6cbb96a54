"""
Labels for clarity.
"""

from typing import List, Literal, Tuple

Color = Literal[
    "red", "blue", "green", "yellow", "purple", "orange", "pink",
    "cyan", "lime", "teal", "indigo", "violet", "maroon", "navy",
]
Code = List[Color]  # 5 colors
Palette = List[Color]  # 8 distinct colors

Hint = Literal["exact", "color", "none"]
HintSet = List[Hint]

DisclosureMode = Literal["positional", "aggregated"]
GameMode = Literal["easy", "hard"]
GameKind = Literal["practice", "daily"]
GameStatus = Literal["playing", "won", "lost"]

CODE_LENGTH = 5
PALETTE_SIZE = 8

# Every color the game knows about
EXTENDED_COLORS: Tuple[Color, ...] = (
    "red", "blue", "green", "yellow", "purple", "orange", "pink",
    "cyan", "lime", "teal", "indigo", "violet", "maroon", "navy",
)

# Colors enabled in the default deployment
ALL_COLORS: Tuple[Color, ...] = (
    "red", "blue", "green", "yellow", "purple", "orange", "pink", "maroon",
)
