"""
Pydantic models for the HTTP API.
- Validate what the client sends (guesses, profile and completion payloads)
- Define the exact shape of every response
"""

import re
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .types import CODE_LENGTH, Color

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

GameStatusOut = Literal["playing", "won", "lost"]
HintOut = Literal["exact", "color", "none"]


def check_date_key(value: str) -> str:
    """Accepts real calendar dates in YYYY-MM-DD form only."""
    if not DATE_KEY_PATTERN.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format.")
    date.fromisoformat(value)
    return value


# ---------------- Game sessions ----------------

class NewGameResponse(BaseModel):
    game_id: str = Field(..., description="Unique ID for the session; the secret is never returned")
    kind: Literal["practice", "daily"] = Field(..., description="Practice or daily challenge")
    mode: Literal["easy", "hard"] = Field(..., description="easy = positional hints, hard = aggregated hints")
    palette: List[Color] = Field(..., description="The 8 colors the player may choose from")
    max_guesses: int = Field(..., description="Attempt budget")
    date: Optional[str] = Field(None, description="Challenge date (daily only)")


class DailyChallengeOut(BaseModel):
    date: str = Field(..., description="Date key the puzzle is derived from")
    token: str = Field(..., description="Opaque challenge token (obfuscated, not encrypted)")
    path: str = Field(..., description="Client route that starts this challenge")


class GuessRequest(BaseModel):
    guess: List[Color] = Field(..., description="Exactly 5 color names")

    @field_validator("guess")
    @classmethod
    def validate_length(cls, guess: List[Color]) -> List[Color]:
        """
        Unknown color names are rejected by the Literal type.
        Palette membership is checked by the store, which knows the game.
        """
        if len(guess) != CODE_LENGTH:
            raise ValueError(f"A guess must have exactly {CODE_LENGTH} colors.")
        return guess

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"guess": ["red", "blue", "green", "yellow", "purple"]},
            ]
        }
    }


class GuessEntryOut(BaseModel):
    guess: List[Color] = Field(..., description="The player's guess")
    hints: List[HintOut] = Field(..., description="5 hint slots (order depends on mode)")
    exact: int = Field(..., description="Right color, right position")
    color: int = Field(..., description="Right color, wrong position")
    timestamp: float = Field(..., description="When the guess was made")


class GameState(BaseModel):
    game_id: str
    kind: Literal["practice", "daily"]
    mode: Literal["easy", "hard"]
    status: GameStatusOut
    palette: List[Color]
    attempts_left: int
    elapsed_seconds: int
    history: List[GuessEntryOut]
    secret: Optional[List[Color]] = Field(None, description="Only revealed once the game is over")


class GuessResponse(BaseModel):
    attempts_left: int = Field(..., description="How many guesses remain")
    status: GameStatusOut = Field(..., description="Current state of the game")
    feedback: Optional[GuessEntryOut] = Field(None, description="Feedback from the latest guess")
    secret: Optional[List[Color]] = Field(None, description="The secret code (only revealed if game is over)")
    note: Optional[str] = Field(None, description="Extra note (ex. 'Game lost. No more guesses allowed.')")


class ShareOut(BaseModel):
    text: str
    url: str


# ---------------- Profiles / streaks ----------------

class ProfileRequest(BaseModel):
    telegram_id: int = Field(..., alias="telegramId")
    date: str = Field(..., description="Client's current date, YYYY-MM-DD")
    username: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")

    model_config = {"populate_by_name": True}

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return check_date_key(value)


class UserOut(BaseModel):
    id: str
    telegram_id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    language: str
    is_new_user: bool


class GameRecordOut(BaseModel):
    id: int
    attempts: int
    is_won: bool
    time_taken: int
    code: Optional[List[str]] = None
    completed_at: str


class StreaksOut(BaseModel):
    current_streak: int
    best_streak: int
    last_game_date: Optional[str] = None


class ProfileResponse(BaseModel):
    user: UserOut
    games: List[GameRecordOut]
    streaks: StreaksOut
    date: str


class GameCompletionRequest(BaseModel):
    telegram_id: str = Field(..., alias="telegramId")
    attempts: int = Field(..., ge=1)
    is_won: bool = Field(..., alias="isWon")
    time_taken: int = Field(..., ge=0, alias="timeTaken")
    completed_at: str = Field(..., alias="completedAt", description="Challenge date, YYYY-MM-DD")
    code: Optional[List[Color]] = None

    model_config = {"populate_by_name": True}

    @field_validator("completed_at")
    @classmethod
    def validate_completed_at(cls, value: str) -> str:
        return check_date_key(value)


# ---------------- Leaderboard ----------------

class LeaderboardUserOut(BaseModel):
    id: str
    telegram_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None


class LeaderboardEntryOut(BaseModel):
    rank: int
    attempts: int
    time_taken: int
    user: LeaderboardUserOut


class UserRankOut(BaseModel):
    rank: int
    attempts: int
    time_taken: int


class LeaderboardResponse(BaseModel):
    date: str
    leaderboard: List[LeaderboardEntryOut]
    user_rank: Optional[UserRankOut] = None
