"""
In-memory session store
Holds live game sessions (secret, palette, guess history, timing) in memory.
Sessions are short-lived; only finished daily games are persisted (see repository.py).
"""

import logging
from dataclasses import dataclass, field
from threading import RLock
from time import time
from typing import Dict, List, Optional
from uuid import uuid4

from .engine import disclosure_for, is_winning_guess, score, validate_code
from .types import Code, GameKind, GameMode, GameStatus, HintSet, Palette

logger = logging.getLogger(__name__)

DEFAULT_MAX_GUESSES = 20


@dataclass(frozen=True)
class GuessEntry:
    colors: Code
    hints: HintSet
    timestamp: float


@dataclass
class GameSession:
    id: str
    secret: Code
    palette: Palette
    mode: GameMode = "easy"
    kind: GameKind = "practice"
    date_key: Optional[str] = None
    telegram_id: Optional[str] = None
    max_guesses: int = DEFAULT_MAX_GUESSES
    status: GameStatus = "playing"
    history: List[GuessEntry] = field(default_factory=list)
    started_at: float = field(default_factory=time)
    ended_at: Optional[float] = None

    @property
    def attempts_left(self) -> int:
        return self.max_guesses - len(self.history)

    def elapsed_seconds(self, now: Optional[float] = None) -> int:
        end = self.ended_at if self.ended_at is not None else (now if now is not None else time())
        return max(0, int(end - self.started_at))


class GameStore:
    def __init__(self) -> None:
        self._games: Dict[str, GameSession] = {}
        self._lock = RLock()

    def create(
        self,
        secret: Code,
        palette: Palette,
        mode: GameMode = "easy",
        kind: GameKind = "practice",
        date_key: Optional[str] = None,
        telegram_id: Optional[str] = None,
        max_guesses: int = DEFAULT_MAX_GUESSES,
    ) -> GameSession:
        validate_code(secret, palette)
        if max_guesses < 1:
            raise ValueError("max_guesses must be at least 1.")

        game = GameSession(
            id=str(uuid4()),
            secret=list(secret),
            palette=list(palette),
            mode=mode,
            kind=kind,
            date_key=date_key,
            telegram_id=telegram_id,
            max_guesses=max_guesses,
        )
        with self._lock:
            self._games[game.id] = game
        logger.info("Started %s game %s (mode=%s)", kind, game.id, mode)
        return game

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._games.get(game_id)

    def guess(self, game_id: str, attempt: Code) -> Optional[GameSession]:
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None

            if game.status != "playing":
                # Game already ended: ignore extra guesses
                return game

            # Only colors offered in this game are accepted
            validate_code(attempt, game.palette)

            hints = score(attempt, game.secret, disclosure_for(game.mode))
            game.history.append(GuessEntry(colors=list(attempt), hints=hints, timestamp=time()))

            if is_winning_guess(attempt, game.secret):
                game.status = "won"
            elif game.attempts_left <= 0:
                game.status = "lost"

            if game.status != "playing":
                game.ended_at = time()
                logger.info("Game %s %s after %d guesses", game.id, game.status, len(game.history))

            return game
