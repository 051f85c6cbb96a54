'''
Mastermind mini-app API

Game sessions (in memory):
POST /games?mode=easy|hard          -> start a practice game
GET  /daily                         -> today's challenge token
POST /games/daily/{token}           -> start the daily challenge from a token
GET  /games/{id}                    -> read state & history
POST /games/{id}/guess              -> submit a guess
GET  /games/{id}/share              -> share text for a won game

Profiles & leaderboard (database):
POST /profile                       -> create/update profile, get streaks
POST /game                          -> record a finished daily game
GET  /leaderboard/{date}            -> ranked winners of a day
'''

import logging
from typing import Literal, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from . import config
from .challenge import ParsedChallenge, challenge_path, mint_token, parse_token, today_key
from .db import create_all, get_db
from .engine import count_hints
from .random_client import generate_game_colors
from .repository import ProfileRepository
from .schemas import (
    DailyChallengeOut,
    GameCompletionRequest,
    GameRecordOut,
    GameState,
    GuessEntryOut,
    GuessRequest,
    GuessResponse,
    LeaderboardResponse,
    NewGameResponse,
    ProfileRequest,
    ProfileResponse,
    ShareOut,
    check_date_key,
)
from .share import daily_share_text, practice_share_text, share_url
from .store import GameSession, GameStore, GuessEntry

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Mastermind API", version="1.0.0")

# Telegram web apps are served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Dev convenience: auto-create tables locally ---
if config.APP_ENV == "local":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()

_sessions = GameStore()


def get_sessions() -> GameStore:
    return _sessions


# Small factory so routes get a per-request repository (bound to the current DB session)
def get_profiles(session=Depends(get_db)) -> ProfileRepository:
    return ProfileRepository(session)


def _to_entry_out(entry: GuessEntry) -> GuessEntryOut:
    exact, color = count_hints(entry.hints)
    return GuessEntryOut(
        guess=entry.colors,
        hints=entry.hints,
        exact=exact,
        color=color,
        timestamp=entry.timestamp,
    )


def _to_game_state(game: GameSession) -> GameState:
    return GameState(
        game_id=game.id,
        kind=game.kind,
        mode=game.mode,
        status=game.status,
        palette=game.palette,
        attempts_left=game.attempts_left,
        elapsed_seconds=game.elapsed_seconds(),
        history=[_to_entry_out(h) for h in game.history],
        secret=list(game.secret) if game.status != "playing" else None,
    )


def _to_new_game(game: GameSession) -> NewGameResponse:
    return NewGameResponse(
        game_id=game.id,
        kind=game.kind,
        mode=game.mode,
        palette=game.palette,
        max_guesses=game.max_guesses,
        date=game.date_key,
    )


def _record_daily_result(game: GameSession, profiles: ProfileRepository) -> None:
    """Fire-and-forget: a failed write must not fail the player's guess."""
    request = GameCompletionRequest(
        telegram_id=game.telegram_id,
        attempts=len(game.history),
        is_won=game.status == "won",
        time_taken=game.elapsed_seconds(),
        completed_at=game.date_key,
        code=game.secret,
    )
    try:
        if profiles.record_completion(request) is None:
            logger.warning("No profile for telegram user %s; daily result not recorded", game.telegram_id)
    except SQLAlchemyError:
        logger.exception("Failed to record daily result for game %s", game.id)


# ---------------- Game routes ----------------

@app.post("/games", response_model=NewGameResponse, summary="Start a practice game")
def start_practice(
    mode: Literal["easy", "hard"] = "easy",
    sessions: GameStore = Depends(get_sessions),
) -> NewGameResponse:
    """
    easy -> hints line up with the guessed positions
    hard -> hints are sorted, positions are hidden
    """
    secret, palette = generate_game_colors(
        colors=config.active_colors(),
        use_network=config.RANDOM_ORG_ENABLED,
    )
    game = sessions.create(secret, palette, mode=mode, kind="practice", max_guesses=config.MAX_GUESSES)
    return _to_new_game(game)


@app.get("/daily", response_model=DailyChallengeOut, summary="Get the daily challenge token")
def get_daily(date: Optional[str] = None) -> DailyChallengeOut:
    date_key = date or today_key()
    try:
        check_date_key(date_key)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    token = mint_token(date_key, config.active_colors())
    return DailyChallengeOut(date=date_key, token=token, path=challenge_path(token))


@app.post("/games/daily/{token}", response_model=NewGameResponse, summary="Start a daily challenge")
def start_daily(
    token: str,
    telegram_id: Optional[str] = None,
    sessions: GameStore = Depends(get_sessions),
) -> NewGameResponse:
    challenge = parse_token(token, config.active_colors())
    if challenge.valid:
        # Anyone can mint a token for a non-date key; treat it like a forged one
        try:
            check_date_key(challenge.date_key)
        except ValueError:
            challenge = ParsedChallenge()
    if not challenge.valid:
        raise HTTPException(status_code=400, detail="Invalid daily challenge. No challenge available.")

    # Daily challenges are always hard mode
    game = sessions.create(
        challenge.code,
        challenge.palette,
        mode="hard",
        kind="daily",
        date_key=challenge.date_key,
        telegram_id=telegram_id,
        max_guesses=config.MAX_GUESSES,
    )
    return _to_new_game(game)


@app.get("/games/{game_id}", response_model=GameState, summary="Get current game state")
def get_game(game_id: str, sessions: GameStore = Depends(get_sessions)) -> GameState:
    game = sessions.get(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return _to_game_state(game)


@app.post("/games/{game_id}/guess", response_model=GuessResponse, summary="Submit a guess")
def submit_guess(
    game_id: str,
    payload: GuessRequest,
    sessions: GameStore = Depends(get_sessions),
    profiles: ProfileRepository = Depends(get_profiles),
) -> GuessResponse:
    before = sessions.get(game_id)
    if not before:
        raise HTTPException(status_code=404, detail="Game not found")
    was_playing = before.status == "playing"

    # store.guess() checks palette membership and updates history/status
    try:
        updated = sessions.guess(game_id, payload.guess)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    if not updated:
        raise HTTPException(status_code=404, detail="Game not found")

    finished = updated.status != "playing"
    if finished and was_playing and updated.kind == "daily" and updated.telegram_id:
        _record_daily_result(updated, profiles)

    feedback = _to_entry_out(updated.history[-1]) if updated.history else None
    return GuessResponse(
        attempts_left=updated.attempts_left,
        status=updated.status,
        feedback=feedback,
        secret=list(updated.secret) if finished else None,
        note=(f"Game {updated.status}. No more guesses allowed." if finished else None),
    )


@app.get("/games/{game_id}/share", response_model=ShareOut, summary="Share text for a won game")
def get_share(game_id: str, sessions: GameStore = Depends(get_sessions)) -> ShareOut:
    game = sessions.get(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    if game.status != "won":
        raise HTTPException(status_code=409, detail="Only won games can be shared.")

    guesses = len(game.history)
    seconds = game.elapsed_seconds()
    if game.kind == "daily":
        text = daily_share_text(guesses, seconds, game.max_guesses)
    else:
        text = practice_share_text(guesses, seconds, game.secret, game.max_guesses)
    return ShareOut(text=text, url=share_url(text))


# ---------------- Profile & leaderboard routes ----------------

@app.post("/profile", response_model=ProfileResponse, summary="Create or update a profile")
def post_profile(
    payload: ProfileRequest,
    profiles: ProfileRepository = Depends(get_profiles),
) -> ProfileResponse:
    try:
        return profiles.upsert_profile(payload)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))


@app.post("/game", response_model=GameRecordOut, summary="Record a finished daily game")
def post_game(
    payload: GameCompletionRequest,
    profiles: ProfileRepository = Depends(get_profiles),
) -> GameRecordOut:
    try:
        record = profiles.record_completion(payload)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    if record is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return record


@app.get("/leaderboard/{date}", response_model=LeaderboardResponse, summary="Daily leaderboard")
def get_leaderboard(
    date: str,
    telegram_id: Optional[str] = None,
    limit: int = 50,
    profiles: ProfileRepository = Depends(get_profiles),
) -> LeaderboardResponse:
    return profiles.leaderboard(date, telegram_id=telegram_id, limit=limit)
