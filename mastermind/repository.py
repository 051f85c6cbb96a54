"""
DB-backed profile, streak and leaderboard store.

Public methods:
- upsert_profile(request) -> ProfileResponse
- record_completion(request) -> GameRecordOut | None
- leaderboard(date_key, telegram_id=None, limit=50) -> LeaderboardResponse

Streak rules (daily challenges only):
- a win the day after the previous game extends the streak, any other win starts at 1
- a loss resets the current streak to 0
- a gap of 2+ days since the last game breaks the streak (checked on profile load)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import GameRecord as GameRecordORM, Player as PlayerORM
from .schemas import (
    GameCompletionRequest,
    GameRecordOut,
    LeaderboardEntryOut,
    LeaderboardResponse,
    LeaderboardUserOut,
    ProfileRequest,
    ProfileResponse,
    StreaksOut,
    UserOut,
    UserRankOut,
)

logger = logging.getLogger(__name__)

RECENT_GAMES = 30


def days_between(earlier: str, later: str) -> int:
    return (date.fromisoformat(later) - date.fromisoformat(earlier)).days


def is_streak_broken(last_game_date: Optional[str], today: str) -> bool:
    if last_game_date is None:
        return False
    return days_between(last_game_date, today) >= 2


# --- Small DTO builders ---

def _to_record_out(record: GameRecordORM) -> GameRecordOut:
    return GameRecordOut(
        id=record.id,
        attempts=record.attempts,
        is_won=record.is_won,
        time_taken=record.time_taken,
        code=record.code,
        completed_at=record.completed_at,
    )


def _to_user_out(player: PlayerORM, is_new_user: bool) -> UserOut:
    return UserOut(
        id=player.id,
        telegram_id=player.telegram_id,
        username=player.username,
        first_name=player.first_name,
        last_name=player.last_name,
        avatar_url=player.avatar_url,
        language=player.language,
        is_new_user=is_new_user,
    )


def _to_streaks_out(player: PlayerORM) -> StreaksOut:
    return StreaksOut(
        current_streak=player.current_streak,
        best_streak=player.best_streak,
        last_game_date=player.last_game_date,
    )


class ProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    def _find_player(self, telegram_id: str) -> Optional[PlayerORM]:
        return self.db.execute(
            select(PlayerORM).where(PlayerORM.telegram_id == telegram_id)
        ).scalar_one_or_none()

    def upsert_profile(self, request: ProfileRequest) -> ProfileResponse:
        telegram_id = str(request.telegram_id)
        player = self._find_player(telegram_id)
        is_new_user = player is None

        if player is None:
            player = PlayerORM(id=str(uuid4()), telegram_id=telegram_id, current_streak=0, best_streak=0)
            self.db.add(player)
            logger.info("Created profile for telegram user %s", telegram_id)

        # Names/avatar follow whatever the chat platform reports now
        player.username = request.username
        player.first_name = request.first_name
        player.last_name = request.last_name
        player.avatar_url = request.avatar_url

        if is_streak_broken(player.last_game_date, request.date):
            player.current_streak = 0

        self.db.commit()
        self.db.refresh(player)

        recent = (
            self.db.execute(
                select(GameRecordORM)
                .where(GameRecordORM.player_id == player.id)
                .order_by(GameRecordORM.completed_at.desc())
                .limit(RECENT_GAMES)
            )
            .scalars()
            .all()
        )
        return ProfileResponse(
            user=_to_user_out(player, is_new_user),
            games=[_to_record_out(r) for r in recent],
            streaks=_to_streaks_out(player),
            date=request.date,
        )

    def record_completion(self, request: GameCompletionRequest) -> Optional[GameRecordOut]:
        player = self._find_player(request.telegram_id)
        if player is None:
            return None

        existing = self.db.execute(
            select(GameRecordORM).where(
                GameRecordORM.player_id == player.id,
                GameRecordORM.completed_at == request.completed_at,
            )
        ).scalar_one_or_none()
        if existing is not None:
            # Only the first result of the day counts
            return _to_record_out(existing)

        record = GameRecordORM(
            player_id=player.id,
            attempts=request.attempts,
            is_won=request.is_won,
            time_taken=request.time_taken,
            code=list(request.code) if request.code else None,
            completed_at=request.completed_at,
        )
        self.db.add(record)
        self._update_streaks(player, request.completed_at, request.is_won)
        self.db.commit()
        self.db.refresh(record)
        return _to_record_out(record)

    def _update_streaks(self, player: PlayerORM, day: str, won: bool) -> None:
        # A late result for an older day is kept as a record but cannot change a newer streak
        if player.last_game_date is not None and day < player.last_game_date:
            return

        if won:
            if player.last_game_date is not None and days_between(player.last_game_date, day) == 1:
                player.current_streak += 1
            else:
                player.current_streak = 1
            if player.current_streak > player.best_streak:
                player.best_streak = player.current_streak
        else:
            player.current_streak = 0

        player.last_game_date = day

    def leaderboard(self, date_key: str, telegram_id: Optional[str] = None, limit: int = 50) -> LeaderboardResponse:
        """Winners of one day, fewest attempts first, then fastest."""
        rows = self.db.execute(
            select(GameRecordORM, PlayerORM)
            .join(PlayerORM, GameRecordORM.player_id == PlayerORM.id)
            .where(GameRecordORM.completed_at == date_key, GameRecordORM.is_won.is_(True))
            .order_by(GameRecordORM.attempts.asc(), GameRecordORM.time_taken.asc(), GameRecordORM.id.asc())
        ).all()

        entries = []
        user_rank = None
        for rank, (record, player) in enumerate(rows, start=1):
            if rank <= limit:
                entries.append(
                    LeaderboardEntryOut(
                        rank=rank,
                        attempts=record.attempts,
                        time_taken=record.time_taken,
                        user=LeaderboardUserOut(
                            id=player.id,
                            telegram_id=player.telegram_id,
                            first_name=player.first_name,
                            last_name=player.last_name,
                            avatar_url=player.avatar_url,
                        ),
                    )
                )
            if telegram_id is not None and player.telegram_id == telegram_id:
                user_rank = UserRankOut(rank=rank, attempts=record.attempts, time_taken=record.time_taken)

        return LeaderboardResponse(date=date_key, leaderboard=entries, user_rank=user_rank)
