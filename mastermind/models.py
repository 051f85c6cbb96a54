"""
SQLAlchemy ORM models for player profiles and daily results.

Tables:
- players: one row per chat-platform user (profile + streak counters)
- game_records: one row per finished daily challenge per player

Dates are stored as "YYYY-MM-DD" date keys, the same keys the daily
challenge is derived from.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class Player(Base):
    __tablename__ = "players"

    # UUIDs generated in code; stored as strings
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    telegram_id: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)

    username: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    language: Mapped[str] = mapped_column(String(8), nullable=False, default="en")

    # Streaks count consecutive days with a daily win
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_game_date: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    games: Mapped[list["GameRecord"]] = relationship(
        back_populates="player",
        cascade="all, delete-orphan",
        order_by="GameRecord.completed_at.desc()",
    )


class GameRecord(Base):
    __tablename__ = "game_records"
    # A daily challenge counts once per player
    __table_args__ = (UniqueConstraint("player_id", "completed_at", name="uq_player_day"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    player_id: Mapped[str] = mapped_column(String(36), ForeignKey("players.id", ondelete="CASCADE"), index=True)
    player: Mapped[Player] = relationship(back_populates="games")

    attempts: Mapped[int] = mapped_column(Integer, nullable=False)
    is_won: Mapped[bool] = mapped_column(Boolean, nullable=False)
    time_taken: Mapped[int] = mapped_column(Integer, nullable=False)

    # Revealed only after the game ended; list of color names
    code: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)

    completed_at: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
