"""
Where profiles and daily results live.

Production points DATABASE_URL at MySQL (mysql+pymysql://...); tests and quick
local runs use SQLite. Live game sessions never touch this module: only
finished daily games, profiles and the leaderboard do.
"""

import os
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL is not set. Point it at the profile database in your environment or a local .env."
    )


def make_engine(url: str) -> Engine:
    """
    MySQL: pre-ping pooled connections, the bot backend stays up for days.
    In-memory SQLite: one shared connection so every thread sees the same tables.
    """
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(
            url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True, future=True)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator[Session, None, None]:
    """One session per request; repository methods commit their own writes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_all(bind: Engine = engine) -> None:
    """Create the players/game_records tables if missing (APP_ENV=local startup)."""
    from . import models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=bind)
