"""
Database module for Chessmate Central.

Provides SQLAlchemy ORM models and session management.

Usage:
    from chessmate.db import get_session, Tournament

    with get_session() as session:
        tournaments = session.query(Tournament).all()
"""

from chessmate.db.models import (
    Base,
    BlogPost,
    PlayerRegistration,
    Tournament,
    TournamentResultRecord,
)
from chessmate.db.session import SessionLocal, get_db, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "Tournament",
    "PlayerRegistration",
    "TournamentResultRecord",
    "BlogPost",
    # Session
    "get_session",
    "get_db",
    "get_engine",
    "SessionLocal",
]
