"""
SQLAlchemy ORM models for Chessmate Central.

This module defines all database tables. Identifiers are opaque hex
strings so they can be handed to clients unchanged.

Key design decisions:
- Registrations belong to one tournament and are deleted with it
- Tournament results are one row per tournament with the player scores
  embedded as a JSON document (JSONB on PostgreSQL)
- Result rows carry a version counter; SQLAlchemy checks it on every
  UPDATE so concurrent read-modify-write cycles cannot silently lose edits

Tables:
- tournaments: Tournament master data
- player_registrations: Players signed up for a tournament
- tournament_results: Per-round scores for every registered player
- blog_posts: News and articles
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Portable JSON column: JSONB on PostgreSQL, plain JSON on SQLite (tests).
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def new_id() -> str:
    """Generate an opaque 32-character identifier."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Tournament Models
# =============================================================================

class Tournament(Base):
    """
    A chess tournament run by an organizer.

    total_rounds may be 0 while the organizer has not decided the number
    of rounds yet; score entry is unavailable until it is set.
    """
    __tablename__ = "tournaments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # 'Swiss', 'Round Robin', ...
    location: Mapped[str] = mapped_column(String(100), nullable=False)

    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    entry_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    prize_fund: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    time_control: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    total_rounds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(15), nullable=False, default="Upcoming")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    registrations: Mapped[list["PlayerRegistration"]] = relationship(
        back_populates="tournament",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("total_rounds >= 0", name="ck_tournaments_total_rounds"),
        Index("idx_tournaments_status", "status"),
        Index("idx_tournaments_start_date", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<Tournament(id='{self.id}', name='{self.name}', status='{self.status}')>"


class PlayerRegistration(Base):
    """A player signed up for one tournament."""

    __tablename__ = "player_registrations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    tournament_id: Mapped[str] = mapped_column(
        ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    # Display copy so listings don't need a join
    tournament_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    player_name: Mapped[str] = mapped_column(String(255), nullable=False)
    player_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    dob: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # YYYY-MM-DD
    organization: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    fide_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fide_id: Mapped[str] = mapped_column(String(20), nullable=False, default="-")
    fee_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    registration_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    tournament: Mapped["Tournament"] = relationship(back_populates="registrations")

    __table_args__ = (
        Index("idx_registrations_tournament", "tournament_id", "registration_date"),
    )

    def __repr__(self) -> str:
        return f"<PlayerRegistration(player='{self.player_name}', tournament='{self.tournament_id}')>"


# =============================================================================
# Results Models
# =============================================================================

class TournamentResultRecord(Base):
    """
    Stored score table for one tournament.

    player_scores is a JSON array of objects:
        {"playerId", "playerName", "rating", "roundScores", "totalScore"}

    The row is keyed by tournament_id rather than a foreign key so results
    can be written before (or independently of) tournament bookkeeping;
    the tournament-deletion workflow removes it explicitly.

    version is SQLAlchemy's version_id_col: every UPDATE is issued as
    "... WHERE version = <loaded version>" and raises StaleDataError if
    another writer got there first.
    """
    __tablename__ = "tournament_results"

    id: Mapped[int] = mapped_column(primary_key=True)
    tournament_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    player_scores: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<TournamentResultRecord(tournament='{self.tournament_id}', "
            f"players={len(self.player_scores or [])}, version={self.version})>"
        )


# =============================================================================
# Blog Models
# =============================================================================

class BlogPost(Base):
    """News article or blog post; content is stored as HTML."""

    __tablename__ = "blog_posts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_blog_posts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<BlogPost(slug='{self.slug}')>"
