"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import os
from datetime import datetime

# Point the app at SQLite before any chessmate module builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chessmate.db.models import Base, PlayerRegistration, Tournament
from chessmate.db.session import get_db
from chessmate.web.main import app


@pytest.fixture
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory for fast tests that don't need
    PostgreSQL-specific features. StaticPool keeps the single in-memory
    database alive across sessions and the TestClient's worker thread.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    """
    Create a database session for a test.

    Each test gets a fresh database, so services are free to commit
    and roll back as they do in production.
    """
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """API client whose requests use the test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def organizer_client(client):
    """API client with an organizer session."""
    response = client.post("/api/auth/login", json={})
    assert response.status_code == 200
    return client


@pytest.fixture
def make_tournament(db_session):
    """Factory for stored tournaments with sensible defaults."""

    def _make(**overrides) -> Tournament:
        values = {
            "name": "Spring Open",
            "type": "Swiss",
            "location": "Town Hall",
            "start_date": datetime(2026, 5, 1, 9, 0),
            "end_date": datetime(2026, 5, 3, 18, 0),
            "entry_fee": 20.0,
            "prize_fund": 500.0,
            "time_control": "90+30",
            "description": "Five round Swiss open to all.",
            "total_rounds": 3,
            "status": "Upcoming",
        }
        values.update(overrides)
        tournament = Tournament(**values)
        db_session.add(tournament)
        db_session.commit()
        return tournament

    return _make


@pytest.fixture
def register(db_session):
    """Factory for stored registrations with explicit, ordered dates."""
    counter = {"n": 0}

    def _register(tournament: Tournament, player_name: str, rating: int = 0, **extra) -> PlayerRegistration:
        counter["n"] += 1
        registration = PlayerRegistration(
            tournament_id=tournament.id,
            tournament_name=tournament.name,
            player_name=player_name,
            fide_rating=rating,
            registration_date=datetime(2026, 4, 1, 12, 0, counter["n"]),
            **extra,
        )
        db_session.add(registration)
        db_session.commit()
        return registration

    return _register
