"""
Unit tests for ResultService persistence.

Covers create-on-first-reconcile rules, no-op writes, score edits, whole
document upserts, and recovery from concurrent writers via the version
counter on tournament_results.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from chessmate.db.models import Base, TournamentResultRecord
from chessmate.exceptions import (
    ConcurrentUpdateError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    RoundsNotConfiguredError,
    ValidationError,
)
from chessmate.results.scores import PlayerScore, RosterEntry
from chessmate.results.service import ResultService, roster_from_registrations

ROSTER = [RosterEntry("p1", "Anna", 1800), RosterEntry("p2", "Ben", 1600)]


def _record(session, tournament_id="t1"):
    return (
        session.query(TournamentResultRecord)
        .filter(TournamentResultRecord.tournament_id == tournament_id)
        .one_or_none()
    )


class TestReads:

    def test_missing_result_is_empty(self, db_session):
        result = ResultService(db_session).get_result("t1")
        assert result.player_scores == ()
        assert result.version is None

    def test_database_failure_becomes_persistence_error(self, db_session, monkeypatch):
        service = ResultService(db_session)

        def broken(tournament_id):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(service, "_load_record", broken)
        with pytest.raises(PersistenceError):
            service.get_result("t1")

    def test_standings_use_stored_scores(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 2)
        service.set_round_score("t1", "p2", 0, 1)

        standings = service.standings("t1")
        assert [s.score.player_id for s in standings] == ["p2", "p1"]


class TestReconcile:

    def test_first_reconcile_creates_result(self, db_session):
        result = ResultService(db_session).reconcile("t1", ROSTER, 3)

        assert result.version == 1
        assert len(result.player_scores) == 2
        record = _record(db_session)
        assert record.player_scores[0]["roundScores"] == [None, None, None]

    def test_no_players_creates_nothing(self, db_session):
        result = ResultService(db_session).reconcile("t1", [], 3)
        assert result.player_scores == ()
        assert result.version is None
        assert _record(db_session) is None

    def test_zero_rounds_creates_nothing(self, db_session):
        result = ResultService(db_session).reconcile("t1", ROSTER, 0)
        assert [ps.round_scores for ps in result.player_scores] == [(), ()]
        assert result.version is None
        assert _record(db_session) is None

    def test_unchanged_reconcile_does_not_write(self, db_session):
        service = ResultService(db_session)
        first = service.reconcile("t1", ROSTER, 3)
        second = service.reconcile("t1", ROSTER, 3)
        assert second.version == first.version == 1

    def test_roster_change_keeps_existing_scores(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 2)
        service.set_round_score("t1", "p2", 0, 1)

        result = service.reconcile("t1", [RosterEntry("p2", "Ben", 1600), RosterEntry("p3", "Cara")], 3)

        assert result.version == 3
        assert [ps.player_id for ps in result.player_scores] == ["p2", "p3"]
        assert result.get_player("p2").round_scores == (1.0, None, None)
        assert result.get_player("p3").round_scores == (None, None, None)

    def test_rounds_reduced_to_zero_on_stored_result(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 2)
        result = service.reconcile("t1", ROSTER, 0)

        assert result.version == 2
        with pytest.raises(RoundsNotConfiguredError):
            service.set_round_score("t1", "p1", 0, 1)

    def test_reconcile_tournament_reads_registrations(self, db_session, make_tournament, register):
        tournament = make_tournament(total_rounds=4)
        first = register(tournament, "Anna", 1800)
        second = register(tournament, "Ben", 1600)

        result = ResultService(db_session).reconcile_tournament(tournament.id)

        assert [ps.player_id for ps in result.player_scores] == [first.id, second.id]
        assert result.get_player(first.id).rating == 1800
        assert all(len(ps.round_scores) == 4 for ps in result.player_scores)

    def test_reconcile_missing_tournament(self, db_session):
        with pytest.raises(NotFoundError):
            ResultService(db_session).reconcile_tournament("missing")


class TestSetRoundScore:

    def test_updates_score_and_total(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 3)

        result = service.set_round_score("t1", "p1", 2, 0.5)

        assert result.version == 2
        assert result.get_player("p1").round_scores == (None, None, 0.5)
        assert result.get_player("p1").total_score == 0.5
        stored = _record(db_session).player_scores[0]
        assert stored["totalScore"] == 0.5

    def test_same_score_twice_is_a_no_op(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 3)
        service.set_round_score("t1", "p1", 0, 1)
        result = service.set_round_score("t1", "p1", 0, 1)
        assert result.version == 2

    def test_never_creates_a_result(self, db_session):
        with pytest.raises(NotFoundError):
            ResultService(db_session).set_round_score("t1", "p1", 0, 1)
        assert _record(db_session) is None

    def test_invalid_input_leaves_result_unchanged(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 3)

        with pytest.raises(ValidationError):
            service.set_round_score("t1", "p1", 3, 1)
        with pytest.raises(ValidationError):
            service.set_round_score("t1", "p1", 0, 2)
        with pytest.raises(NotFoundError):
            service.set_round_score("t1", "nobody", 0, 1)

        assert service.get_result("t1").version == 1


class TestSaveResult:

    def test_upsert_recomputes_totals(self, db_session):
        scores = [PlayerScore(player_id="p1", player_name="Anna", round_scores=(1, 1, None))]
        result = ResultService(db_session).save_result("t1", scores)

        assert result.version == 1
        assert _record(db_session).player_scores[0]["totalScore"] == 2.0

    def test_upsert_replaces_existing_document(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 2)

        scores = [PlayerScore(player_id="p9", player_name="Zoe", round_scores=(0.5,))]
        result = service.save_result("t1", scores)

        assert result.player_ids() == {"p9"}
        assert result.version == 2

    def test_empty_upsert_is_stored(self, db_session):
        result = ResultService(db_session).save_result("t1", [])
        assert result.version == 1
        assert _record(db_session).player_scores == []

    def test_expected_version_mismatch(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 2)
        service.set_round_score("t1", "p1", 0, 1)

        with pytest.raises(ConflictError):
            service.save_result("t1", [], expected_version=1)
        assert service.get_result("t1").version == 2

    def test_expected_version_match(self, db_session):
        service = ResultService(db_session)
        service.reconcile("t1", ROSTER, 2)
        result = service.save_result("t1", [], expected_version=1)
        assert result.version == 2


def test_roster_from_registrations(db_session, make_tournament, register):
    tournament = make_tournament()
    registration = register(tournament, "Anna", 1750)
    assert roster_from_registrations([registration]) == [
        RosterEntry(player_id=registration.id, player_name="Anna", rating=1750)
    ]


class TestConcurrentWriters:
    """Two sessions on one file database, interleaving read-modify-write."""

    @pytest.fixture
    def sessions(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'results.db'}")
        Base.metadata.create_all(engine)
        factory = sessionmaker(bind=engine, autoflush=False)
        yield factory
        engine.dispose()

    def _race_on_load(self, monkeypatch, factory, competing_write, races=1):
        """Run competing_write in another session right after each of the first loads."""
        original = ResultService._load_record
        state = {"races": 0, "inside": False}

        def racing_load(service, tournament_id):
            record = original(service, tournament_id)
            if not state["inside"] and state["races"] < races:
                state["inside"] = True
                state["races"] += 1
                other = factory()
                try:
                    competing_write(ResultService(other), state["races"])
                finally:
                    other.close()
                    state["inside"] = False
            return record

        monkeypatch.setattr(ResultService, "_load_record", racing_load)
        return state

    def test_lost_race_is_retried(self, sessions, monkeypatch):
        session = sessions()
        service = ResultService(session)
        service.reconcile("t1", ROSTER, 2)

        def competing_write(other_service, _):
            other_service.set_round_score("t1", "p2", 0, 1)

        self._race_on_load(monkeypatch, sessions, competing_write)
        result = service.set_round_score("t1", "p1", 0, 0.5)

        # Both edits survive: neither writer overwrote the other
        assert result.get_player("p1").round_scores[0] == 0.5
        assert result.get_player("p2").round_scores[0] == 1.0
        assert result.version == 3
        session.close()

    def test_gives_up_after_max_attempts(self, sessions, monkeypatch):
        session = sessions()
        service = ResultService(session, max_attempts=2)
        service.reconcile("t1", ROSTER, 2)

        def competing_write(other_service, race):
            # Alternate so every competing write really changes the document
            other_service.set_round_score("t1", "p2", 1, float(race % 2))

        self._race_on_load(monkeypatch, sessions, competing_write, races=2)
        with pytest.raises(ConcurrentUpdateError):
            service.set_round_score("t1", "p1", 0, 1)
        session.close()


def test_score_entry_walkthrough(db_session):
    """Reconcile, score two rounds, rank, then deregister one player."""
    service = ResultService(db_session)
    alice, bob = RosterEntry("p1", "Alice"), RosterEntry("p2", "Bob")

    result = service.reconcile("t1", [alice, bob], 3)
    for ps in result.player_scores:
        assert ps.round_scores == (None, None, None)
        assert ps.total_score == 0

    result = service.set_round_score("t1", "p1", 0, 1)
    assert result.get_player("p1").round_scores == (1.0, None, None)
    assert result.get_player("p1").total_score == 1

    result = service.set_round_score("t1", "p2", 0, 0.5)
    assert result.get_player("p2").total_score == 0.5

    standings = service.standings("t1")
    assert [(s.score.player_name, s.score.total_score) for s in standings] == [
        ("Alice", 1.0),
        ("Bob", 0.5),
    ]
    # Ranking is deterministic
    assert service.standings("t1") == standings

    result = service.reconcile("t1", [alice], 3)
    assert result.player_ids() == {"p1"}
    assert result.get_player("p1").round_scores == (1.0, None, None)
