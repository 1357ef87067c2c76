"""
Results service: persists reconciliation and score edits.

This module connects the pure results logic (reconciler, standings) to the
tournament_results table. Each public method is one request-scoped
operation: load the stored document, apply a pure transformation, write the
whole document back.

Lost updates are prevented with optimistic concurrency rather than locks.
TournamentResultRecord.version is SQLAlchemy's version_id_col, so a write
based on a stale read fails with StaleDataError. The service then rolls
back, reloads, and re-applies the same transformation, up to
settings.results_max_attempts times. Two first-time inserts racing on the
unique tournament_id are retried the same way.

Usage:
    from chessmate.results.service import ResultService

    with get_session() as session:
        service = ResultService(session)
        result = service.reconcile_tournament("a1b2...")
        result = service.set_round_score("a1b2...", "p9...", 0, 1)
"""

import logging
from typing import Callable, Iterable, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from chessmate.config import settings
from chessmate.db.models import PlayerRegistration, Tournament, TournamentResultRecord
from chessmate.exceptions import (
    ConcurrentUpdateError,
    ConflictError,
    NotFoundError,
    PersistenceError,
)
from chessmate.results.reconciler import apply_round_score, reconcile_scores
from chessmate.results.scores import (
    PlayerScore,
    RosterEntry,
    RoundScore,
    TournamentResult,
)
from chessmate.results.standings import Standing, rank

logger = logging.getLogger(__name__)

Transform = Callable[[TournamentResult], TournamentResult]
CreatePolicy = Callable[[TournamentResult], bool]


def roster_from_registrations(registrations: Iterable[PlayerRegistration]) -> list[RosterEntry]:
    """Project registration rows onto the fields the results core uses."""
    return [
        RosterEntry(
            player_id=reg.id,
            player_name=reg.player_name,
            rating=reg.fide_rating,
        )
        for reg in registrations
    ]


class ResultService:
    """Request-scoped access to one database session's tournament results."""

    def __init__(self, db: Session, max_attempts: Optional[int] = None):
        self.db = db
        self.max_attempts = max_attempts or settings.results_max_attempts

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_result(self, tournament_id: str) -> TournamentResult:
        """Stored result, or an empty unsaved one if nothing is stored yet."""
        try:
            record = self._load_record(tournament_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to load results for tournament %s: %s", tournament_id, exc)
            raise PersistenceError(f"Could not load results for tournament {tournament_id}") from exc
        if record is None:
            return TournamentResult.empty(tournament_id)
        return self._to_result(record)

    def standings(self, tournament_id: str, tiebreak: Optional[str] = None) -> list[Standing]:
        return rank(self.get_result(tournament_id), tiebreak or settings.standings_tiebreak)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def reconcile(
        self,
        tournament_id: str,
        roster: Iterable[RosterEntry],
        total_rounds: int,
    ) -> TournamentResult:
        """
        Bring the stored scores in line with the roster and round count.

        A result is created on first reconciliation only when there is at
        least one player and at least one round; otherwise the reconciled
        (empty or round-less) result is returned without being stored.
        Re-running with unchanged inputs performs no write.
        """
        roster = list(roster)

        def transform(current: TournamentResult) -> TournamentResult:
            return reconcile_scores(current, roster, total_rounds)

        def create_when(updated: TournamentResult) -> bool:
            return bool(updated.player_scores) and total_rounds > 0

        return self._write(tournament_id, transform, create_when, action="reconcile")

    def reconcile_tournament(self, tournament_id: str) -> TournamentResult:
        """Reconcile using the tournament's stored round count and registrations."""
        tournament = self.db.get(Tournament, tournament_id)
        if tournament is None:
            raise NotFoundError(f"Tournament {tournament_id} not found")

        registrations = (
            self.db.query(PlayerRegistration)
            .filter(PlayerRegistration.tournament_id == tournament_id)
            .order_by(PlayerRegistration.registration_date.asc(), PlayerRegistration.id.asc())
            .all()
        )
        return self.reconcile(
            tournament_id,
            roster_from_registrations(registrations),
            tournament.total_rounds or 0,
        )

    def set_round_score(
        self,
        tournament_id: str,
        player_id: str,
        round_index: int,
        score: RoundScore,
    ) -> TournamentResult:
        """Record one round score for one player; requires a stored result."""

        def transform(current: TournamentResult) -> TournamentResult:
            return apply_round_score(current, player_id, round_index, score)

        return self._write(tournament_id, transform, lambda _: False, action="set_round_score")

    def save_result(
        self,
        tournament_id: str,
        player_scores: Sequence[PlayerScore],
        expected_version: Optional[int] = None,
    ) -> TournamentResult:
        """
        Replace the whole stored document (upsert).

        Totals are recomputed by PlayerScore itself. When expected_version
        is given, the write only goes ahead if the stored document still has
        that version.

        Raises:
            ConflictError: stored version differs from expected_version
        """
        replacement = tuple(player_scores)

        def transform(current: TournamentResult) -> TournamentResult:
            if expected_version is not None and current.version != expected_version:
                raise ConflictError(
                    f"Results for tournament {tournament_id} are at version "
                    f"{current.version}, not {expected_version}; reload and retry"
                )
            return TournamentResult(
                tournament_id=tournament_id,
                player_scores=replacement,
                version=current.version,
            )

        return self._write(tournament_id, transform, lambda _: True, action="save")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load_record(self, tournament_id: str) -> Optional[TournamentResultRecord]:
        return (
            self.db.query(TournamentResultRecord)
            .filter(TournamentResultRecord.tournament_id == tournament_id)
            .one_or_none()
        )

    @staticmethod
    def _to_result(record: TournamentResultRecord) -> TournamentResult:
        return TournamentResult.from_payload(
            record.tournament_id,
            record.player_scores or [],
            version=record.version,
        )

    def _write(
        self,
        tournament_id: str,
        transform: Transform,
        create_when: CreatePolicy,
        action: str,
    ) -> TournamentResult:
        for attempt in range(1, self.max_attempts + 1):
            try:
                record = self._load_record(tournament_id)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error("Failed to load results for tournament %s: %s", tournament_id, exc)
                raise PersistenceError(
                    f"Could not load results for tournament {tournament_id}"
                ) from exc

            current = (
                self._to_result(record) if record is not None
                else TournamentResult.empty(tournament_id)
            )
            # Domain errors propagate from here before anything is written
            updated = transform(current)

            if record is None:
                if not create_when(updated):
                    return updated
                record = TournamentResultRecord(
                    tournament_id=tournament_id,
                    player_scores=updated.scores_payload(),
                )
                self.db.add(record)
            elif updated.same_scores(current):
                return current
            else:
                # Assign a new list; in-place JSON mutation is not tracked
                record.player_scores = updated.scores_payload()

            try:
                self.db.commit()
            except (StaleDataError, IntegrityError) as exc:
                self.db.rollback()
                logger.warning(
                    "%s on tournament %s lost a concurrent write (attempt %d/%d): %s",
                    action, tournament_id, attempt, self.max_attempts, exc,
                )
                continue
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error("Failed to save results for tournament %s: %s", tournament_id, exc)
                raise PersistenceError(
                    f"Could not save results for tournament {tournament_id}"
                ) from exc

            stored = self._to_result(record)
            logger.info(
                "%s on tournament %s stored version %d (%d players)",
                action, tournament_id, stored.version, len(stored.player_scores),
            )
            return stored

        raise ConcurrentUpdateError(tournament_id, self.max_attempts)
