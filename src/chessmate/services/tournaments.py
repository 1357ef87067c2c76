"""
Tournament service: create, edit, list and delete tournaments.

Field-level validation (lengths, non-negative fees, known type) happens in
the web schemas; this module enforces the rules that need the stored row,
such as end date ordering after a partial update.

Deleting a tournament also deletes its registrations and its results
document, since neither means anything without the tournament.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from chessmate.db.models import Tournament, TournamentResultRecord
from chessmate.exceptions import NotFoundError, ValidationError
from chessmate.tournament_statuses import (
    INITIAL_STATUS,
    TOURNAMENT_TYPES,
    canonical_status,
    normalize_status_filter,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "name",
    "type",
    "location",
    "start_date",
    "end_date",
    "entry_fee",
    "prize_fund",
    "time_control",
    "description",
    "image_url",
    "total_rounds",
    "status",
})

DATE_FIELDS = ("start_date", "end_date")


def _as_naive_utc(value: Any) -> Any:
    # Columns store naive UTC; aware and naive values cannot be compared
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _check_rules(tournament: Tournament) -> None:
    if tournament.type not in TOURNAMENT_TYPES:
        raise ValidationError(f"Unknown tournament type: {tournament.type}")
    if tournament.end_date < tournament.start_date:
        raise ValidationError("End date cannot be before start date")
    if (tournament.total_rounds or 0) < 0:
        raise ValidationError("Total rounds cannot be negative")


def get_tournament(db: Session, tournament_id: str) -> Tournament:
    tournament = db.get(Tournament, tournament_id)
    if tournament is None:
        raise NotFoundError(f"Tournament {tournament_id} not found")
    return tournament


def list_tournaments(db: Session, statuses: Optional[Iterable[str]] = None) -> list[Tournament]:
    """Tournaments in the given statuses (all by default), soonest first."""
    status_list = normalize_status_filter(statuses, default_group="all")
    return (
        db.query(Tournament)
        .filter(Tournament.status.in_(status_list))
        .order_by(Tournament.start_date.asc(), Tournament.name.asc())
        .all()
    )


def create_tournament(db: Session, data: dict[str, Any]) -> Tournament:
    """Create a tournament; new tournaments always start as Upcoming."""
    values = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
    for key in DATE_FIELDS:
        if key in values:
            values[key] = _as_naive_utc(values[key])
    values["status"] = INITIAL_STATUS
    values.setdefault("total_rounds", 0)

    tournament = Tournament(**values)
    _check_rules(tournament)

    db.add(tournament)
    db.commit()
    db.refresh(tournament)
    logger.info("Created tournament %s (%s)", tournament.id, tournament.name)
    return tournament


def update_tournament(db: Session, tournament_id: str, updates: dict[str, Any]) -> Tournament:
    """
    Apply a partial update.

    Unknown keys (including any id) are ignored. Status is accepted in any
    letter case and stored in canonical form. Timezone-aware dates are
    converted to naive UTC before the date rules are checked.
    """
    tournament = get_tournament(db, tournament_id)

    for key, value in updates.items():
        if key not in EDITABLE_FIELDS:
            continue
        if key == "status":
            status = canonical_status(value or "")
            if status is None:
                raise ValidationError(f"Unknown tournament status: {value}")
            value = status
        elif key in DATE_FIELDS:
            value = _as_naive_utc(value)
        setattr(tournament, key, value)

    try:
        _check_rules(tournament)
    except ValidationError:
        db.rollback()
        raise

    db.commit()
    db.refresh(tournament)
    logger.info("Updated tournament %s: %s", tournament.id, sorted(updates))
    return tournament


def delete_tournament(db: Session, tournament_id: str) -> None:
    """Delete a tournament together with its registrations and results."""
    tournament = get_tournament(db, tournament_id)
    registrations = len(tournament.registrations)

    db.query(TournamentResultRecord).filter(
        TournamentResultRecord.tournament_id == tournament_id
    ).delete(synchronize_session=False)
    db.delete(tournament)
    db.commit()
    logger.info(
        "Deleted tournament %s with %d registrations", tournament_id, registrations
    )
