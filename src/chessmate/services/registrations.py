"""
Registration service: players signing up for tournaments.

Registrations can be created by the public sign-up form or by an organizer.
Either way the tournament must exist and still be open (Upcoming or
Active). Registrations do not touch the results document directly; the
results roster is brought in line by ResultService.reconcile_tournament.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from chessmate.db.models import PlayerRegistration
from chessmate.exceptions import NotFoundError, ValidationError
from chessmate.services.tournaments import get_tournament
from chessmate.tournament_statuses import is_open_for_registration

logger = logging.getLogger(__name__)

DEFAULT_FIDE_ID = "-"
DEFAULT_FIDE_RATING = 0

UPDATABLE_FIELDS = frozenset({
    "player_name",
    "player_email",
    "gender",
    "dob",
    "organization",
    "mobile",
    "fide_rating",
    "fide_id",
    "fee_paid",
})


def create_registration(db: Session, data: dict[str, Any]) -> PlayerRegistration:
    """
    Register a player for a tournament.

    Raises:
        NotFoundError: tournament does not exist
        ValidationError: missing player name, or tournament not open
    """
    tournament_id = data.get("tournament_id")
    player_name = (data.get("player_name") or "").strip()
    if not tournament_id or not player_name:
        raise ValidationError("Missing required registration data (tournamentId, playerName)")

    tournament = get_tournament(db, tournament_id)
    if not is_open_for_registration(tournament.status):
        raise ValidationError(
            f"Registration is only open for Upcoming or Active tournaments; "
            f"'{tournament.name}' is {tournament.status}"
        )

    values = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
    values["player_name"] = player_name
    values["fide_id"] = values.get("fide_id") or DEFAULT_FIDE_ID
    if values.get("fide_rating") is None:
        values["fide_rating"] = DEFAULT_FIDE_RATING

    registration = PlayerRegistration(
        tournament_id=tournament.id,
        tournament_name=data.get("tournament_name") or tournament.name,
        **values,
    )
    db.add(registration)
    db.commit()
    db.refresh(registration)
    logger.info(
        "Registered %s for tournament %s (%s)",
        registration.player_name, tournament.id, registration.id,
    )
    return registration


def get_registration(db: Session, registration_id: str) -> PlayerRegistration:
    registration = db.get(PlayerRegistration, registration_id)
    if registration is None:
        raise NotFoundError(f"Registration {registration_id} not found")
    return registration


def list_registrations_for_tournament(db: Session, tournament_id: str) -> list[PlayerRegistration]:
    """Registrations for a tournament, newest first."""
    return (
        db.query(PlayerRegistration)
        .filter(PlayerRegistration.tournament_id == tournament_id)
        .order_by(PlayerRegistration.registration_date.desc(), PlayerRegistration.id.desc())
        .all()
    )


def update_registration(db: Session, registration_id: str, updates: dict[str, Any]) -> PlayerRegistration:
    """Apply a partial update; ids and the owning tournament cannot be changed."""
    registration = get_registration(db, registration_id)

    values = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
    if "player_name" in values:
        values["player_name"] = (values["player_name"] or "").strip()
        if not values["player_name"]:
            raise ValidationError("Player name cannot be empty")

    for key, value in values.items():
        setattr(registration, key, value)

    db.commit()
    db.refresh(registration)
    logger.info("Updated registration %s: %s", registration_id, sorted(updates))
    return registration


def delete_registration(db: Session, registration_id: str) -> None:
    registration = get_registration(db, registration_id)
    db.delete(registration)
    db.commit()
    logger.info("Deleted registration %s", registration_id)
