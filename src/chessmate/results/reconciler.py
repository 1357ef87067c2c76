"""
Roster reconciliation and single-score edits.

Both operations are pure: they take a TournamentResult and return a new
one, leaving persistence to results.service. Keeping them free of I/O
means the service can re-run them from scratch when an optimistic write
loses a race.

Reconciliation guarantees, for the returned result:
- every roster player has exactly one PlayerScore
- no PlayerScore exists for a player missing from the roster
- every round_scores has exactly total_rounds entries
- total_score matches round_scores
Scores already entered for players who stay on the roster are kept.
"""

from __future__ import annotations

from typing import Iterable

from chessmate.exceptions import (
    NotFoundError,
    RoundsNotConfiguredError,
    ValidationError,
)
from chessmate.results.scores import (
    InvalidScoreError,
    PlayerScore,
    RosterEntry,
    RoundScore,
    TournamentResult,
    normalize_score,
    resize_rounds,
)


def reconcile_scores(
    result: TournamentResult,
    roster: Iterable[RosterEntry],
    total_rounds: int,
) -> TournamentResult:
    """
    Merge the current roster and round count into a result.

    Args:
        result: Existing (or empty) result for the tournament
        roster: Currently registered players; duplicate ids keep the first entry
        total_rounds: Number of rounds the tournament has (0 allowed)

    Returns:
        New TournamentResult with the same version as the input

    Raises:
        ValidationError: if total_rounds is negative
    """
    if total_rounds < 0:
        raise ValidationError(f"Total rounds cannot be negative (got {total_rounds})")

    registered: dict[str, RosterEntry] = {}
    for entry in roster:
        registered.setdefault(entry.player_id, entry)

    merged: list[PlayerScore] = []
    for existing in result.player_scores:
        entry = registered.get(existing.player_id)
        if entry is None:
            # Deregistered: drop their scores
            continue
        merged.append(
            PlayerScore(
                player_id=existing.player_id,
                player_name=entry.player_name,
                rating=entry.rating,
                round_scores=resize_rounds(existing.round_scores, total_rounds),
            )
        )

    known = {ps.player_id for ps in merged}
    for player_id, entry in registered.items():
        if player_id not in known:
            merged.append(PlayerScore.new(entry, total_rounds))

    return TournamentResult(
        tournament_id=result.tournament_id,
        player_scores=tuple(merged),
        version=result.version,
    )


def apply_round_score(
    result: TournamentResult,
    player_id: str,
    round_index: int,
    score: RoundScore,
) -> TournamentResult:
    """
    Replace one player's score for one round.

    Nothing is changed when any precondition fails; the raised error names
    the violated one.

    Raises:
        NotFoundError: result never stored, or player not in it
        RoundsNotConfiguredError: the player's score row has no rounds
        ValidationError: round index out of range or invalid score value
    """
    if not result.is_stored:
        raise NotFoundError(
            f"No results exist for tournament {result.tournament_id}; reconcile the roster first"
        )

    player = result.get_player(player_id)
    if player is None:
        raise NotFoundError(
            f"Player {player_id} has no score entry in tournament {result.tournament_id}"
        )

    total_rounds = len(player.round_scores)
    if total_rounds == 0:
        raise RoundsNotConfiguredError(result.tournament_id)
    if not 0 <= round_index < total_rounds:
        raise ValidationError(
            f"Round index {round_index} is out of range for {total_rounds} rounds"
        )

    try:
        normalized = normalize_score(score)
    except InvalidScoreError as exc:
        raise ValidationError(str(exc)) from exc

    updated = player.with_round(round_index, normalized)
    return TournamentResult(
        tournament_id=result.tournament_id,
        player_scores=tuple(
            updated if ps.player_id == player_id else ps for ps in result.player_scores
        ),
        version=result.version,
    )
