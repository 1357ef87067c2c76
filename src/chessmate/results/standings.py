"""
Standings: players ordered by total score.

Ranks are positional (index + 1). Players level on points still get
distinct ranks; the tie-break only decides who is listed first.

Tie-break rules for equal totals:
- "name":   player name A-Z, case-insensitive
- "rating": higher rating first, then name A-Z
Player id is always the last key so the order never depends on input order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from chessmate.results.scores import PlayerScore, TournamentResult

TIEBREAK_NAME = "name"
TIEBREAK_RATING = "rating"

SortKey = Callable[[PlayerScore], tuple]


def _name_key(ps: PlayerScore) -> tuple:
    return (-ps.total_score, ps.player_name.casefold(), ps.player_id)


def _rating_key(ps: PlayerScore) -> tuple:
    return (-ps.total_score, -(ps.rating or 0), ps.player_name.casefold(), ps.player_id)


TIEBREAK_KEYS: dict[str, SortKey] = {
    TIEBREAK_NAME: _name_key,
    TIEBREAK_RATING: _rating_key,
}


@dataclass(frozen=True)
class Standing:
    """A player's position in the standings."""

    rank: int
    score: PlayerScore

    def to_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, **self.score.to_dict()}


def rank(result: TournamentResult, tiebreak: str = TIEBREAK_NAME) -> list[Standing]:
    """
    Order a tournament's players into standings.

    Args:
        result: Scores to rank (not modified)
        tiebreak: "name" or "rating"

    Raises:
        KeyError: for an unknown tie-break rule
    """
    try:
        key = TIEBREAK_KEYS[tiebreak]
    except KeyError as exc:
        raise KeyError(f"Unknown tie-break rule: {tiebreak}") from exc

    ordered = sorted(result.player_scores, key=key)
    return [Standing(rank=position, score=ps) for position, ps in enumerate(ordered, start=1)]
