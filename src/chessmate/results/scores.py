"""
Score store types for tournament results.

A TournamentResult holds one PlayerScore per registered player. Each
PlayerScore has one entry per round:

    1    win
    0.5  draw
    0    loss
    None not yet played / not recorded

total_score is derived from round_scores and is never set on its own;
every constructor and every edit recomputes it.

The JSON shape (camelCase) matches what the HTTP API exchanges and what is
embedded in the tournament_results table:

    {"playerId": "...", "playerName": "...", "rating": 1850,
     "roundScores": [1, 0.5, null], "totalScore": 1.5}
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional, Sequence

RoundScore = Optional[float]

WIN = 1.0
DRAW = 0.5
LOSS = 0.0
ALLOWED_SCORES: frozenset[float] = frozenset({WIN, DRAW, LOSS})


class InvalidScoreError(ValueError):
    """Raised when a round score is not 0, 0.5, 1 or None."""
    pass


def normalize_score(value: Any) -> RoundScore:
    """
    Validate a single round score and return it as a float (or None).

    Accepts ints and floats equal to 0, 0.5 or 1. Booleans are rejected
    even though they compare equal to 0 and 1.

    Raises:
        InvalidScoreError: for anything else
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScoreError(f"Score must be 0, 0.5, 1 or null, got {value!r}")
    score = float(value)
    if score not in ALLOWED_SCORES:
        raise InvalidScoreError(f"Score must be 0, 0.5, 1 or null, got {value!r}")
    return score


def compute_total(round_scores: Iterable[RoundScore]) -> float:
    """Sum of the recorded (non-null) round scores."""
    return float(sum(score for score in round_scores if score is not None))


def resize_rounds(round_scores: Sequence[RoundScore], total_rounds: int) -> tuple[RoundScore, ...]:
    """Pad with None or truncate from the right to exactly total_rounds entries."""
    kept = tuple(round_scores[:total_rounds])
    return kept + (None,) * (total_rounds - len(kept))


@dataclass(frozen=True)
class RosterEntry:
    """The parts of a player registration the results core reads."""

    player_id: str
    player_name: str
    rating: Optional[int] = None


@dataclass(frozen=True)
class PlayerScore:
    """One player's per-round scores in one tournament."""

    player_id: str
    player_name: str
    rating: Optional[int] = None
    round_scores: tuple[RoundScore, ...] = ()
    total_score: float = field(init=False)

    def __post_init__(self) -> None:
        scores = tuple(normalize_score(s) for s in self.round_scores)
        object.__setattr__(self, "round_scores", scores)
        object.__setattr__(self, "total_score", compute_total(scores))

    @classmethod
    def new(cls, entry: RosterEntry, total_rounds: int) -> "PlayerScore":
        """Fresh entry with every round unplayed."""
        return cls(
            player_id=entry.player_id,
            player_name=entry.player_name,
            rating=entry.rating,
            round_scores=(None,) * total_rounds,
        )

    def with_round(self, round_index: int, score: RoundScore) -> "PlayerScore":
        """Copy with one round replaced; the total follows automatically."""
        scores = list(self.round_scores)
        scores[round_index] = score
        return replace(self, round_scores=tuple(scores))

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "rating": self.rating,
            "roundScores": list(self.round_scores),
            "totalScore": self.total_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayerScore":
        # totalScore in stored/incoming data is ignored: it is always derived
        return cls(
            player_id=str(data["playerId"]),
            player_name=data.get("playerName") or "",
            rating=data.get("rating"),
            round_scores=tuple(data.get("roundScores") or ()),
        )


@dataclass(frozen=True)
class TournamentResult:
    """
    All player scores for one tournament.

    version is the stored document's optimistic-concurrency stamp; it is
    None for results that have never been saved.
    """

    tournament_id: str
    player_scores: tuple[PlayerScore, ...] = ()
    version: Optional[int] = None

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for ps in self.player_scores:
            if ps.player_id in seen:
                raise ValueError(
                    f"Duplicate player {ps.player_id} in results for tournament {self.tournament_id}"
                )
            seen.add(ps.player_id)

    @classmethod
    def empty(cls, tournament_id: str) -> "TournamentResult":
        return cls(tournament_id=tournament_id)

    @property
    def is_stored(self) -> bool:
        return self.version is not None

    def get_player(self, player_id: str) -> Optional[PlayerScore]:
        for ps in self.player_scores:
            if ps.player_id == player_id:
                return ps
        return None

    def player_ids(self) -> set[str]:
        return {ps.player_id for ps in self.player_scores}

    def same_scores(self, other: "TournamentResult") -> bool:
        """True when both hold identical player score entries (version ignored)."""
        return self.player_scores == other.player_scores

    def scores_payload(self) -> list[dict[str, Any]]:
        """JSON array stored in tournament_results.player_scores."""
        return [ps.to_dict() for ps in self.player_scores]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournamentId": self.tournament_id,
            "playerScores": self.scores_payload(),
            "version": self.version,
        }

    @classmethod
    def from_payload(
        cls,
        tournament_id: str,
        player_scores: Iterable[dict[str, Any]],
        version: Optional[int] = None,
    ) -> "TournamentResult":
        return cls(
            tournament_id=tournament_id,
            player_scores=tuple(PlayerScore.from_dict(ps) for ps in player_scores),
            version=version,
        )
