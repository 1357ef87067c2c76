"""
Tournament results: score tracking, roster reconciliation and standings.

Main components:
- scores: PlayerScore / TournamentResult value types and score validation
- reconciler: pure roster merge and single-score edit
- standings: ranked view with configurable tie-break
- service: database persistence with optimistic-concurrency retries
"""

from chessmate.results.reconciler import apply_round_score, reconcile_scores
from chessmate.results.scores import (
    PlayerScore,
    RosterEntry,
    TournamentResult,
    compute_total,
    normalize_score,
)
from chessmate.results.service import ResultService, roster_from_registrations
from chessmate.results.standings import Standing, rank

__all__ = [
    "PlayerScore",
    "RosterEntry",
    "TournamentResult",
    "compute_total",
    "normalize_score",
    "reconcile_scores",
    "apply_round_score",
    "Standing",
    "rank",
    "ResultService",
    "roster_from_registrations",
]
