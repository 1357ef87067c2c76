#!/usr/bin/env python3
"""
Print a tournament's standings table.

    python scripts/print_standings.py --tournament-id a1b2c3...
    python scripts/print_standings.py --tournament-id a1b2c3... --tiebreak rating
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chessmate.db import get_session
from chessmate.results.service import ResultService
from chessmate.results.standings import TIEBREAK_KEYS


def _format_score(score) -> str:
    if score is None:
        return "-"
    return "½" if score == 0.5 else str(int(score))


def main() -> int:
    parser = argparse.ArgumentParser(description="Print tournament standings")
    parser.add_argument("--tournament-id", required=True, help="Tournament id")
    parser.add_argument(
        "--tiebreak",
        choices=sorted(TIEBREAK_KEYS),
        default=None,
        help="Order for equal totals (default: STANDINGS_TIEBREAK setting)",
    )
    args = parser.parse_args()

    with get_session() as session:
        standings = ResultService(session).standings(args.tournament_id, args.tiebreak)

    if not standings:
        print("No results recorded for this tournament.")
        return 0

    for standing in standings:
        ps = standing.score
        rounds = " ".join(_format_score(s) for s in ps.round_scores)
        rating = ps.rating if ps.rating else "-"
        print(f"{standing.rank:>3}. {ps.player_name:<30} {str(rating):>5}  {rounds:<30} {ps.total_score:g}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
