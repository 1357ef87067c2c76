#!/usr/bin/env python3
"""
Bring stored results in line with current registrations and round counts.

Reconcile one tournament:
    python scripts/reconcile_results.py --tournament-id a1b2c3...

Reconcile every Upcoming or Active tournament:
    python scripts/reconcile_results.py --all
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chessmate.config import settings
from chessmate.db import get_session
from chessmate.exceptions import ChessmateError
from chessmate.results.service import ResultService
from chessmate.services.tournaments import list_tournaments
from chessmate.tournament_statuses import get_status_group

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile tournament results with registrations.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--tournament-id", help="Tournament to reconcile.")
    target.add_argument(
        "--all",
        action="store_true",
        help="Reconcile every tournament open for registration.",
    )
    return parser


def main() -> int:
    args = _build_parser().parse_args()
    failures = 0

    with get_session() as session:
        if args.all:
            tournament_ids = [
                t.id for t in list_tournaments(session, get_status_group("open_for_registration"))
            ]
        else:
            tournament_ids = [args.tournament_id]

        service = ResultService(session)
        for tournament_id in tournament_ids:
            try:
                result = service.reconcile_tournament(tournament_id)
            except ChessmateError as exc:
                failures += 1
                logger.error("Tournament %s: %s", tournament_id, exc.message)
                continue
            state = f"version {result.version}" if result.is_stored else "not stored"
            print(f"{tournament_id}: {len(result.player_scores)} players, {state}")

    print(f"Reconciled {len(tournament_ids) - failures}/{len(tournament_ids)} tournaments")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
