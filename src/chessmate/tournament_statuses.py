"""Shared tournament status and type definitions.

This module is the single source of truth for status groups that are reused
across web handlers, registration rules, and listing filters.
"""

from __future__ import annotations

from typing import Iterable

# Individual statuses a tournament can be in.
ALL_TOURNAMENT_STATUSES: tuple[str, ...] = (
    "Upcoming",
    "Active",
    "Completed",
    "Cancelled",
)

# Status assigned to every newly created tournament.
INITIAL_STATUS = "Upcoming"

TOURNAMENT_TYPES: tuple[str, ...] = (
    "Swiss",
    "Round Robin",
    "Knockout",
    "Arena",
    "Scheveningen",
    "Other",
)

# Canonical status groups.
TOURNAMENT_STATUS_GROUPS: dict[str, tuple[str, ...]] = {
    # Players may sign up (public or organizer-managed).
    "open_for_registration": ("Upcoming", "Active"),
    "all": ALL_TOURNAMENT_STATUSES,
}

_CANONICAL_BY_LOWER = {status.lower(): status for status in ALL_TOURNAMENT_STATUSES}


def get_status_group(group_name: str) -> tuple[str, ...]:
    """Return a named status group, raising KeyError for unknown names."""
    return TOURNAMENT_STATUS_GROUPS[group_name]


def canonical_status(raw: str) -> str | None:
    """Map a status in any letter case to its canonical spelling, or None."""
    return _CANONICAL_BY_LOWER.get(raw.strip().lower())


def is_open_for_registration(status: str) -> bool:
    return status in get_status_group("open_for_registration")


def normalize_status_filter(
    raw_statuses: Iterable[str] | None,
    *,
    default_group: str = "all",
) -> list[str]:
    """Normalize requested statuses against known values.

    - If no statuses are provided, returns the statuses from ``default_group``.
    - Matching is case-insensitive; unknown statuses are ignored.
    - Order is preserved and duplicates are removed.
    """
    if raw_statuses is None:
        return list(get_status_group(default_group))

    seen: set[str] = set()
    normalized: list[str] = []

    for raw in raw_statuses:
        status = canonical_status(raw)
        if status is None or status in seen:
            continue
        seen.add(status)
        normalized.append(status)

    if normalized:
        return normalized

    return list(get_status_group(default_group))
