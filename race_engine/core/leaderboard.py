"""Leaderboard ranking for the race simulation engine."""

from __future__ import annotations

from collections.abc import Iterable

from race_engine.core.participant import Participant


def rank_participants(participants: Iterable[Participant]) -> list[Participant]:
    """Return a new list ordered by descending ``(lap_num, position)``.

    The sort is stable, so participants with equal keys keep their relative
    input order.  The input is not modified.
    """
    return sorted(participants, key=lambda p: p.rank_key, reverse=True)


def ranking_ids(participants: Iterable[Participant]) -> tuple[int, ...]:
    """Racer ids in ranked order."""
    return tuple(p.racer_id for p in rank_participants(participants))
