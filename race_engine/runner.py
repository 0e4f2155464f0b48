"""Driving loop that runs a race to completion."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from race_engine.core.race import Race
from race_engine.race_file import RaceHeader, adjust_for_last_racer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class RaceRun:
    """Outcome of running a race to completion.

    Attributes:
        lines: Header lines followed by every telemetry line in emission
            order.
        ticks: Number of ``step_race`` calls made.
    """

    lines: list[str] = field(default_factory=list)
    ticks: int = 0


def run_race(
    race: Race,
    header: RaceHeader,
    progress: ProgressCallback | None = None,
) -> RaceRun:
    """Step *race* until every participant has finished.

    Args:
        race: A race that has not been stepped yet.
        header: Metadata placed ahead of the telemetry.  Its
            ``expected_time`` is rewritten to the real finish afterwards.
        progress: Optional callback receiving ``(ticks, expected_time)``
            after each tick.

    Returns:
        A ``RaceRun`` with the complete line log.
    """
    run = RaceRun(lines=header.lines())
    while race.still_going():
        run.lines.extend(race.step_race())
        run.ticks += 1
        if progress is not None:
            progress(run.ticks, header.expected_time)

    adjust_for_last_racer(run.lines)
    logger.info("Race %r complete after %d ticks", header.race_name, run.ticks)
    return run
