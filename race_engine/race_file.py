"""Race file layout: header metadata followed by telemetry lines."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from race_engine.core.telemetry import CROSSING_PREFIX, line_time

TIME_HEADER: str = "#TIME:"


@dataclass(frozen=True)
class RaceHeader:
    """Metadata written ahead of the telemetry.

    Attributes:
        race_name: Race title.
        track_name: Name of the track raced on.
        distance: Track length.
        expected_time: Expected race duration in milliseconds.
        participants: Number of racers.
        width: Track drawing width.
        height: Track drawing height.
    """

    race_name: str
    track_name: str
    distance: float
    expected_time: int
    participants: int
    width: int = 5
    height: int = 4

    def lines(self) -> list[str]:
        return [
            f"#RACE:{self.race_name}",
            f"#TRACK:{self.track_name}",
            f"#WIDTH:{self.width}",
            f"#HEIGHT:{self.height}",
            f"#DISTANCE:{self.distance}",
            f"{TIME_HEADER}{self.expected_time}",
            f"#PARTICIPANTS:{self.participants}",
        ]


def expected_duration(lap_time: int, laps: int) -> int:
    """Expected race length in milliseconds for *laps* laps of *lap_time* s."""
    return 1000 * lap_time * laps


def default_output_name(laps: int, racers: int, lap_time: int) -> str:
    return f"{laps}lap-{racers}racer-{lap_time}timeRace.rce"


def adjust_for_last_racer(lines: list[str]) -> list[str]:
    """Rewrite the ``#TIME`` header to when the last racer actually finished.

    Sampling and ramping make the real finish differ from the expected
    duration, so the header is set to the tick of the final ``$C`` line plus
    one.  Lines without a crossing or a ``#TIME`` header are left unchanged.

    Returns:
        The same list, modified in place.
    """
    last_crossing = next(
        (line for line in reversed(lines) if line.startswith(CROSSING_PREFIX)),
        None,
    )
    if last_crossing is None:
        return lines
    duration = line_time(last_crossing) + 1
    for i, line in enumerate(lines):
        if line.startswith(TIME_HEADER):
            lines[i] = f"{TIME_HEADER}{duration}"
            break
    return lines


def write_race_file(path: Path, lines: Sequence[str]) -> None:
    """Write *lines* to *path*, one per line."""
    with open(path, "w", encoding="utf-8") as fh:
        for line in lines:
            fh.write(line + "\n")
