"""Telemetry line formats emitted by the race orchestrator.

Every line is colon-delimited and starts with a prefix naming its kind:

    #<id>:<name>:<start>                  participant registration (tick 0)
    $L:<time>:<id1>:<id2>:...             leaderboard snapshot
    $T:<time>:<id>:<position>:<lap>       position sample
    $C:<time>:<id>:<lap>:<finished>       finish-line crossing
"""

from __future__ import annotations

from collections.abc import Iterable

from race_engine.core.participant import Participant

REGISTRATION_PREFIX: str = "#"
LEADERBOARD_PREFIX: str = "$L"
TELEMETRY_PREFIX: str = "$T"
CROSSING_PREFIX: str = "$C"


def registration_line(participant: Participant) -> str:
    return (
        f"{REGISTRATION_PREFIX}{participant.racer_id}:{participant.name}:"
        f"{participant.position}"
    )


def leaderboard_line(time: int, racer_ids: Iterable[int]) -> str:
    ids = ":".join(str(racer_id) for racer_id in racer_ids)
    return f"{LEADERBOARD_PREFIX}:{time}:{ids}"


def position_line(time: int, participant: Participant) -> str:
    return (
        f"{TELEMETRY_PREFIX}:{time}:{participant.racer_id}:"
        f"{participant.position:.2f}:{participant.lap_num}"
    )


def crossing_line(time: int, participant: Participant, laps: int) -> str:
    """Finish-line crossing.  The crossing time is the integer tick."""
    finished = "true" if participant.lap_num >= laps else "false"
    return (
        f"{CROSSING_PREFIX}:{time}:{participant.racer_id}:"
        f"{participant.lap_num}:{finished}"
    )


def line_time(line: str) -> int | None:
    """Tick carried by a ``$`` line, or ``None`` for header lines."""
    if not line.startswith("$"):
        return None
    return int(float(line.split(":")[1]))
