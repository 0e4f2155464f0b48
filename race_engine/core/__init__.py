"""Core simulation modules for the zone race engine."""

from race_engine.core.constraint import (
    Constraint,
    ConstraintKind,
    RampConstraint,
    TrackSectionConstraint,
    apply_constraints,
    ramp_distance,
)
from race_engine.core.errors import ConfigurationError
from race_engine.core.leaderboard import rank_participants, ranking_ids
from race_engine.core.participant import Participant
from race_engine.core.race import DEFAULT_ACCELERATION, DEFAULT_DECELERATION, Race
from race_engine.core.roster import MAX_RACER_ID, build_roster
from race_engine.core.track import (
    FAST,
    MEDIUM,
    SLOW,
    TRACK_SPEEDS,
    Track,
    TrackSpeed,
    TrackZone,
)

__all__ = [
    "ConfigurationError",
    "Constraint",
    "ConstraintKind",
    "DEFAULT_ACCELERATION",
    "DEFAULT_DECELERATION",
    "FAST",
    "MAX_RACER_ID",
    "MEDIUM",
    "Participant",
    "Race",
    "RampConstraint",
    "SLOW",
    "TRACK_SPEEDS",
    "Track",
    "TrackSectionConstraint",
    "TrackSpeed",
    "TrackZone",
    "apply_constraints",
    "build_roster",
    "ramp_distance",
    "rank_participants",
    "ranking_ids",
]
