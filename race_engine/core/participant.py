"""Per-racer kinematic state for the race simulation engine."""

from __future__ import annotations

from race_engine.core.constraint import (
    Constraint,
    ConstraintKind,
    RampConstraint,
    TrackSectionConstraint,
    apply_constraints,
)
from race_engine.core.errors import ConfigurationError
from race_engine.core.track import Track


class Participant:
    """A single racer moving around the track.

    Constraints live in two explicit slots, one per ``ConstraintKind``, so
    a participant can never hold two ramps or two track sections at once.
    Installing a constraint replaces whatever the slot held before.

    Attributes:
        racer_id: Unique racer identifier.
        name: Display name.
        position: Distance along the current lap.  Negative before the
            start line.
        velocity: Distance covered per tick.
        next_velocity: Velocity demanded by the upcoming zone.
        lap_num: Completed laps.
        base_speed: Reference speed scaled by zone multipliers.
        track_length: Course length used for lap wrapping.
        track_constraint: Held track-section constraint, if any.
        ramp: Held acceleration/deceleration constraint, if any.
    """

    __slots__ = (
        "racer_id",
        "name",
        "position",
        "start_position",
        "velocity",
        "next_velocity",
        "lap_num",
        "base_speed",
        "track_length",
        "track_constraint",
        "ramp",
    )

    def __init__(
        self,
        racer_id: int,
        name: str,
        position: float,
        track_length: float,
        base_speed: float = 1.0,
        velocity: float | None = None,
    ) -> None:
        """Initialise racer state.

        Args:
            racer_id: Unique racer identifier.
            name: Display name.  Must be non-empty.
            position: Start position.
            track_length: Course length (> 0).
            base_speed: Reference speed (> 0).
            velocity: Initial velocity.  Defaults to ``base_speed``.

        Raises:
            ConfigurationError: If constraints are violated.
        """
        if not name:
            raise ConfigurationError("Participant name must not be empty.")
        if track_length <= 0.0:
            raise ConfigurationError("track_length must be > 0.")
        if base_speed <= 0.0:
            raise ConfigurationError("base_speed must be > 0.")
        self.racer_id: int = racer_id
        self.name: str = name
        self.position: float = position
        self.start_position: float = position
        self.velocity: float = base_speed if velocity is None else velocity
        if self.velocity <= 0.0:
            raise ConfigurationError("velocity must be > 0.")
        self.next_velocity: float = self.velocity
        self.lap_num: int = 0
        self.base_speed: float = base_speed
        self.track_length: float = track_length
        self.track_constraint: TrackSectionConstraint | None = None
        self.ramp: RampConstraint | None = None

    # -- Constraint slots -----------------------------------------------------

    def add_constraint(self, constraint: Constraint) -> None:
        """Install *constraint* in its slot, discarding the previous one."""
        if isinstance(constraint, TrackSectionConstraint):
            self.track_constraint = constraint
        elif isinstance(constraint, RampConstraint):
            self.ramp = constraint
        else:
            raise TypeError(f"Unsupported constraint: {constraint!r}")

    def remove_constraint(self, kind: ConstraintKind) -> None:
        if kind is ConstraintKind.TRACK:
            self.track_constraint = None
        else:
            self.ramp = None

    def has_constraint(self, kind: ConstraintKind) -> bool:
        if kind is ConstraintKind.TRACK:
            return self.track_constraint is not None
        return self.ramp is not None

    # -- Kinematics -----------------------------------------------------------

    def set_velocity(self, velocity: float) -> None:
        self.velocity = velocity

    def calculate_next_velocity(self, track: Track) -> float:
        """Look up the velocity the zone after the current one demands."""
        self.next_velocity = track.next_speed_zone_at(self.position).multiplier * (
            self.base_speed
        )
        return self.next_velocity

    def step(self) -> None:
        """Advance one tick.

        Moves by the current velocity, then updates velocity from the held
        constraints (a held ramp overrides the track section).  Crossing a
        multiple of the track length wraps the position and counts the lap.
        """
        self.position += self.velocity
        self.velocity = apply_constraints(
            self.velocity, self.track_constraint, self.ramp
        )
        if self.position >= self.track_length:
            laps, self.position = divmod(self.position, self.track_length)
            self.lap_num += int(laps)

    @property
    def rank_key(self) -> tuple[int, float]:
        """Leaderboard key: more laps first, then greater position."""
        return (self.lap_num, self.position)

    def __repr__(self) -> str:
        return (
            f"Participant(racer_id={self.racer_id}, name={self.name!r}, "
            f"lap={self.lap_num}, position={self.position:.2f})"
        )
