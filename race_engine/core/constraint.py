"""Velocity constraints held by race participants.

Two kinds of constraint exist and the set is closed:

* ``TrackSectionConstraint`` pins velocity to the speed of the zone the
  participant is in.
* ``RampConstraint`` moves velocity linearly toward a target, one ``rate``
  per tick, without overshooting it.  A negative rate decelerates.

Splitting "what governs speed" from "how fast speed changes" lets the race
decide *when* to start a ramp from the closed-form distance returned by
``ramp_distance`` instead of looking ahead tick by tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from race_engine.core.errors import ConfigurationError
from race_engine.core.track import TrackSpeed


class ConstraintKind(Enum):
    """The two slots a participant can hold a constraint in."""

    TRACK = "track"
    RAMP = "ramp"


@dataclass(frozen=True)
class TrackSectionConstraint:
    """Sets velocity to ``speed.multiplier * base_speed``."""

    speed: TrackSpeed
    base_speed: float

    kind = ConstraintKind.TRACK

    @property
    def velocity(self) -> float:
        return self.speed.multiplier * self.base_speed

    def apply(self, velocity: float) -> float:
        return self.velocity


@dataclass(frozen=True)
class RampConstraint:
    """Linear acceleration (``rate > 0``) or deceleration (``rate < 0``).

    Attributes:
        rate: Velocity change per tick.  Must be non-zero.
        target_velocity: Terminal velocity the ramp saturates at.
    """

    rate: float
    target_velocity: float

    kind = ConstraintKind.RAMP

    def __post_init__(self) -> None:
        if self.rate == 0.0:
            raise ConfigurationError("Ramp rate must be non-zero.")

    def apply(self, velocity: float) -> float:
        """Advance *velocity* one tick toward the target.

        If the step would cross the target the result is exactly the
        target, whichever direction the ramp runs in.
        """
        stepped = velocity + self.rate
        if self.rate > 0.0:
            return min(stepped, self.target_velocity)
        return max(stepped, self.target_velocity)


Constraint = Union[TrackSectionConstraint, RampConstraint]


def apply_constraints(
    velocity: float,
    track_constraint: TrackSectionConstraint | None,
    ramp: RampConstraint | None,
) -> float:
    """Compute next-tick velocity from the held constraints.

    A held ramp overrides the track section and drives velocity from its
    current value, so a participant can change speed before it reaches the
    zone that demands it.  Without a ramp the track section gives the
    zone's resting velocity.
    """
    if ramp is not None:
        return ramp.apply(velocity)
    if track_constraint is not None:
        return track_constraint.apply(velocity)
    return velocity


def ramp_distance(
    initial_velocity: float, final_velocity: float, rate: float
) -> float:
    """Distance covered while ramping from one velocity to another.

    Uses the constant-acceleration relations::

        t = (v_f - v_i) / a
        s = v_i * t + 0.5 * a * t**2

    Args:
        initial_velocity: Velocity when the ramp starts.
        final_velocity: Velocity the ramp ends at.
        rate: Signed velocity change per tick.  Must be non-zero.

    Returns:
        Distance travelled during the ramp.  Zero when the velocities
        already match.

    Raises:
        ValueError: If rate is zero.
    """
    if rate == 0.0:
        raise ValueError("rate must be non-zero.")
    t = (final_velocity - initial_velocity) / rate
    return initial_velocity * t + 0.5 * rate * t * t
