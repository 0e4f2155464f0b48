"""Race orchestrator for the zone race simulation engine.

One call to :meth:`Race.step_race` advances the whole field by a single
tick and returns the telemetry lines that tick produced.  Per participant,
the race decides which constraints it should hold:

1. **Pre-start** (``position < 0``) -- pinned to the ``SLOW`` zone speed
   and ramped toward it, regardless of the zone layout.  The only crossing
   recognised is the start line, after which the first zone's speed is
   committed.
2. **Cruising** -- only the track-section constraint for the current zone
   is held.
3. **Approaching a boundary** -- when the remaining distance to the next
   zone is no more than the distance needed to ramp to that zone's speed,
   a ramp toward it is installed.  A held ramp is never re-evaluated:
   re-installing it each tick would restart the ramp against a recomputed
   target.
4. **Boundary crossed** -- detected when the distance to the next boundary
   grows across a step.  The ramp is dropped, the upcoming velocity is
   committed, and the velocity for the zone after that is looked up.

Telemetry position samples are drawn from a per-race
``numpy.random.Generator``: each participant reports on a given tick with
probability ``1 / telemetry_interval``, which spreads reports out instead
of having the whole field report in lockstep.  Supplying a seed makes the
sampling reproducible; leaderboard and finish lines never depend on it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from numpy.random import Generator

from race_engine.core.constraint import (
    ConstraintKind,
    RampConstraint,
    TrackSectionConstraint,
    ramp_distance,
)
from race_engine.core.errors import ConfigurationError
from race_engine.core.leaderboard import rank_participants
from race_engine.core.participant import Participant
from race_engine.core.telemetry import (
    crossing_line,
    leaderboard_line,
    position_line,
    registration_line,
)
from race_engine.core.track import SLOW, Track

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_ACCELERATION: float = 0.05  # velocity gained per tick while ramping up
DEFAULT_DECELERATION: float = 0.05  # velocity shed per tick while ramping down


class Race:
    """A race of several participants over a zoned track.

    Attributes:
        track: Course being raced on.
        participants: Field in current leaderboard order.
        laps: Lap target (>= 1).
        telemetry_interval: Mean ticks between position samples per
            participant (>= 1).
        time: Ticks simulated so far.
    """

    def __init__(
        self,
        track: Track,
        laps: int,
        telemetry_interval: int,
        participants: Sequence[Participant],
        acceleration: float = DEFAULT_ACCELERATION,
        deceleration: float = DEFAULT_DECELERATION,
        seed: int | None = None,
        rng: Generator | None = None,
    ) -> None:
        """Set up a race.

        Args:
            track: Course to race on.
            laps: Number of laps to finish (>= 1).
            telemetry_interval: Position samples are emitted with
                probability ``1 / telemetry_interval`` per participant per
                tick (>= 1).
            participants: Starting roster with unique racer ids.
            acceleration: Ramp-up rate per tick (> 0).
            deceleration: Ramp-down rate per tick (> 0).
            seed: Seed for the telemetry sampling generator.  Ignored when
                ``rng`` is given.
            rng: Explicit generator for telemetry sampling.

        Raises:
            ConfigurationError: If the roster is empty or has duplicate ids,
                or a numeric parameter is out of range.
        """
        if laps < 1:
            raise ConfigurationError("laps must be >= 1.")
        if telemetry_interval < 1:
            raise ConfigurationError("telemetry_interval must be >= 1.")
        if not participants:
            raise ConfigurationError("participants must not be empty.")
        if acceleration <= 0.0:
            raise ConfigurationError("acceleration must be > 0.")
        if deceleration <= 0.0:
            raise ConfigurationError("deceleration must be > 0.")
        ids = [p.racer_id for p in participants]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate racer ids: {duplicates}")

        self.track: Track = track
        self.laps: int = laps
        self.telemetry_interval: int = telemetry_interval
        self.participants: list[Participant] = list(participants)
        self.acceleration: float = acceleration
        self.deceleration: float = deceleration
        self.time: int = 0
        self._rng: Generator = rng if rng is not None else np.random.default_rng(seed)
        self._ranking: tuple[int, ...] = tuple(ids)
        self._not_finished: set[int] = set(ids)

        for participant in self.participants:
            self._refresh_next_velocity(participant)

    # -- Public API -----------------------------------------------------------

    @property
    def leaderboard(self) -> tuple[int, ...]:
        """Racer ids in the order last emitted."""
        return self._ranking

    @property
    def finished(self) -> frozenset[int]:
        """Racer ids that have crossed the finish line."""
        return frozenset(p.racer_id for p in self.participants) - self._not_finished

    def still_going(self) -> bool:
        """True while any participant is short of the lap target."""
        return any(p.lap_num < self.laps for p in self.participants)

    def step_race(self) -> list[str]:
        """Advance every participant by one tick.

        Returns:
            Telemetry lines for this tick in emission order: setup lines
            (first tick only), sampled positions, a leaderboard line if the
            order changed, then finish-line crossings.
        """
        messages: list[str] = []
        if self.time == 0:
            messages.extend(self._setup_messages())
            logger.info(
                "Race started: %d participants, %d laps, track %r",
                len(self.participants),
                self.laps,
                self.track.name,
            )

        for participant in self.participants:
            self._evaluate_constraints(participant)

            start = participant.position
            before = self.track.distance_to_next_boundary(start)
            participant.step()
            after = self.track.distance_to_next_boundary(participant.position)
            if start < 0.0:
                # Wrapped zone boundaries behind the start line do not count.
                if participant.position >= 0.0:
                    self._cross_boundary(participant)
            elif after > before:
                self._cross_boundary(participant)

            if self._rng.integers(self.telemetry_interval) == 0:
                messages.append(position_line(self.time, participant))

        board = self._new_leaderboard()
        if board is not None:
            messages.append(board)
        messages.extend(self._crossing_messages())
        self.time += 1
        return messages

    # -- Constraint evaluation ------------------------------------------------

    def _ramp_towards(self, current: float, target: float) -> RampConstraint:
        rate = self.acceleration if target > current else -self.deceleration
        return RampConstraint(rate=rate, target_velocity=target)

    def _evaluate_constraints(self, participant: Participant) -> None:
        if participant.position < 0.0:
            section = TrackSectionConstraint(SLOW, participant.base_speed)
            participant.add_constraint(section)
            if (
                not participant.has_constraint(ConstraintKind.RAMP)
                and participant.velocity != section.velocity
            ):
                participant.add_constraint(
                    self._ramp_towards(participant.velocity, section.velocity)
                )
            return

        participant.add_constraint(
            TrackSectionConstraint(
                self.track.speed_zone_at(participant.position),
                participant.base_speed,
            )
        )
        if participant.has_constraint(ConstraintKind.RAMP):
            return
        if participant.next_velocity == participant.velocity:
            return

        ramp = self._ramp_towards(participant.velocity, participant.next_velocity)
        needed = ramp_distance(participant.velocity, ramp.target_velocity, ramp.rate)
        remaining = self.track.distance_to_next_boundary(participant.position)
        if remaining <= needed:
            participant.add_constraint(ramp)
            logger.debug(
                "t=%d racer %d ramping %.3f -> %.3f over %.2f",
                self.time,
                participant.racer_id,
                participant.velocity,
                ramp.target_velocity,
                remaining,
            )

    def _refresh_next_velocity(self, participant: Participant) -> None:
        if participant.position < 0.0:
            participant.next_velocity = (
                self.track.speed_zone_at(0.0).multiplier * participant.base_speed
            )
        else:
            participant.calculate_next_velocity(self.track)

    def _cross_boundary(self, participant: Participant) -> None:
        participant.remove_constraint(ConstraintKind.RAMP)
        participant.set_velocity(participant.next_velocity)
        self._refresh_next_velocity(participant)
        logger.debug(
            "t=%d racer %d entered zone at %.2f, velocity %.3f",
            self.time,
            participant.racer_id,
            participant.position,
            participant.velocity,
        )

    # -- Telemetry ------------------------------------------------------------

    def _setup_messages(self) -> list[str]:
        lines = [registration_line(p) for p in self.participants]
        lines.append(leaderboard_line(0, self._ranking))
        return lines

    def _new_leaderboard(self) -> str | None:
        ranked = rank_participants(self.participants)
        self.participants = ranked
        ids = tuple(p.racer_id for p in ranked)
        if ids == self._ranking:
            return None
        self._ranking = ids
        return leaderboard_line(self.time, ids)

    def _crossing_messages(self) -> list[str]:
        """Finish lines for racers that reached the lap target this tick.

        Racers finishing on the same tick are reported in leaderboard order.
        """
        messages: list[str] = []
        for participant in self.participants:
            if (
                participant.racer_id in self._not_finished
                and participant.lap_num >= self.laps
            ):
                messages.append(crossing_line(self.time, participant, self.laps))
                self._not_finished.discard(participant.racer_id)
                logger.info(
                    "t=%d racer %d (%s) finished",
                    self.time,
                    participant.racer_id,
                    participant.name,
                )
        return messages
