"""Track speed-zone model for the race simulation engine.

A track is a closed course of a fixed length, tiled by contiguous zones.
Each zone carries a speed multiplier that scales a participant's base
speed while inside it.  All position lookups wrap modulo the course length
so they are defined for any real position, including the negative
positions used before the start line.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from race_engine.core.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Zone speeds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrackSpeed:
    """Immutable description of a zone speed.

    Attributes:
        name: Label used in configuration files (e.g. "FAST").
        multiplier: Factor applied to a participant's base speed.
    """

    name: str
    multiplier: float

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("TrackSpeed name must be non-empty.")
        if self.multiplier <= 0.0:
            raise ConfigurationError("TrackSpeed multiplier must be > 0.")


# Pre-defined speeds -----------------------------------------------------------

SLOW = TrackSpeed(name="SLOW", multiplier=0.5)
MEDIUM = TrackSpeed(name="MEDIUM", multiplier=1.0)
FAST = TrackSpeed(name="FAST", multiplier=2.0)

TRACK_SPEEDS: dict[str, TrackSpeed] = {s.name: s for s in (SLOW, MEDIUM, FAST)}


@dataclass(frozen=True)
class TrackZone:
    """A contiguous track segment starting at ``start`` with constant speed."""

    start: float
    speed: TrackSpeed


# ---------------------------------------------------------------------------
# Track
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Track:
    """Closed course divided into speed zones.

    Attributes:
        name: Human-readable track name.
        track_length: Total course length (> 0).
        zones: Zones ordered by start offset.  The first zone must start at
            0 and every start must lie in ``[0, track_length)``.
    """

    name: str
    track_length: float
    zones: tuple[TrackZone, ...]

    def __post_init__(self) -> None:
        """Validate the zone layout."""
        if not self.name:
            raise ConfigurationError("Track name must not be empty.")
        if self.track_length <= 0.0:
            raise ConfigurationError("track_length must be > 0.")
        if not self.zones:
            raise ConfigurationError("Track must have at least one zone.")
        # Zones may arrive as a list from configuration.
        object.__setattr__(self, "zones", tuple(self.zones))
        if self.zones[0].start != 0.0:
            raise ConfigurationError("The first zone must start at 0.")
        starts = [z.start for z in self.zones]
        for prev, cur in zip(starts, starts[1:]):
            if cur <= prev:
                raise ConfigurationError(
                    f"Zone starts must be strictly increasing, got {prev} then {cur}."
                )
        if starts[-1] >= self.track_length:
            raise ConfigurationError(
                f"Zone start {starts[-1]} lies outside track of length "
                f"{self.track_length}."
            )

    @property
    def length(self) -> float:
        return self.track_length

    def _wrap(self, position: float) -> float:
        offset = position % self.track_length
        # Tiny negative positions can round up to exactly track_length.
        return 0.0 if offset >= self.track_length else offset

    def _zone_index(self, position: float) -> int:
        offset = self._wrap(position)
        return bisect_right([z.start for z in self.zones], offset) - 1

    def speed_zone_at(self, position: float) -> TrackSpeed:
        """Return the speed of the zone covering *position*."""
        return self.zones[self._zone_index(position)].speed

    def next_speed_zone_at(self, position: float) -> TrackSpeed:
        """Return the speed of the zone that follows the one at *position*."""
        idx = (self._zone_index(position) + 1) % len(self.zones)
        return self.zones[idx].speed

    def distance_to_next_boundary(self, position: float) -> float:
        """Distance from *position* to the next zone boundary.

        The result lies in ``(0, track_length]``; a position sitting exactly
        on a boundary measures to the boundary after it.
        """
        idx = self._zone_index(position)
        if idx + 1 < len(self.zones):
            boundary = self.zones[idx + 1].start
        else:
            boundary = self.track_length
        return boundary - self._wrap(position)
