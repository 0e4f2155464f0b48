"""Configuration loader for the race simulation engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from race_engine.core.errors import ConfigurationError
from race_engine.core.participant import Participant
from race_engine.core.race import DEFAULT_ACCELERATION, DEFAULT_DECELERATION, Race
from race_engine.core.roster import build_roster
from race_engine.core.track import TRACK_SPEEDS, Track, TrackZone
from race_engine.race_file import RaceHeader, expected_duration

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
DEFAULT_RACE_PATH: Path = DATA_DIR / "race_default.yaml"

DEFAULT_LAP_TIME: int = 60
DEFAULT_RACERS: int = 10
DEFAULT_LAPS: int = 1
DEFAULT_TELEMETRY_INTERVAL: int = 1

_REQUIRED_SECTIONS: tuple[str, ...] = ("race", "track")
_REQUIRED_TRACK_FIELDS: tuple[str, ...] = ("name", "length", "zones")
_REQUIRED_PARTICIPANT_FIELDS: tuple[str, ...] = ("id", "name")


@dataclass(frozen=True)
class RosterEntry:
    """One roster entry from the configuration file."""

    racer_id: int
    name: str
    start: float = 0.0


@dataclass(frozen=True)
class RaceConfig:
    """Everything needed to build and run one race.

    Attributes:
        name: Race title.
        track: Course to race on.
        laps: Lap target.
        telemetry_interval: Mean ticks between position samples.
        lap_time: Expected seconds per lap, used for the header duration.
        racers: Number of generated racers when ``participants`` is empty.
        participants: Explicit roster entries.
        acceleration: Ramp-up rate per tick.
        deceleration: Ramp-down rate per tick.
        base_speed: Reference speed scaled by zone multipliers.
        seed: Seed for roster generation and telemetry sampling.
        width: Track drawing width for the race header.
        height: Track drawing height for the race header.
    """

    name: str
    track: Track
    laps: int = DEFAULT_LAPS
    telemetry_interval: int = DEFAULT_TELEMETRY_INTERVAL
    lap_time: int = DEFAULT_LAP_TIME
    racers: int = DEFAULT_RACERS
    participants: tuple[RosterEntry, ...] = ()
    acceleration: float = DEFAULT_ACCELERATION
    deceleration: float = DEFAULT_DECELERATION
    base_speed: float = 1.0
    seed: int | None = None
    width: int = 5
    height: int = 4

    @property
    def racer_count(self) -> int:
        return len(self.participants) if self.participants else self.racers

    def with_seed(self, seed: int) -> RaceConfig:
        return replace(self, seed=seed)

    def build_participants(self, rng: np.random.Generator) -> list[Participant]:
        """Build the explicit roster, or draw one when none is configured."""
        if not self.participants:
            return build_roster(
                self.racers,
                self.track.length,
                rng,
                base_speed=self.base_speed,
            )
        return [
            Participant(
                racer_id=entry.racer_id,
                name=entry.name,
                position=entry.start,
                track_length=self.track.length,
                base_speed=self.base_speed,
            )
            for entry in self.participants
        ]

    def build_race(self) -> Race:
        """Create a fresh, unstepped race from this configuration."""
        rng = np.random.default_rng(self.seed)
        return Race(
            track=self.track,
            laps=self.laps,
            telemetry_interval=self.telemetry_interval,
            participants=self.build_participants(rng),
            acceleration=self.acceleration,
            deceleration=self.deceleration,
            rng=rng,
        )

    def header(self) -> RaceHeader:
        return RaceHeader(
            race_name=self.name,
            track_name=self.track.name,
            distance=self.track.length,
            expected_time=expected_duration(self.lap_time, self.laps),
            participants=self.racer_count,
            width=self.width,
            height=self.height,
        )


def _require(entry: dict[str, Any], fields: tuple[str, ...], where: str) -> None:
    for field in fields:
        if field not in entry:
            raise ConfigurationError(f"{where} is missing required field '{field}'")


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def _convert(
    entry: dict[str, Any], field: str, cast: Callable[[Any], Any], where: str, default: Any = None
) -> Any:
    """Read *field* from *entry* through *cast*, reporting bad values by name."""
    value = entry.get(field, default)
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"{where}: '{field}' must be {cast.__name__}, got {value!r}"
        ) from exc


def _parse_track(entry: dict[str, Any]) -> Track:
    _require(entry, _REQUIRED_TRACK_FIELDS, "track")
    if not isinstance(entry["zones"], list):
        raise ConfigurationError("track: 'zones' must be a list")
    zones: list[TrackZone] = []
    for idx, zone in enumerate(entry["zones"]):
        where = f"track zone {idx}"
        _mapping(zone, where)
        _require(zone, ("start", "speed"), where)
        speed_name = str(zone["speed"]).upper()
        if speed_name not in TRACK_SPEEDS:
            raise ConfigurationError(
                f"{where}: unknown speed '{zone['speed']}', "
                f"expected one of {sorted(TRACK_SPEEDS)}"
            )
        zones.append(
            TrackZone(
                start=_convert(zone, "start", float, where),
                speed=TRACK_SPEEDS[speed_name],
            )
        )
    return Track(
        name=str(entry["name"]),
        track_length=_convert(entry, "length", float, "track"),
        zones=tuple(zones),
    )


def _parse_participants(entries: Any) -> tuple[RosterEntry, ...]:
    if not isinstance(entries, list):
        raise ConfigurationError("participants must be a list")
    roster: list[RosterEntry] = []
    for idx, entry in enumerate(entries):
        where = f"participant {idx}"
        _mapping(entry, where)
        _require(entry, _REQUIRED_PARTICIPANT_FIELDS, where)
        roster.append(
            RosterEntry(
                racer_id=_convert(entry, "id", int, where),
                name=str(entry["name"]),
                start=_convert(entry, "start", float, where, 0.0),
            )
        )
    return tuple(roster)


def parse_race_config(data: dict[str, Any]) -> RaceConfig:
    """Convert a parsed YAML mapping into a :class:`RaceConfig`.

    Raises:
        ConfigurationError: If sections or fields are missing or invalid.
    """
    _mapping(data, "race configuration")
    _require(data, _REQUIRED_SECTIONS, "race configuration")

    race = _mapping(data["race"], "race")
    track_entry = _mapping(data["track"], "track")
    seed = race.get("seed")
    return RaceConfig(
        name=str(race.get("name", "Race")),
        track=_parse_track(track_entry),
        laps=_convert(race, "laps", int, "race", DEFAULT_LAPS),
        telemetry_interval=_convert(
            race, "telemetry_interval", int, "race", DEFAULT_TELEMETRY_INTERVAL
        ),
        lap_time=_convert(race, "lap_time", int, "race", DEFAULT_LAP_TIME),
        racers=_convert(race, "racers", int, "race", DEFAULT_RACERS),
        participants=_parse_participants(data.get("participants") or []),
        acceleration=_convert(race, "acceleration", float, "race", DEFAULT_ACCELERATION),
        deceleration=_convert(race, "deceleration", float, "race", DEFAULT_DECELERATION),
        base_speed=_convert(race, "base_speed", float, "race", 1.0),
        seed=None if seed is None else _convert(race, "seed", int, "race"),
        width=_convert(track_entry, "width", int, "track", 5),
        height=_convert(track_entry, "height", int, "track", 4),
    )


def load_race_config(path: Path | None = None) -> RaceConfig:
    """Load a race configuration from a YAML file.

    Args:
        path: Optional override for the configuration file path.

    Returns:
        The validated :class:`RaceConfig`.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ConfigurationError: If the file content is invalid.
    """
    config_path = path or DEFAULT_RACE_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Race configuration not found: {config_path}")

    with open(config_path, encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

    return parse_race_config(data)
