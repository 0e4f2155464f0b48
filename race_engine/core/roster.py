"""Starting roster generation for the race simulation engine."""

from __future__ import annotations

from collections.abc import Sequence

from numpy.random import Generator

from race_engine.core.errors import ConfigurationError
from race_engine.core.participant import Participant

MAX_RACER_ID: int = 100  # racer ids are drawn from [0, MAX_RACER_ID)


def build_roster(
    count: int,
    track_length: float,
    rng: Generator,
    start: float = 0.0,
    base_speed: float = 1.0,
    names: Sequence[str] | None = None,
) -> list[Participant]:
    """Create *count* participants with distinct random ids.

    Args:
        count: Number of racers (1 to ``MAX_RACER_ID``).
        track_length: Course length used for lap wrapping.
        rng: Generator the ids are drawn from.
        start: Common start position.
        base_speed: Reference speed for every racer.
        names: Optional display names, one per racer.  Defaults to
            ``"Racer <id>"``.

    Returns:
        Participants ordered by draw order.

    Raises:
        ConfigurationError: If count is out of range or the number of names
            does not match.
    """
    if count < 1:
        raise ConfigurationError("Roster must contain at least one racer.")
    if count > MAX_RACER_ID:
        raise ConfigurationError(
            f"Cannot create more than {MAX_RACER_ID} racers, got {count}."
        )
    if names is not None and len(names) != count:
        raise ConfigurationError(
            f"Expected {count} racer names, got {len(names)}."
        )

    ids = rng.choice(MAX_RACER_ID, size=count, replace=False)
    roster: list[Participant] = []
    for i, racer_id in enumerate(ids):
        name = names[i] if names is not None else f"Racer {int(racer_id)}"
        roster.append(
            Participant(
                racer_id=int(racer_id),
                name=name,
                position=start,
                track_length=track_length,
                base_speed=base_speed,
            )
        )
    return roster
