"""Tests for participant kinematics and constraint slots."""

import pytest

from race_engine.core.constraint import (
    ConstraintKind,
    RampConstraint,
    TrackSectionConstraint,
)
from race_engine.core.errors import ConfigurationError
from race_engine.core.leaderboard import rank_participants, ranking_ids
from race_engine.core.participant import Participant
from race_engine.core.track import FAST, SLOW, Track, TrackZone

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _sample_track() -> Track:
    return Track(
        name="Split Oval",
        track_length=100.0,
        zones=(TrackZone(0.0, FAST), TrackZone(50.0, SLOW)),
    )


def _participant(racer_id: int = 1, position: float = 0.0, **kwargs) -> Participant:
    return Participant(
        racer_id=racer_id,
        name=f"Racer {racer_id}",
        position=position,
        track_length=100.0,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Stepping
# ---------------------------------------------------------------------------


def test_step_advances_by_velocity() -> None:
    p = _participant(position=10.0, velocity=2.0)
    p.step()
    assert p.position == pytest.approx(12.0)
    assert p.lap_num == 0


def test_step_wraps_and_counts_lap() -> None:
    p = _participant(position=99.0, velocity=2.0)
    p.step()
    assert p.position == pytest.approx(1.0)
    assert p.lap_num == 1


def test_step_applies_track_section() -> None:
    p = _participant(position=10.0, velocity=1.0)
    p.add_constraint(TrackSectionConstraint(FAST, base_speed=1.0))
    p.step()
    # Moves at the old velocity, then takes the zone velocity.
    assert p.position == pytest.approx(11.0)
    assert p.velocity == pytest.approx(2.0)


def test_step_ramp_takes_precedence_over_section() -> None:
    p = _participant(position=10.0, velocity=2.0)
    p.add_constraint(TrackSectionConstraint(FAST, base_speed=1.0))
    p.add_constraint(RampConstraint(rate=-0.5, target_velocity=0.5))
    p.step()
    assert p.velocity == pytest.approx(1.5)
    p.step()
    p.step()
    p.step()
    assert p.velocity == pytest.approx(0.5)


def test_negative_start_does_not_count_lap() -> None:
    p = _participant(position=-3.0, velocity=2.0)
    p.step()
    p.step()
    assert p.position == pytest.approx(1.0)
    assert p.lap_num == 0


def test_calculate_next_velocity() -> None:
    track = _sample_track()
    p = _participant(position=10.0, base_speed=2.0)
    assert p.calculate_next_velocity(track) == pytest.approx(1.0)
    assert p.next_velocity == pytest.approx(1.0)
    p.position = 70.0
    assert p.calculate_next_velocity(track) == pytest.approx(4.0)


# ---------------------------------------------------------------------------
# Constraint slots
# ---------------------------------------------------------------------------


def test_slot_replacement_is_wholesale() -> None:
    """Installing into an occupied slot discards the previous constraint."""
    p = _participant()
    first = RampConstraint(rate=0.1, target_velocity=2.0)
    second = RampConstraint(rate=-0.1, target_velocity=0.5)
    p.add_constraint(first)
    p.add_constraint(second)
    assert p.ramp is second
    assert p.track_constraint is None


def test_slots_are_independent() -> None:
    p = _participant()
    p.add_constraint(TrackSectionConstraint(SLOW, base_speed=1.0))
    p.add_constraint(RampConstraint(rate=0.1, target_velocity=2.0))
    assert p.has_constraint(ConstraintKind.TRACK)
    assert p.has_constraint(ConstraintKind.RAMP)

    p.remove_constraint(ConstraintKind.RAMP)
    assert not p.has_constraint(ConstraintKind.RAMP)
    assert p.has_constraint(ConstraintKind.TRACK)

    p.remove_constraint(ConstraintKind.TRACK)
    assert not p.has_constraint(ConstraintKind.TRACK)


def test_unknown_constraint_rejected() -> None:
    p = _participant()
    with pytest.raises(TypeError):
        p.add_constraint("track")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_empty_name_rejected() -> None:
    with pytest.raises(ConfigurationError, match="name"):
        Participant(racer_id=1, name="", position=0.0, track_length=100.0)


def test_non_positive_velocity_rejected() -> None:
    with pytest.raises(ConfigurationError, match="velocity"):
        _participant(velocity=0.0)


def test_velocity_defaults_to_base_speed() -> None:
    p = _participant(base_speed=1.5)
    assert p.velocity == 1.5
    p.set_velocity(0.75)
    assert p.velocity == 0.75


# ---------------------------------------------------------------------------
# Leaderboard ordering
# ---------------------------------------------------------------------------


def test_more_laps_ranks_ahead() -> None:
    leader = _participant(1, position=5.0)
    leader.lap_num = 2
    chaser = _participant(2, position=90.0)
    chaser.lap_num = 1
    assert ranking_ids([chaser, leader]) == (1, 2)


def test_position_breaks_lap_ties() -> None:
    a = _participant(1, position=10.0)
    b = _participant(2, position=30.0)
    assert ranking_ids([a, b]) == (2, 1)


def test_equal_keys_keep_input_order() -> None:
    a = _participant(7, position=10.0)
    b = _participant(3, position=10.0)
    assert ranking_ids([a, b]) == (7, 3)
    assert ranking_ids([b, a]) == (3, 7)


def test_rank_participants_returns_new_list() -> None:
    a = _participant(1, position=10.0)
    b = _participant(2, position=30.0)
    field = [a, b]
    ranked = rank_participants(field)
    assert ranked == [b, a]
    assert field == [a, b]
