import pytest

from gully_backend.core.match_phase import (
    MatchPhase,
    innings_ball_cap,
    is_league_stage,
    is_tie_breaker,
    next_bowl_out_round,
    next_super_over_round,
    phase_for_round,
    phase_label,
    tie_message,
)


@pytest.mark.parametrize("round_number, phase", [
    (1, MatchPhase.LEAGUE),
    (14, MatchPhase.LEAGUE),
    (91, MatchPhase.QUALIFIER_1),
    (92, MatchPhase.QUALIFIER_2),
    (100, MatchPhase.FINAL),
    (101, MatchPhase.BOWL_OUT),
    (9011, MatchPhase.SUPER_OVER),
    (9012, MatchPhase.BOWL_OUT_DECIDER),
    (9031, MatchPhase.SUPER_OVER),
])
def test_phase_for_round(round_number, phase):
    assert phase_for_round(round_number) == phase


@pytest.mark.parametrize("round_number", [0, -3, 150, 9000, 9013])
def test_invalid_rounds_raise(round_number):
    with pytest.raises(ValueError):
        phase_for_round(round_number)


def test_ball_caps():
    assert innings_ball_cap(MatchPhase.LEAGUE) == 12
    assert innings_ball_cap(MatchPhase.FINAL) == 12
    assert innings_ball_cap(MatchPhase.BOWL_OUT) == 6
    assert innings_ball_cap(MatchPhase.SUPER_OVER) == 6
    assert innings_ball_cap(MatchPhase.BOWL_OUT_DECIDER) == 6


def test_tie_messages():
    assert tie_message(MatchPhase.LEAGUE) == "Match Tied (1 pt each)"
    assert tie_message(MatchPhase.FINAL) == "Match Tied! (Super Over needed)"
    assert tie_message(MatchPhase.BOWL_OUT) == "Bowl Out Needed!"
    assert tie_message(MatchPhase.SUPER_OVER) == "Bowl Out Needed!"
    assert tie_message(MatchPhase.BOWL_OUT_DECIDER) == "Bowl Out Needed!"


def test_stage_helpers():
    assert is_league_stage(5)
    assert is_league_stage(91)
    assert not is_league_stage(100)
    assert is_tie_breaker(MatchPhase.SUPER_OVER)
    assert not is_tie_breaker(MatchPhase.FINAL)


def test_labels():
    assert phase_label(3) == "Round 3"
    assert phase_label(100) == "GRAND FINAL"
    assert phase_label(101) == "BOWL OUT"
    assert phase_label(9011) == "SUPER OVER"


def test_tie_breaker_ordinals_never_collide():
    assert next_super_over_round([1, 2, 100]) == 9011
    assert next_bowl_out_round([]) == 9012
    assert next_bowl_out_round([1, 100, 9011]) == 9022
    assert next_super_over_round([9011, 9022]) == 9031
