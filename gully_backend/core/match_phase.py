# gully_backend/core/match_phase.py
"""
Tournament phase of a match.

The persisted column stays a plain integer (`round_number`) so fixtures sort
naturally; everything that needs to branch on the phase goes through
`phase_for_round` instead of comparing magic numbers.

Ordinals:
    1..99     league rounds (91 / 92 are the playoff qualifiers)
    100       grand final
    101       bowl-out decider, played as a 6-ball innings pair
    >9000     tie-breakers: ...1 = super over, ...2 = bowl-out decider
              (all tie-breakers are 6-ball innings)
"""

from enum import Enum
from typing import Iterable

from gully_backend.core.match_config import (
    QUALIFIER_1_ROUND,
    QUALIFIER_2_ROUND,
    FINAL_ROUND,
    BOWL_OUT_ROUND,
    TIE_BREAKER_BASE,
    SUPER_OVER_SUFFIX,
    BOWL_OUT_SUFFIX,
    MAX_LEGAL_BALLS_REGULAR,
    MAX_LEGAL_BALLS_SUPER,
    MSG_TIE_LEAGUE,
    MSG_TIE_FINAL,
    MSG_TIE_DECIDER,
)


class MatchPhase(str, Enum):
    """Where a match sits in the tournament"""
    LEAGUE = "league"
    QUALIFIER_1 = "qualifier_1"
    QUALIFIER_2 = "qualifier_2"
    FINAL = "final"
    BOWL_OUT = "bowl_out"                  # round 101
    SUPER_OVER = "super_over"              # >9000, ends in 1
    BOWL_OUT_DECIDER = "bowl_out_decider"  # >9000, ends in 2


TIE_BREAKER_PHASES = {MatchPhase.BOWL_OUT, MatchPhase.SUPER_OVER, MatchPhase.BOWL_OUT_DECIDER}
SHORT_INNINGS_PHASES = {MatchPhase.BOWL_OUT, MatchPhase.SUPER_OVER, MatchPhase.BOWL_OUT_DECIDER}


def phase_for_round(round_number: int) -> MatchPhase:
    if round_number > TIE_BREAKER_BASE:
        if round_number % 10 == SUPER_OVER_SUFFIX:
            return MatchPhase.SUPER_OVER
        if round_number % 10 == BOWL_OUT_SUFFIX:
            return MatchPhase.BOWL_OUT_DECIDER
        raise ValueError(f"Unknown tie-breaker ordinal: {round_number}")
    if round_number == BOWL_OUT_ROUND:
        return MatchPhase.BOWL_OUT
    if round_number == FINAL_ROUND:
        return MatchPhase.FINAL
    if round_number == QUALIFIER_1_ROUND:
        return MatchPhase.QUALIFIER_1
    if round_number == QUALIFIER_2_ROUND:
        return MatchPhase.QUALIFIER_2
    if 1 <= round_number < FINAL_ROUND:
        return MatchPhase.LEAGUE
    raise ValueError(f"Invalid round number: {round_number}")


def is_league_stage(round_number: int) -> bool:
    """Everything below the final counts as league stage (qualifiers included)."""
    return round_number < FINAL_ROUND


def is_tie_breaker(phase: MatchPhase) -> bool:
    return phase in TIE_BREAKER_PHASES


def innings_ball_cap(phase: MatchPhase) -> int:
    """Legal deliveries allowed per innings in this phase."""
    if phase in SHORT_INNINGS_PHASES:
        return MAX_LEGAL_BALLS_SUPER
    return MAX_LEGAL_BALLS_REGULAR


def tie_message(phase: MatchPhase) -> str:
    if phase == MatchPhase.FINAL:
        return MSG_TIE_FINAL
    if phase in SHORT_INNINGS_PHASES:
        return MSG_TIE_DECIDER
    return MSG_TIE_LEAGUE


def phase_label(round_number: int) -> str:
    """Short label for fixture lists."""
    phase = phase_for_round(round_number)
    return {
        MatchPhase.FINAL: "GRAND FINAL",
        MatchPhase.BOWL_OUT: "BOWL OUT",
        MatchPhase.SUPER_OVER: "SUPER OVER",
        MatchPhase.BOWL_OUT_DECIDER: "BOWL OUT",
        MatchPhase.QUALIFIER_1: "QUALIFIER 1",
        MatchPhase.QUALIFIER_2: "QUALIFIER 2",
    }.get(phase, f"Round {round_number}")


def _next_tie_breaker_round(existing_rounds: Iterable[int], suffix: int) -> int:
    # Slot k lives at 9000 + 10k + suffix; slots are shared by both kinds so they never collide
    used_slots = [
        (r - TIE_BREAKER_BASE) // 10
        for r in existing_rounds
        if r > TIE_BREAKER_BASE
    ]
    next_slot = max(used_slots, default=0) + 1
    return TIE_BREAKER_BASE + 10 * next_slot + suffix


def next_super_over_round(existing_rounds: Iterable[int]) -> int:
    return _next_tie_breaker_round(existing_rounds, SUPER_OVER_SUFFIX)


def next_bowl_out_round(existing_rounds: Iterable[int]) -> int:
    return _next_tie_breaker_round(existing_rounds, BOWL_OUT_SUFFIX)
