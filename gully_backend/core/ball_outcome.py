# gully_backend/core/ball_outcome.py
# Turns one keypad press into the run / extra / wicket deltas of a delivery.

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DismissalKind(str, Enum):
    """How the batter got out"""
    BOWLED = "bowled"
    CAUGHT = "caught"
    RUN_OUT = "run_out"
    HIT_SIX_OUT = "hit_six_out"   # clearing the boundary is out in gully rules
    STUMPED = "stumped"


class InputType(str, Enum):
    """The buttons on the scorer's keypad"""
    RUNS = "runs"
    WIDE = "wide"
    NO_BALL = "no_ball"
    WICKET = "wicket"


@dataclass(frozen=True)
class ScoreInput:
    type: InputType
    value: int = 0   # only meaningful for RUNS (0 or 1, enforced by the caller)

    @classmethod
    def runs(cls, value: int) -> "ScoreInput":
        return cls(InputType.RUNS, value)

    @classmethod
    def wide(cls) -> "ScoreInput":
        return cls(InputType.WIDE)

    @classmethod
    def no_ball(cls) -> "ScoreInput":
        return cls(InputType.NO_BALL)

    @classmethod
    def wicket(cls) -> "ScoreInput":
        return cls(InputType.WICKET)


@dataclass(frozen=True)
class BallOutcome:
    runs_to_batter: int = 0
    extras: int = 0
    is_wide: bool = False
    is_no_ball: bool = False
    is_wicket: bool = False
    is_legal_delivery: bool = True
    dismissal_kind: Optional[DismissalKind] = None

    @property
    def total_runs(self) -> int:
        return self.runs_to_batter + self.extras


def resolve_ball(score_input: ScoreInput, dismissal: Optional[DismissalKind] = None) -> BallOutcome:
    """
    Calculates the result of a keypad press.

    Rules:
    - runs(v): batter gets v, legal delivery
    - wide: 1 extra, does not count towards the ball quota
    - no_ball: 1 extra, does not count towards the ball quota.
      Running on a no-ball is not supported: a no-ball is always 1 run total.
    - wicket: batter out for 0 on a legal delivery (hit-six-out included)

    The dismissal kind is only kept for wickets.
    """
    if score_input.type == InputType.RUNS:
        return BallOutcome(runs_to_batter=score_input.value)

    if score_input.type == InputType.WIDE:
        return BallOutcome(extras=1, is_wide=True, is_legal_delivery=False)

    if score_input.type == InputType.NO_BALL:
        return BallOutcome(extras=1, is_no_ball=True, is_legal_delivery=False)

    return BallOutcome(is_wicket=True, dismissal_kind=dismissal)
