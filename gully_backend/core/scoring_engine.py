# gully_backend/core/scoring_engine.py
"""
Pure ball-by-ball state transitions for one match.

Nothing in here touches the database: every function takes a frozen
`ScoreState` and returns a new one. `MatchSession` (services/match_session.py)
owns the live state, persists transitions and keeps the last committed
snapshot for rollback.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from gully_backend.core.ball_outcome import BallOutcome, DismissalKind
from gully_backend.core.match_config import MAX_WICKETS, MSG_CHASED, MSG_DEFENDED
from gully_backend.core.match_phase import MatchPhase, innings_ball_cap, phase_for_round, tie_message


class InningsStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class BallRecord:
    """One delivery as it is stored: the append-only log of an innings."""
    ball_index: int
    runs_batter: int = 0
    extras: int = 0
    is_wide: bool = False
    is_no_ball: bool = False
    is_wicket: bool = False
    dismissal_kind: Optional[DismissalKind] = None
    id: Optional[int] = None

    @property
    def is_legal(self) -> bool:
        return not self.is_wide and not self.is_no_ball

    @classmethod
    def from_outcome(cls, ball_index: int, outcome: BallOutcome) -> "BallRecord":
        return cls(
            ball_index=ball_index,
            runs_batter=outcome.runs_to_batter,
            extras=outcome.extras,
            is_wide=outcome.is_wide,
            is_no_ball=outcome.is_no_ball,
            is_wicket=outcome.is_wicket,
            dismissal_kind=outcome.dismissal_kind if outcome.is_wicket else None,
        )


@dataclass(frozen=True)
class InningsTotals:
    runs: int = 0
    wickets: int = 0
    legal_balls: int = 0


@dataclass(frozen=True)
class MatchResult:
    winner_id: Optional[int]   # None means tie
    message: str


@dataclass(frozen=True)
class ScoreState:
    match_id: int
    season_id: int
    round_number: int
    innings_id: Optional[int]
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    total_runs: int = 0
    total_wickets: int = 0
    legal_balls_bowled: int = 0
    balls: Tuple[BallRecord, ...] = ()
    target: Optional[int] = None
    innings_status: InningsStatus = InningsStatus.ACTIVE
    match_result: Optional[MatchResult] = None

    @property
    def phase(self) -> MatchPhase:
        return phase_for_round(self.round_number)

    @property
    def ball_cap(self) -> int:
        return innings_ball_cap(self.phase)

    @property
    def is_innings_completed(self) -> bool:
        return self.innings_status == InningsStatus.COMPLETED

    @property
    def is_match_finished(self) -> bool:
        return self.match_result is not None


@dataclass(frozen=True)
class BallTransition:
    state: ScoreState
    ball: BallRecord
    innings_over: bool
    match_finished: bool


def fold_balls(balls: Iterable[BallRecord]) -> InningsTotals:
    """Innings totals are always this fold over the ball log."""
    runs = wickets = legal = 0
    for ball in balls:
        runs += ball.runs_batter + ball.extras
        if ball.is_wicket:
            wickets += 1
        if ball.is_legal:
            legal += 1
    return InningsTotals(runs=runs, wickets=wickets, legal_balls=legal)


def _decide_result(state: ScoreState, runs: int, innings_over: bool) -> Tuple[bool, Optional[MatchResult]]:
    """
    Second innings only. Returns (innings_over, result).
    A first innings never produces a result on its own.
    """
    if state.innings_number != 2 or state.target is None:
        return innings_over, None

    if runs >= state.target:
        # Chase complete: ends immediately, even mid-over
        return True, MatchResult(winner_id=state.batting_team_id, message=MSG_CHASED)

    if not innings_over:
        return False, None

    if runs == state.target - 1:
        return True, MatchResult(winner_id=None, message=tie_message(state.phase))

    return True, MatchResult(winner_id=state.bowling_team_id, message=MSG_DEFENDED)


def apply_ball(state: ScoreState, outcome: BallOutcome) -> Optional[BallTransition]:
    """
    Applies one resolved delivery. Returns None (no-op) when the innings is
    already completed or the match already has a result.
    """
    if state.is_innings_completed or state.is_match_finished:
        return None

    ball = BallRecord.from_outcome(len(state.balls), outcome)

    new_runs = state.total_runs + outcome.total_runs
    new_wickets = state.total_wickets + (1 if outcome.is_wicket else 0)
    new_legal = state.legal_balls_bowled + (1 if outcome.is_legal_delivery else 0)

    innings_over = new_wickets >= MAX_WICKETS or new_legal >= state.ball_cap
    innings_over, result = _decide_result(state, new_runs, innings_over)

    new_state = replace(
        state,
        total_runs=new_runs,
        total_wickets=new_wickets,
        legal_balls_bowled=new_legal,
        balls=state.balls + (ball,),
        innings_status=InningsStatus.COMPLETED if innings_over else InningsStatus.ACTIVE,
        match_result=result,
    )
    return BallTransition(state=new_state, ball=ball, innings_over=innings_over, match_finished=result is not None)


def revert_last_ball(state: ScoreState) -> Optional[ScoreState]:
    """
    Drops the most recent ball of an innings that is still in play. Totals are
    recomputed from the remaining log. Returns None when there is nothing to
    undo or the innings is already completed: a finished innings (and any
    result it produced) is final.
    """
    if not state.balls or state.is_innings_completed:
        return None

    remaining = state.balls[:-1]
    totals = fold_balls(remaining)
    return replace(
        state,
        total_runs=totals.runs,
        total_wickets=totals.wickets,
        legal_balls_bowled=totals.legal_balls,
        balls=remaining,
    )


def second_innings_state(state: ScoreState, innings_id: int) -> ScoreState:
    """Swap sides and set the target. Only valid from the first innings."""
    if state.innings_number != 1:
        raise ValueError("Second innings can only follow the first innings.")

    return replace(
        state,
        innings_id=innings_id,
        innings_number=2,
        batting_team_id=state.bowling_team_id,
        bowling_team_id=state.batting_team_id,
        total_runs=0,
        total_wickets=0,
        legal_balls_bowled=0,
        balls=(),
        target=state.total_runs + 1,
        innings_status=InningsStatus.ACTIVE,
        match_result=None,
    )
