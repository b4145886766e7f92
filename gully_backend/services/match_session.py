# gully_backend/services/match_session.py
"""
Live scorer for one match.

A MatchSession owns the in-memory ScoreState of a single match. Every
mutation is applied optimistically, then persisted through the MatchStore:

- record_ball: on a failed write the state snaps back to the last committed
  snapshot and `error` is set. The ball is not retried; the scorer re-enters it.
- undo_last_ball: only while the innings is in play; on a failed write the
  whole state is reloaded from the store.

Finished matches are announced on the EventBus as MatchCompleted; the
progression worker listens there instead of being called from here.
"""

from dataclasses import replace
from typing import Optional

from gully_backend.core.ball_outcome import DismissalKind, ScoreInput, resolve_ball
from gully_backend.core.logger import get_logger
from gully_backend.core.match_config import ERR_SAVE_BALL, ERR_SECOND_INNINGS, ERR_UNDO
from gully_backend.core.scoring_engine import (
    BallRecord,
    InningsStatus,
    MatchResult,
    ScoreState,
    apply_ball,
    revert_last_ball,
    second_innings_state,
)
from gully_backend.services.events import BallRecorded, EventBus, MatchCompleted
from gully_backend.services.match_store import MatchStore

logger = get_logger(__name__)


class MatchNotFound(LookupError):
    pass


def load_state(store: MatchStore, match_id: int) -> ScoreState:
    """
    Rebuilds the live state from the persisted Match, its latest Innings and
    that innings' balls. A second innings gets target = first innings + 1.
    """
    match = store.get_match(match_id)
    if not match:
        raise MatchNotFound(f"Match {match_id} not found.")

    innings = store.latest_innings(match_id)
    if not innings:
        raise ValueError(f"Match {match_id} has no innings yet. Do the toss first.")

    batting_id = innings.batting_team_id
    bowling_id = match.other_team(batting_id)

    target = None
    if innings.innings_number == 2:
        first = store.get_innings(match_id, 1)
        target = first.total_runs + 1 if first else None

    balls = tuple(
        BallRecord(
            ball_index=b.ball_index,
            runs_batter=b.runs_batter,
            extras=b.extras,
            is_wide=b.is_wide,
            is_no_ball=b.is_no_ball,
            is_wicket=b.is_wicket,
            dismissal_kind=b.dismissal_kind,
            id=b.id,
        )
        for b in store.load_balls(innings.id)
    )

    result = None
    if match.is_completed:
        result = MatchResult(winner_id=match.winner_id, message=match.result_note or "")

    return ScoreState(
        match_id=match.id,
        season_id=match.season_id,
        round_number=match.round_number,
        innings_id=innings.id,
        innings_number=innings.innings_number,
        batting_team_id=batting_id,
        bowling_team_id=bowling_id,
        total_runs=innings.total_runs,
        total_wickets=innings.total_wickets,
        legal_balls_bowled=innings.legal_balls_bowled,
        balls=balls,
        target=target,
        innings_status=InningsStatus.COMPLETED if innings.is_completed else InningsStatus.ACTIVE,
        match_result=result,
    )


class MatchSession:
    def __init__(self, store: MatchStore, state: ScoreState, events: Optional[EventBus] = None):
        self.store = store
        self.state = state
        self._committed = state
        self.events = events or EventBus()
        self.error: Optional[str] = None

    @classmethod
    def load(cls, store: MatchStore, match_id: int, events: Optional[EventBus] = None) -> "MatchSession":
        return cls(store, load_state(store, match_id), events)

    def reload(self) -> None:
        """Throw away local state and rebuild it from the store."""
        self.state = load_state(self.store, self.state.match_id)
        self._committed = self.state
        self.error = None

    # ---------------------------------------------
    # Scoring
    # ---------------------------------------------
    def record_ball(self, score_input: ScoreInput, dismissal: Optional[DismissalKind] = None) -> bool:
        """Returns True when the ball was applied and stored."""
        transition = apply_ball(self.state, resolve_ball(score_input, dismissal))
        if transition is None:
            return False

        # Optimistic update
        self.state = transition.state
        self.error = None

        result = self.store.commit_ball(transition)
        if not result.ok:
            logger.error(f"❌ Ball {transition.ball.ball_index} of match {self.state.match_id} not saved, rolling back")
            self.state = self._committed
            self.error = ERR_SAVE_BALL
            return False

        stored_ball = replace(transition.ball, id=result.value)
        self.state = replace(self.state, balls=self.state.balls[:-1] + (stored_ball,))
        self._committed = self.state

        self.events.publish(BallRecorded(
            match_id=self.state.match_id,
            innings_id=self.state.innings_id,
            ball_index=stored_ball.ball_index,
            total_runs=self.state.total_runs,
            total_wickets=self.state.total_wickets,
            legal_balls_bowled=self.state.legal_balls_bowled,
        ))

        if transition.match_finished:
            outcome = self.state.match_result
            logger.info(f"🏆 Match {self.state.match_id} finished: {outcome.message}")
            self.events.publish(MatchCompleted(
                match_id=self.state.match_id,
                season_id=self.state.season_id,
                round_number=self.state.round_number,
                phase=self.state.phase,
                winner_id=outcome.winner_id,
                message=outcome.message,
            ))
        return True

    def start_second_innings(self) -> bool:
        """Swap sides once the first innings is over and chase first innings + 1."""
        if self.state.innings_number != 1 or not self.state.is_innings_completed:
            return False

        result = self.store.create_innings(self.state.match_id, 2, self.state.bowling_team_id)
        if not result.ok:
            self.error = ERR_SECOND_INNINGS
            return False

        self.state = second_innings_state(self.state, result.value.id)
        self._committed = self.state
        self.error = None
        return True

    def undo_last_ball(self) -> bool:
        """
        Reverts the single most recent ball of the current innings.
        Refused (False) once the innings is completed: its result may already
        have moved the tournament on.
        """
        if self.state.is_innings_completed:
            return False

        reverted = revert_last_ball(self.state)
        if reverted is None:
            return False

        previous = self.state
        self.state = reverted

        result = self.store.revert_ball(previous, reverted, previous.balls[-1])
        if not result.ok:
            logger.error(f"❌ Undo failed for match {previous.match_id}, reloading from the database")
            self.reload()
            self.error = ERR_UNDO
            return False

        self._committed = self.state
        self.error = None
        return True


def start_match(
    store: MatchStore,
    match_id: int,
    toss_winner_id: int,
    decision: str,
    events: Optional[EventBus] = None,
) -> MatchSession:
    """
    Records the toss by creating the first innings.
    decision == "bat": the toss winner bats, "bowl": the other side bats.
    """
    match = store.get_match(match_id)
    if not match:
        raise MatchNotFound(f"Match {match_id} not found.")
    if toss_winner_id not in (match.team_a_id, match.team_b_id):
        raise ValueError("Toss winner must be one of the two teams.")
    if decision not in ("bat", "bowl"):
        raise ValueError("Decision must be 'bat' or 'bowl'.")
    if store.latest_innings(match_id):
        raise ValueError("Toss already done for this match.")

    batting_id = toss_winner_id if decision == "bat" else match.other_team(toss_winner_id)

    result = store.create_innings(match_id, 1, batting_id)
    if not result.ok:
        raise RuntimeError(f"Failed to save toss: {result.error}")

    logger.info(f"🪙 Match {match_id}: team {toss_winner_id} won the toss and chose to {decision}")
    return MatchSession.load(store, match_id, events)
