# gully_backend/services/match_store.py
"""
Data-store facade used by the live scorer.

Loaders return rows (or None); every write returns a `StoreResult` instead of
raising, and rolls the session back when the database refuses the write. The
scorer decides what a failure means for its in-memory state.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from gully_backend.core.logger import get_logger
from gully_backend.core.scoring_engine import BallRecord, BallTransition, ScoreState
from gully_backend.models.match_model import Match, Innings, Ball, MatchPlayerStats
from gully_backend.models.player_model import TeamPlayer

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoreResult:
    ok: bool
    error: Optional[str] = None
    value: Any = None


def build_career_rows(
    match_id: int,
    first_innings: Innings,
    second: ScoreState,
    team_players: Dict[int, int],
) -> List[MatchPlayerStats]:
    """
    One row per player once the second innings ends.
    The side that batted first bowled the second innings and vice versa.
    Returns no rows when either team has no linked player.
    """
    first_batting = first_innings.batting_team_id
    second_batting = second.batting_team_id

    p1_id = team_players.get(first_batting)
    p2_id = team_players.get(second_batting)
    if p1_id is None or p2_id is None:
        logger.warning(f"⚠️ Match {match_id}: missing team -> player links, career stats skipped")
        return []

    return [
        MatchPlayerStats(
            match_id=match_id,
            player_id=p1_id,
            team_id=first_batting,
            runs_scored=first_innings.total_runs,
            balls_faced=first_innings.legal_balls_bowled,
            is_out=first_innings.total_wickets > 0,
            runs_conceded=second.total_runs,
            wickets_taken=second.total_wickets,
            legal_balls_bowled=second.legal_balls_bowled,
        ),
        MatchPlayerStats(
            match_id=match_id,
            player_id=p2_id,
            team_id=second_batting,
            runs_scored=second.total_runs,
            balls_faced=second.legal_balls_bowled,
            is_out=second.total_wickets > 0,
            runs_conceded=first_innings.total_runs,
            wickets_taken=first_innings.total_wickets,
            legal_balls_bowled=first_innings.legal_balls_bowled,
        ),
    ]


class MatchStore:
    def __init__(self, session: Session):
        self.session = session

    # ---------------------------------------------
    # Loaders
    # ---------------------------------------------
    def get_match(self, match_id: int) -> Optional[Match]:
        return self.session.get(Match, match_id)

    def get_innings(self, match_id: int, innings_number: int) -> Optional[Innings]:
        return self.session.exec(
            select(Innings).where(Innings.match_id == match_id, Innings.innings_number == innings_number)
        ).first()

    def latest_innings(self, match_id: int) -> Optional[Innings]:
        return self.session.exec(
            select(Innings)
            .where(Innings.match_id == match_id)
            .order_by(Innings.innings_number.desc())
        ).first()

    def load_balls(self, innings_id: int) -> List[Ball]:
        return list(self.session.exec(
            select(Ball).where(Ball.innings_id == innings_id).order_by(Ball.ball_index)
        ).all())

    def team_players(self, team_ids: Iterable[int]) -> Dict[int, int]:
        links = self.session.exec(select(TeamPlayer).where(TeamPlayer.team_id.in_(list(team_ids)))).all()
        return {link.team_id: link.player_id for link in links}

    # ---------------------------------------------
    # Writes
    # ---------------------------------------------
    def _fail(self, action: str, exc: SQLAlchemyError) -> StoreResult:
        self.session.rollback()
        logger.error(f"❌ {action} failed: {exc}")
        return StoreResult(ok=False, error=str(exc))

    def create_innings(self, match_id: int, innings_number: int, batting_team_id: int) -> StoreResult:
        try:
            innings = Innings(
                match_id=match_id,
                innings_number=innings_number,
                batting_team_id=batting_team_id,
                total_runs=0,
                total_wickets=0,
                legal_balls_bowled=0,
                is_completed=False,
            )
            self.session.add(innings)
            self.session.commit()
            self.session.refresh(innings)
            return StoreResult(ok=True, value=innings)
        except SQLAlchemyError as exc:
            return self._fail("Create innings", exc)

    def _write_innings_summary(self, state: ScoreState) -> None:
        innings = self.session.get(Innings, state.innings_id)
        innings.total_runs = state.total_runs
        innings.total_wickets = state.total_wickets
        innings.legal_balls_bowled = state.legal_balls_bowled
        innings.is_completed = state.is_innings_completed
        self.session.add(innings)

    def commit_ball(self, transition: BallTransition) -> StoreResult:
        """
        Stores one delivery in a single transaction:
        A. the ball row
        B. the innings summary
        C. if the match finished: the match outcome and both career rows
        Returns the new ball id as `value`.
        """
        state = transition.state
        ball = transition.ball
        try:
            ball_row = Ball(
                innings_id=state.innings_id,
                ball_index=ball.ball_index,
                runs_batter=ball.runs_batter,
                extras=ball.extras,
                is_wide=ball.is_wide,
                is_no_ball=ball.is_no_ball,
                is_wicket=ball.is_wicket,
                dismissal_kind=ball.dismissal_kind,
            )
            self.session.add(ball_row)
            self._write_innings_summary(state)

            if transition.match_finished:
                match = self.session.get(Match, state.match_id)
                match.winner_id = state.match_result.winner_id
                match.is_completed = True
                match.result_note = state.match_result.message
                self.session.add(match)

                first_innings = self.get_innings(state.match_id, 1)
                if first_innings is not None and state.innings_number == 2:
                    links = self.team_players([state.batting_team_id, state.bowling_team_id])
                    self.session.add_all(build_career_rows(state.match_id, first_innings, state, links))

            self.session.commit()
            return StoreResult(ok=True, value=ball_row.id)
        except SQLAlchemyError as exc:
            return self._fail("Save ball", exc)

    def revert_ball(self, previous: ScoreState, reverted: ScoreState, removed: BallRecord) -> StoreResult:
        """
        Mirror of commit_ball for undo: drops the ball row and rewrites the
        innings summary. Only balls of an innings still in play are undone,
        so there is never a match outcome or career row to take back.
        """
        try:
            self.session.exec(
                delete(Ball).where(Ball.innings_id == previous.innings_id, Ball.ball_index == removed.ball_index)
            )
            self._write_innings_summary(reverted)
            self.session.commit()
            return StoreResult(ok=True)
        except SQLAlchemyError as exc:
            return self._fail("Undo ball", exc)
