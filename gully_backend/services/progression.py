# gully_backend/services/progression.py
"""
Tournament progression: what happens after a match finishes.

check_and_create_final() looks at the whole season every time it runs:
    1. bowl-out (101) exists   -> finished or still being played, nothing to do
    2. final (100) exists      -> tied final gets a bowl-out (101)
    3. league stage complete   -> top two of the standings meet in the final

Every branch checks for an existing row before inserting, so running it twice
in a row creates nothing new. Two concurrent runs can still both see "no final
yet"; there is no lock against that.

Super overs and bowl-out deciders after a tie are started by hand from the
match screen (create_super_over / create_bowl_out / record_bowl_out).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from gully_backend.core.logger import get_logger
from gully_backend.core.match_config import (
    BOWL_OUT_ROUND,
    FINAL_ROUND,
    MSG_BOWL_OUT_WIN,
    NOTE_BOWL_OUT,
    NOTE_FINAL,
    NOTE_SUPER_OVER,
)
from gully_backend.core.match_phase import (
    MatchPhase,
    is_league_stage,
    is_tie_breaker,
    next_bowl_out_round,
    next_super_over_round,
)
from gully_backend.models.match_model import Match
from gully_backend.models.season_model import Team
from gully_backend.services.events import EventBus, MatchCompleted
from gully_backend.services.standings import calculate_stats

logger = get_logger(__name__)


class ProgressionAction(str, Enum):
    TOURNAMENT_OVER = "tournament_over"
    BOWL_OUT_PENDING = "bowl_out_pending"
    BOWL_OUT_CREATED = "bowl_out_created"
    FINAL_PENDING = "final_pending"
    FINAL_CREATED = "final_created"
    LEAGUE_IN_PROGRESS = "league_in_progress"
    NOT_ENOUGH_TEAMS = "not_enough_teams"


@dataclass(frozen=True)
class ProgressionResult:
    action: ProgressionAction
    match_id: Optional[int] = None      # the match created or awaited
    champion_id: Optional[int] = None


def _season_matches(session: Session, season_id: int) -> List[Match]:
    return list(session.exec(
        select(Match)
        .where(Match.season_id == season_id)
        .options(selectinload(Match.innings))
        .order_by(Match.round_number, Match.id)
    ).all())


def _create_match(session: Session, season_id: int, round_number: int, team_a_id: int, team_b_id: int, note: str) -> Match:
    match = Match(
        season_id=season_id,
        round_number=round_number,
        team_a_id=team_a_id,
        team_b_id=team_b_id,
        is_completed=False,
        result_note=note,
    )
    session.add(match)
    session.commit()
    session.refresh(match)
    return match


def check_and_create_final(session: Session, season_id: int) -> ProgressionResult:
    """Checks for league completion and creates the next knockout match if due."""
    logger.debug(f"Checking season {season_id} for league completion...")

    matches = _season_matches(session, season_id)

    # --- Bowl out (round 101) ---
    bowl_out = next((m for m in matches if m.round_number == BOWL_OUT_ROUND), None)
    if bowl_out:
        if bowl_out.is_completed:
            logger.info(f"🏆 Season {season_id}: Bowl Out complete. Tournament finished.")
            return ProgressionResult(ProgressionAction.TOURNAMENT_OVER, bowl_out.id, bowl_out.winner_id)
        return ProgressionResult(ProgressionAction.BOWL_OUT_PENDING, bowl_out.id)

    # --- Final (round 100) ---
    final = next((m for m in matches if m.round_number == FINAL_ROUND), None)
    if final:
        if not final.is_completed:
            return ProgressionResult(ProgressionAction.FINAL_PENDING, final.id)

        if final.winner_id is not None:
            logger.info(f"🏆 Season {season_id}: Final complete. Champion is team {final.winner_id}.")
            return ProgressionResult(ProgressionAction.TOURNAMENT_OVER, final.id, final.winner_id)

        logger.info(f"⚠️ Season {season_id}: Final was a TIE! Creating Bowl Out (round {BOWL_OUT_ROUND})...")
        decider = _create_match(session, season_id, BOWL_OUT_ROUND, final.team_a_id, final.team_b_id, NOTE_BOWL_OUT)
        return ProgressionResult(ProgressionAction.BOWL_OUT_CREATED, decider.id)

    # --- League stage ---
    league_matches = [m for m in matches if is_league_stage(m.round_number)]
    if not league_matches or any(not m.is_completed for m in league_matches):
        return ProgressionResult(ProgressionAction.LEAGUE_IN_PROGRESS)

    teams = session.exec(select(Team).where(Team.season_id == season_id).order_by(Team.id)).all()
    standings = calculate_stats(league_matches, teams).standings
    if len(standings) < 2:
        return ProgressionResult(ProgressionAction.NOT_ENOUGH_TEAMS)

    first, second = standings[0], standings[1]
    logger.info(f"🏏 Season {season_id}: creating Final {first.name} vs {second.name}")
    final = _create_match(session, season_id, FINAL_ROUND, first.team_id, second.team_id, NOTE_FINAL)
    return ProgressionResult(ProgressionAction.FINAL_CREATED, final.id)


class ProgressionWorker:
    """
    Consumes MatchCompleted events and runs the progression check.
    Results from tie-breaker rounds are ignored: they never create follow-ups.
    """

    def __init__(self, session: Session):
        self.session = session
        self.results: List[ProgressionResult] = []

    def handle(self, event: MatchCompleted) -> None:
        if is_tie_breaker(event.phase):
            logger.debug(f"Match {event.match_id} is a {event.phase.value}, skipping progression")
            return
        self.results.append(check_and_create_final(self.session, event.season_id))

    def attach(self, events: EventBus) -> "ProgressionWorker":
        events.subscribe(MatchCompleted, self.handle)
        return self


def build_event_bus(session: Session) -> EventBus:
    """Event bus with the progression worker already listening."""
    events = EventBus()
    ProgressionWorker(session).attach(events)
    return events


# =========================================
# Manual tie-breakers
# =========================================
def _tied_match(session: Session, match_id: int) -> Match:
    match = session.get(Match, match_id)
    if not match:
        raise LookupError(f"Match {match_id} not found.")
    if not match.is_completed or match.winner_id is not None:
        raise ValueError("Only a completed, tied match can go to a tie-breaker.")
    return match


def _existing_rounds(session: Session, season_id: int) -> List[int]:
    return list(session.exec(select(Match.round_number).where(Match.season_id == season_id)).all())


def create_super_over(session: Session, match_id: int) -> Match:
    """A tied final (or later knockout) gets a one-over-a-side super over between the same teams."""
    match = _tied_match(session, match_id)
    if is_league_stage(match.round_number):
        raise ValueError("League ties are shared (1 pt each); no super over.")

    round_number = next_super_over_round(_existing_rounds(session, match.season_id))
    super_over = _create_match(session, match.season_id, round_number, match.team_a_id, match.team_b_id, NOTE_SUPER_OVER)
    logger.info(f"⚡ Super Over created for match {match_id} (round {round_number})")
    return super_over


def create_bowl_out(session: Session, match_id: int) -> Match:
    """A tied super over is settled by a bowl-out between the same teams."""
    match = _tied_match(session, match_id)
    if match.phase != MatchPhase.SUPER_OVER:
        raise ValueError("A bowl-out decider follows a tied super over.")

    round_number = next_bowl_out_round(_existing_rounds(session, match.season_id))
    decider = _create_match(session, match.season_id, round_number, match.team_a_id, match.team_b_id, NOTE_BOWL_OUT)
    logger.info(f"🎯 Bowl Out created for match {match_id} (round {round_number})")
    return decider


def record_bowl_out(session: Session, match_id: int, team_a_score: int, team_b_score: int) -> Match:
    """
    Settles a bowl-out by counted hits. The bowl-out cannot end level:
    equal scores are rejected and the teams keep bowling.
    """
    match = session.get(Match, match_id)
    if not match:
        raise LookupError(f"Match {match_id} not found.")
    if match.phase not in (MatchPhase.BOWL_OUT, MatchPhase.BOWL_OUT_DECIDER):
        raise ValueError("Only bowl-out matches take a counted result.")
    if match.winner_id is not None:
        raise ValueError("Bowl out already decided.")
    if team_a_score == team_b_score:
        raise ValueError("Bowl out scores are level. Keep bowling.")

    match.winner_id = match.team_a_id if team_a_score > team_b_score else match.team_b_id
    match.is_completed = True
    match.result_note = MSG_BOWL_OUT_WIN
    session.add(match)
    session.commit()
    session.refresh(match)

    logger.info(f"🏆 Bowl Out {match_id} won by team {match.winner_id} ({team_a_score}-{team_b_score})")
    return match
