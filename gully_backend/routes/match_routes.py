# gully_backend/routes/match_routes.py

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from gully_backend.core.ball_outcome import ScoreInput
from gully_backend.core.match_phase import phase_label
from gully_backend.core.nrr import balls_to_overs
from gully_backend.models.match_model import Match
from gully_backend.core.database import get_session
from gully_backend.models.schemas import BallRequest, BowlOutResultRequest, MatchStateRead, TossRequest
from gully_backend.services.match_session import MatchNotFound, MatchSession, start_match
from gully_backend.services.match_store import MatchStore
from gully_backend.services.progression import (
    build_event_bus,
    create_bowl_out,
    create_super_over,
    record_bowl_out,
)

router = APIRouter()


# ---------------------------------------------
# Helpers
# ---------------------------------------------
def serialize_state(live: MatchSession) -> dict:
    state = live.state
    result = state.match_result
    return MatchStateRead(
        match_id=state.match_id,
        season_id=state.season_id,
        round_number=state.round_number,
        phase=state.phase.value,
        innings_id=state.innings_id,
        innings_number=state.innings_number,
        batting_team_id=state.batting_team_id,
        bowling_team_id=state.bowling_team_id,
        total_runs=state.total_runs,
        total_wickets=state.total_wickets,
        legal_balls_bowled=state.legal_balls_bowled,
        overs=balls_to_overs(state.legal_balls_bowled),
        ball_cap=state.ball_cap,
        target=state.target,
        innings_status=state.innings_status.value,
        match_result={"winner_id": result.winner_id, "message": result.message} if result else None,
        balls=[asdict(ball) for ball in state.balls],
        error=live.error,
    ).model_dump()


def _load_live(session: Session, match_id: int) -> MatchSession:
    try:
        return MatchSession.load(MatchStore(session), match_id, build_event_bus(session))
    except MatchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


# =========================================
# MATCH STATE
# =========================================
@router.get("/{match_id}")
def get_match(match_id: int, session: Session = Depends(get_session)):
    """
    Match header plus the live scorer state (null until the toss is done).
    """
    match = session.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found.")

    live_state = None
    if match.innings:
        live_state = serialize_state(_load_live(session, match_id))

    return {
        "id": match.id,
        "season_id": match.season_id,
        "round_number": match.round_number,
        "label": phase_label(match.round_number),
        "team_a_id": match.team_a_id,
        "team_b_id": match.team_b_id,
        "winner_id": match.winner_id,
        "is_completed": match.is_completed,
        "result_note": match.result_note,
        "live": live_state,
    }


@router.get("/{match_id}/balls")
def get_ball_timeline(match_id: int, session: Session = Depends(get_session)):
    """Ball-by-ball log of the current innings, oldest first."""
    live = _load_live(session, match_id)
    return serialize_state(live)["balls"]


# =========================================
# SCORING
# =========================================
@router.post("/{match_id}/toss")
def toss(match_id: int, payload: TossRequest, session: Session = Depends(get_session)):
    """Record the toss; creates the first innings."""
    try:
        live = start_match(MatchStore(session), match_id, payload.toss_winner_id, payload.decision, build_event_bus(session))
    except MatchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return serialize_state(live)


@router.post("/{match_id}/balls")
def record_ball(match_id: int, payload: BallRequest, session: Session = Depends(get_session)):
    """
    Record one delivery. Balls after the innings/match ended are ignored.
    A failed save returns 409 with the rolled-back state; re-enter the ball.
    """
    live = _load_live(session, match_id)
    live.record_ball(ScoreInput(payload.type, payload.value), payload.dismissal_kind)
    if live.error:
        raise HTTPException(status_code=409, detail=live.error)
    return serialize_state(live)


@router.post("/{match_id}/undo")
def undo_ball(match_id: int, session: Session = Depends(get_session)):
    """Undo the most recent ball of the current innings."""
    live = _load_live(session, match_id)
    live.undo_last_ball()
    if live.error:
        raise HTTPException(status_code=409, detail=live.error)
    return serialize_state(live)


@router.post("/{match_id}/second-innings")
def start_second_innings(match_id: int, session: Session = Depends(get_session)):
    live = _load_live(session, match_id)
    if not live.start_second_innings():
        raise HTTPException(status_code=409, detail=live.error or "First innings is not finished yet.")
    return serialize_state(live)


# =========================================
# TIE-BREAKERS
# =========================================
@router.post("/{match_id}/super-over", status_code=201)
def start_super_over(match_id: int, session: Session = Depends(get_session)):
    try:
        super_over = create_super_over(session, match_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "⚡ Super Over created", "match_id": super_over.id, "round_number": super_over.round_number}


@router.post("/{match_id}/bowl-out", status_code=201)
def start_bowl_out(match_id: int, session: Session = Depends(get_session)):
    try:
        decider = create_bowl_out(session, match_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "🎯 Bowl Out created", "match_id": decider.id, "round_number": decider.round_number}


@router.post("/{match_id}/bowl-out/result")
def finish_bowl_out(match_id: int, payload: BowlOutResultRequest, session: Session = Depends(get_session)):
    try:
        match = record_bowl_out(session, match_id, payload.team_a_score, payload.team_b_score)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"match_id": match.id, "winner_id": match.winner_id, "result_note": match.result_note}
