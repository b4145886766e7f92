# gully_backend/routes/season_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from gully_backend.core.database import get_session
from gully_backend.core.match_phase import phase_for_round, phase_label
from gully_backend.models.match_model import Match
from gully_backend.models.schemas import SeasonCreate, SeasonRead
from gully_backend.models.season_model import Season, Team
from gully_backend.services.progression import check_and_create_final
from gully_backend.services.season_service import create_season_with_fixtures, delete_season
from gully_backend.services.standings import calculate_stats

router = APIRouter()


def _get_season_or_404(session: Session, season_id: int) -> Season:
    season = session.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail=f"Season {season_id} not found.")
    return season


@router.post("", status_code=201)
def create_season(payload: SeasonCreate, session: Session = Depends(get_session)):
    """
    Create a season with its teams and the full double round-robin schedule.
    """
    try:
        season = create_season_with_fixtures(session, payload.name, payload.teams, payload.players)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    match_count = len(session.exec(select(Match.id).where(Match.season_id == season.id)).all())
    return {
        "message": f"✅ Season '{season.name}' created ({match_count} matches total)",
        "season_id": season.id,
    }


@router.get("", response_model=list[SeasonRead])
def list_seasons(session: Session = Depends(get_session)):
    return session.exec(select(Season).order_by(Season.created_at.desc())).all()


@router.get("/{season_id}")
def get_season(season_id: int, session: Session = Depends(get_session)):
    """
    Season with its teams and fixtures (league rounds, final and tie-breakers).
    """
    season = _get_season_or_404(session, season_id)
    teams = session.exec(select(Team).where(Team.season_id == season_id).order_by(Team.id)).all()
    team_names = {t.id: t.name for t in teams}

    matches = session.exec(
        select(Match).where(Match.season_id == season_id).order_by(Match.round_number, Match.id)
    ).all()

    return {
        "id": season.id,
        "name": season.name,
        "created_at": season.created_at,
        "teams": [{"id": t.id, "name": t.name} for t in teams],
        "matches": [
            {
                "id": m.id,
                "round_number": m.round_number,
                "phase": phase_for_round(m.round_number).value,
                "label": phase_label(m.round_number),
                "team_a_id": m.team_a_id,
                "team_a_name": team_names.get(m.team_a_id),
                "team_b_id": m.team_b_id,
                "team_b_name": team_names.get(m.team_b_id),
                "winner_id": m.winner_id,
                "is_completed": m.is_completed,
                "result_note": m.result_note,
            }
            for m in matches
        ],
    }


@router.delete("/{season_id}")
def remove_season(season_id: int, session: Session = Depends(get_session)):
    """Delete a season with its teams, matches, innings, balls and career rows."""
    if not delete_season(session, season_id):
        raise HTTPException(status_code=404, detail=f"Season {season_id} not found.")
    return {"message": f"🗑️ Season {season_id} deleted"}


@router.get("/{season_id}/stats")
def get_season_stats(season_id: int, session: Session = Depends(get_session)):
    """
    Points table (points, then NRR), batting and bowling leaderboards.
    Only completed matches count.
    """
    _get_season_or_404(session, season_id)

    teams = session.exec(select(Team).where(Team.season_id == season_id).order_by(Team.id)).all()
    matches = session.exec(
        select(Match).where(Match.season_id == season_id).options(selectinload(Match.innings))
    ).all()

    return calculate_stats(matches, teams).to_dict()


@router.post("/{season_id}/progress")
def progress_season(season_id: int, session: Session = Depends(get_session)):
    """Re-run the progression check (creates the final / bowl out when due)."""
    _get_season_or_404(session, season_id)
    result = check_and_create_final(session, season_id)
    return {
        "action": result.action.value,
        "match_id": result.match_id,
        "champion_id": result.champion_id,
    }
