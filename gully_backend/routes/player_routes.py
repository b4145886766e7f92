# gully_backend/routes/player_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from gully_backend.core.database import get_session
from gully_backend.models.match_model import MatchPlayerStats
from gully_backend.models.player_model import Player
from gully_backend.services.career import load_career, player_summaries

router = APIRouter()


@router.get("")
def list_players(search: Optional[str] = None, session: Session = Depends(get_session)):
    """All players with career matches, runs, wickets and average (most runs first)."""
    players = session.exec(select(Player).order_by(Player.name)).all()
    rows = session.exec(select(MatchPlayerStats)).all()
    return player_summaries(players, rows, search)


@router.get("/{player_id}")
def get_player(player_id: int, session: Session = Depends(get_session)):
    """Career profile: batting and bowling aggregates plus match history."""
    profile = load_career(session, player_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Player {player_id} not found.")
    return profile
