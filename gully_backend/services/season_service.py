# season_service.py
# Creating and deleting whole seasons (teams, players, fixtures).

from typing import List, Optional, Sequence

from sqlalchemy import delete
from sqlmodel import Session, select

from gully_backend.core.logger import get_logger
from gully_backend.models.season_model import Season, Team
from gully_backend.models.player_model import Player, TeamPlayer
from gully_backend.models.match_model import Match, Innings, Ball, MatchPlayerStats
from gully_backend.services.generate_fixtures import create_league_fixtures

logger = get_logger(__name__)


def get_or_create_player(session: Session, name: str) -> Player:
    """Players are global: reuse an exact (case-sensitive) name match, otherwise create one."""
    player = session.exec(select(Player).where(Player.name == name)).first()
    if player:
        return player

    player = Player(name=name)
    session.add(player)
    session.flush()
    return player


def create_season_with_fixtures(
    session: Session,
    name: str,
    team_names: Sequence[str],
    player_names: Optional[Sequence[str]] = None,
) -> Season:
    """
    Creates a season, its teams, the player behind each team and the full
    league schedule in one transaction.
    """
    name = name.strip()
    team_names = [t.strip() for t in team_names]
    if not name:
        raise ValueError("Please enter a season name.")
    if any(not t for t in team_names):
        raise ValueError("All team names must be filled.")
    if len(team_names) < 2:
        raise ValueError("A season needs at least two teams.")

    if player_names is None:
        player_names = team_names
    player_names = [p.strip() for p in player_names]
    if len(player_names) != len(team_names):
        raise ValueError("Each team needs exactly one player.")

    # 1. Season
    season = Season(name=name)
    session.add(season)
    session.flush()

    # 2. Teams + player links
    teams: List[Team] = []
    for team_name, player_name in zip(team_names, player_names):
        team = Team(name=team_name, season_id=season.id)
        session.add(team)
        session.flush()

        player = get_or_create_player(session, player_name or team_name)
        session.add(TeamPlayer(team_id=team.id, player_id=player.id))
        teams.append(team)

    # 3. League fixtures
    create_league_fixtures(session, season.id, [t.id for t in teams])

    session.commit()
    session.refresh(season)
    logger.info(f"🏏 Season '{season.name}' created with {len(teams)} teams")
    return season


def delete_season(session: Session, season_id: int) -> bool:
    """
    Deletes a season and everything hanging off it, children first.
    Players are global and survive.
    """
    season = session.get(Season, season_id)
    if not season:
        return False

    match_ids = select(Match.id).where(Match.season_id == season_id)
    innings_ids = select(Innings.id).where(Innings.match_id.in_(match_ids))
    team_ids = select(Team.id).where(Team.season_id == season_id)

    session.exec(delete(MatchPlayerStats).where(MatchPlayerStats.match_id.in_(match_ids)))
    session.exec(delete(Ball).where(Ball.innings_id.in_(innings_ids)))
    session.exec(delete(Innings).where(Innings.match_id.in_(match_ids)))
    session.exec(delete(Match).where(Match.season_id == season_id))
    session.exec(delete(TeamPlayer).where(TeamPlayer.team_id.in_(team_ids)))
    session.exec(delete(Team).where(Team.season_id == season_id))
    session.exec(delete(Season).where(Season.id == season_id))
    session.commit()

    logger.info(f"🗑️ Season {season_id} deleted")
    return True
