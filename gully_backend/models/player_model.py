# player_model.py
# Global players (career identity across seasons) and the team -> player link.

from typing import Optional
from sqlmodel import SQLModel, Field


class Player(SQLModel, table=True):
    """Season-independent identity. Names match case-sensitively."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)


class TeamPlayer(SQLModel, table=True):
    """Each team links to exactly one player."""
    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="team.id", unique=True)
    player_id: int = Field(foreign_key="player.id", index=True)

