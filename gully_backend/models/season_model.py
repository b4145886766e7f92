# season_model.py
# Defines Season (one tournament: league stage + final) and its Teams.

from typing import Optional, List
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field, Relationship


class Season(SQLModel, table=True):
    """
    Represents one tournament. Created once by an admin together with its
    teams and league fixtures; never edited afterwards, only deleted.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    teams: List["Team"] = Relationship(back_populates="season")


class Team(SQLModel, table=True):
    """A side in one season. In 1v1 gully cricket a team is a single player."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    season_id: int = Field(foreign_key="season.id", index=True)

    season: Optional[Season] = Relationship(back_populates="teams")
