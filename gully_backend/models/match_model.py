# match_model.py
# Defines Match (fixtures and results), Innings, Ball (the ball-by-ball log)
# and MatchPlayerStats (career rows written when a match finishes).

from typing import Optional, List
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field, Relationship

from gully_backend.core.ball_outcome import DismissalKind
from gully_backend.core.match_phase import MatchPhase, phase_for_round


class Match(SQLModel, table=True):
    """
    A scheduled match between two teams of a season.
    `round_number` doubles as the tournament phase (see core/match_phase.py).
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    season_id: int = Field(foreign_key="season.id", index=True)
    team_a_id: int = Field(foreign_key="team.id")
    team_b_id: int = Field(foreign_key="team.id")

    round_number: int = Field(index=True)

    # Results (populated when the second innings ends)
    winner_id: Optional[int] = Field(default=None, foreign_key="team.id")   # None = undecided or tie
    is_completed: bool = False
    result_note: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    innings: List["Innings"] = Relationship(
        back_populates="match",
        sa_relationship_kwargs={"order_by": "Innings.innings_number"},
    )

    @property
    def phase(self) -> MatchPhase:
        return phase_for_round(self.round_number)

    def other_team(self, team_id: int) -> int:
        return self.team_b_id if team_id == self.team_a_id else self.team_a_id


class Innings(SQLModel, table=True):
    """One team's batting turn. Totals are a materialized fold over its balls."""
    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    innings_number: int = Field(ge=1, le=2)
    batting_team_id: int = Field(foreign_key="team.id")

    total_runs: int = 0
    total_wickets: int = 0
    legal_balls_bowled: int = 0
    is_completed: bool = False

    match: Optional[Match] = Relationship(back_populates="innings")


class Ball(SQLModel, table=True):
    """A single delivery. Append-only, removed only by undo."""
    id: Optional[int] = Field(default=None, primary_key=True)
    innings_id: int = Field(foreign_key="innings.id", index=True)
    ball_index: int                        # 0-based, gapless within an innings

    runs_batter: int = Field(default=0, ge=0, le=1)
    extras: int = Field(default=0, ge=0, le=1)
    is_wide: bool = False
    is_no_ball: bool = False
    is_wicket: bool = False
    dismissal_kind: Optional[DismissalKind] = None


class MatchPlayerStats(SQLModel, table=True):
    """
    Per-match career line for one player.
    Written once when a match finishes.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    team_id: int = Field(foreign_key="team.id")

    # Batting
    runs_scored: int = 0
    balls_faced: int = 0
    is_out: bool = False

    # Bowling
    runs_conceded: int = 0
    wickets_taken: int = 0
    legal_balls_bowled: int = 0

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
