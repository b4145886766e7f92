# gully_backend/models/schemas.py
# Pydantic request/response schemas for the HTTP layer

from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from gully_backend.core.ball_outcome import DismissalKind, InputType


class SeasonCreate(BaseModel):
    """Admin form: season name, team names and (optionally) the player behind each team."""
    name: str = Field(min_length=1)
    teams: List[str] = Field(min_length=2)
    players: Optional[List[str]] = None   # defaults to the team names

    @model_validator(mode="after")
    def check_players_match_teams(self):
        if self.players is not None and len(self.players) != len(self.teams):
            raise ValueError("players must list one name per team")
        return self


class TossRequest(BaseModel):
    toss_winner_id: int
    decision: Literal["bat", "bowl"]


class BallRequest(BaseModel):
    """One keypad press. Runs are restricted to 0 or 1 (no boundaries in gully rules)."""
    type: InputType
    value: Literal[0, 1] = 0
    dismissal_kind: Optional[DismissalKind] = None

    @model_validator(mode="after")
    def check_dismissal(self):
        if self.type == InputType.WICKET and self.dismissal_kind is None:
            raise ValueError("dismissal_kind is required for a wicket")
        return self


class BowlOutResultRequest(BaseModel):
    team_a_score: int = Field(ge=0)
    team_b_score: int = Field(ge=0)


class BallRead(BaseModel):
    id: Optional[int] = None
    ball_index: int
    runs_batter: int
    extras: int
    is_wide: bool
    is_no_ball: bool
    is_wicket: bool
    dismissal_kind: Optional[DismissalKind] = None

    class Config:
        from_attributes = True


class MatchResultRead(BaseModel):
    winner_id: Optional[int] = None
    message: str


class MatchStateRead(BaseModel):
    """Live scorer view of a match"""
    match_id: int
    season_id: int
    round_number: int
    phase: str
    innings_id: Optional[int] = None
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    total_runs: int
    total_wickets: int
    legal_balls_bowled: int
    overs: str
    ball_cap: int
    target: Optional[int] = None
    innings_status: str
    match_result: Optional[MatchResultRead] = None
    balls: List[BallRead] = []
    error: Optional[str] = None


class SeasonRead(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True
